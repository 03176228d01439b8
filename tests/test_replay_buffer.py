"""
Tests for the prioritized replay memory.

These tests verify:
    - Storage and FIFO eviction
    - Priority assignment
    - Priority-proportional sampling without duplicates
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from demonbot.ai.replay_buffer import PrioritizedReplayMemory, Transition


@pytest.fixture
def memory(rng):
    """Create a small memory."""
    return PrioritizedReplayMemory(capacity=10, rng=rng)


def push_n(memory, n, reward=1.0):
    for i in range(n):
        state = np.full(4, float(i))
        memory.push(state, i % 5, reward, state + 1, False)


class TestPush:
    """Test transition storage."""

    def test_starts_empty(self, memory):
        """Memory should start empty."""
        assert len(memory) == 0

    def test_push_increases_size(self, memory):
        """Each push should add one transition."""
        push_n(memory, 3)
        assert len(memory) == 3

    def test_capacity_is_respected(self, memory):
        """Memory should never exceed its capacity."""
        push_n(memory, 25)
        assert len(memory) == 10

    def test_oldest_is_evicted_first(self, memory):
        """When full, the oldest transitions are dropped."""
        push_n(memory, 12)
        states = sorted(t.state[0] for t in memory.sample(10))
        assert states == [float(i) for i in range(2, 12)]

    def test_priority_is_abs_reward_plus_one(self, memory):
        """Priority should be |reward| + 1."""
        memory.push(np.zeros(4), 0, -7.5, np.zeros(4), True)
        transition = memory.sample(1)[0]
        assert isinstance(transition, Transition)
        assert transition.priority == pytest.approx(8.5)
        assert transition.done is True

    def test_stored_state_is_a_copy(self, memory):
        """Mutating the caller's array should not change the memory."""
        state = np.zeros(4)
        memory.push(state, 0, 0.0, state, False)
        state[:] = 99.0
        assert np.all(memory.sample(1)[0].state == 0.0)


class TestSample:
    """Test sampling behavior."""

    def test_sample_size(self, memory):
        """Sample should return the requested number of transitions."""
        push_n(memory, 10)
        assert len(memory.sample(4)) == 4

    def test_sample_capped_at_memory_size(self, memory):
        """Asking for more than stored returns everything once."""
        push_n(memory, 3)
        assert len(memory.sample(64)) == 3

    def test_sample_has_no_duplicates(self, memory):
        """A batch should contain distinct transitions."""
        push_n(memory, 10)
        batch = memory.sample(10)
        assert len({t.state[0] for t in batch}) == 10

    def test_sample_empty_raises(self, memory):
        """Sampling an empty memory is an error."""
        with pytest.raises(RuntimeError):
            memory.sample(1)

    def test_high_priority_sampled_more_often(self):
        """A large-reward transition should dominate single draws."""
        memory = PrioritizedReplayMemory(capacity=10, rng=np.random.default_rng(0))
        push_n(memory, 9, reward=0.0)
        memory.push(np.full(4, 100.0), 0, 999.0, np.zeros(4), False)

        hits = sum(memory.sample(1)[0].state[0] == 100.0 for _ in range(200))
        # p = 1000 / 1009
        assert hits > 180

    def test_seeded_sampling_is_reproducible(self):
        """Same seed, same pushes, same batches."""
        def batch_states(seed):
            memory = PrioritizedReplayMemory(capacity=50, rng=np.random.default_rng(seed))
            for i in range(50):
                memory.push(np.full(2, float(i)), 0, float(i % 7), np.zeros(2), False)
            return [t.state[0] for t in memory.sample(8)]

        assert batch_states(3) == batch_states(3)


class TestHelpers:
    """Test is_ready and clear."""

    def test_is_ready(self, memory):
        """is_ready should compare size to the batch size."""
        push_n(memory, 4)
        assert memory.is_ready(4)
        assert not memory.is_ready(5)

    def test_clear(self, memory):
        """clear should forget everything."""
        push_n(memory, 4)
        memory.clear()
        assert len(memory) == 0
