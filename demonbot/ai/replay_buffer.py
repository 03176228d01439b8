"""
Prioritized Replay Memory
=========================

A bounded FIFO memory of transitions, sampled in proportion to how
surprising each transition's reward was.

How it works:
    1. The agent stores (state, action, reward, next_state, done) tuples
       with priority |reward| + 1
    2. Learning samples a batch of distinct transitions, each drawn with
       probability priority / total_priority
    3. When full, the oldest transition is dropped

References:
    Mnih et al., 2015 - "Human-level control through deep reinforcement learning"
    Schaul et al., 2016 - "Prioritized Experience Replay"
"""

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional

import numpy as np


@dataclass
class Transition:
    """One step of experience."""
    state: np.ndarray
    action: int
    reward: float
    next_state: np.ndarray
    done: bool
    priority: float


class PrioritizedReplayMemory:
    """
    Fixed-capacity transition store with priority-proportional sampling.

    Example:
        >>> memory = PrioritizedReplayMemory(capacity=10000, rng=np.random.default_rng(0))
        >>> memory.push(state, action, reward, next_state, done)
        >>> batch = memory.sample(batch_size=64)
    """

    def __init__(self, capacity: int, rng: Optional[np.random.Generator] = None):
        """
        Initialize the memory.

        Args:
            capacity: Maximum number of transitions to keep
            rng: Random generator used for sampling (fresh if None)
        """
        self.capacity = capacity
        self.rng = rng if rng is not None else np.random.default_rng()
        self._memory: Deque[Transition] = deque(maxlen=capacity)

    def push(
        self,
        state: np.ndarray,
        action: int,
        reward: float,
        next_state: np.ndarray,
        done: bool
    ) -> None:
        """
        Store a transition; the oldest one is dropped when full.

        Args:
            state: Feature vector before the action
            action: Action index taken
            reward: Shaped reward received
            next_state: Feature vector after the action
            done: Whether the episode ended
        """
        self._memory.append(Transition(
            state=np.array(state, dtype=np.float64),
            action=int(action),
            reward=float(reward),
            next_state=np.array(next_state, dtype=np.float64),
            done=bool(done),
            priority=abs(float(reward)) + 1.0,
        ))

    def sample(self, batch_size: int) -> List[Transition]:
        """
        Draw distinct transitions with probability proportional to priority.

        Args:
            batch_size: Requested batch size (capped at the memory size)

        Returns:
            List of transitions

        Raises:
            RuntimeError: If the memory is empty
        """
        if not self._memory:
            raise RuntimeError("Cannot sample from an empty replay memory")

        size = min(batch_size, len(self._memory))
        priorities = np.fromiter(
            (t.priority for t in self._memory), dtype=np.float64, count=len(self._memory)
        )
        probs = priorities / priorities.sum()

        indices = self.rng.choice(len(self._memory), size=size, replace=False, p=probs)
        return [self._memory[i] for i in indices]

    def __len__(self) -> int:
        """Return current memory size."""
        return len(self._memory)

    def is_ready(self, batch_size: int) -> bool:
        """Check if the memory has enough transitions for a batch."""
        return len(self._memory) >= batch_size

    def clear(self) -> None:
        """Forget all transitions."""
        self._memory.clear()
