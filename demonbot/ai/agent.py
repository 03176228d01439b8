"""
Q-Learning Agent
================

The agent that learns to play Demon Attack with one-step Q-learning on top
of the hand-rolled Network.

Training Algorithm:
    1. Observe features s
    2. Choose action a (epsilon-greedy, exploration biased towards firing)
    3. Execute action, observe shaped reward r and next features s'
    4. Store (s, a, r, s', done) in the prioritized replay memory
    5. Every TRAIN_FREQUENCY steps sample a batch and, per transition,
       train towards y = r + gamma * max_a' Q(s', a')  (y = r when done)
       on the taken action, keeping the other outputs at their prediction

There is no target network: targets come from the network being trained.

References:
    Mnih et al., 2015 - "Human-level control through deep reinforcement learning"
"""

from typing import List, Optional

import numpy as np

from .network import Network
from .replay_buffer import PrioritizedReplayMemory

import sys
sys.path.append('../..')
from config import Config


class Agent:
    """
    Epsilon-greedy Q-learning agent.

    Attributes:
        network: Q-network used for both acting and targets
        memory: Prioritized replay memory
        epsilon: Current exploration rate

    Example:
        >>> agent = Agent(config=config, rng=np.random.default_rng(0))
        >>> action = agent.select_action(state)
        >>> agent.remember(state, action, reward, next_state, done)
        >>> loss = agent.learn()
    """

    def __init__(
        self,
        network: Optional[Network] = None,
        config: Optional[Config] = None,
        rng: Optional[np.random.Generator] = None
    ):
        """
        Initialize the agent.

        Args:
            network: Q-network (built from config if None)
            config: Configuration object
            rng: Random generator for exploration and replay sampling
        """
        self.config = config or Config()
        self.rng = rng if rng is not None else np.random.default_rng()

        self.network = network if network is not None else Network(
            self.config.NUM_FEATURES,
            self.config.NUM_HIDDEN,
            self.config.NUM_ACTIONS,
            self.config.LEARNING_RATE,
            rng=self.rng
        )
        self.action_size = self.network.output_size

        self.memory = PrioritizedReplayMemory(self.config.MEMORY_SIZE, rng=self.rng)

        self.epsilon = self.config.EPSILON_START

        # Environment steps seen by remember() (drives TRAIN_FREQUENCY)
        self.steps = 0

        # Track whether last action was exploration (for metrics)
        self._last_action_explored: bool = False

        self.losses: List[float] = []

    def select_action(self, state: np.ndarray, training: bool = True) -> int:
        """
        Select an action index using a biased epsilon-greedy policy.

        Exploration picks a firing action (indices 2-4) with probability
        FIRE_EXPLORATION_BIAS, otherwise any action uniformly.

        Args:
            state: Current feature vector
            training: If False, always act greedily

        Returns:
            Selected action index
        """
        if training and self.epsilon > 0 and self.rng.random() < self.epsilon:
            self._last_action_explored = True
            if self.action_size > 4 and self.rng.random() < self.config.FIRE_EXPLORATION_BIAS:
                return int(2 + self.rng.integers(3))
            return int(self.rng.integers(self.action_size))

        self._last_action_explored = False
        q_values = self.network.predict(state)
        return int(np.argmax(q_values))

    def remember(
        self,
        state: np.ndarray,
        action: int,
        reward: float,
        next_state: np.ndarray,
        done: bool
    ) -> None:
        """Store a transition and count the environment step."""
        self.memory.push(state, action, reward, next_state, done)
        self.steps += 1

    def learn(self) -> Optional[float]:
        """
        Train on a prioritized batch if it is time to.

        Returns:
            Mean squared TD error of the batch (before the update),
            or None if no training happened
        """
        if self.steps % self.config.TRAIN_FREQUENCY != 0:
            return None
        if not self.memory.is_ready(self.config.BATCH_SIZE):
            return None

        batch = self.memory.sample(self.config.BATCH_SIZE)
        gamma = self.config.GAMMA

        squared_errors = []
        for transition in batch:
            q_current = self.network.predict(transition.state)
            q_target = transition.reward
            if not transition.done:
                q_next = self.network.predict(transition.next_state)
                q_target += gamma * float(np.max(q_next))

            targets = q_current.copy()
            targets[transition.action] = q_target
            squared_errors.append((q_target - q_current[transition.action]) ** 2)

            self.network.train(transition.state, targets)

        loss = float(np.mean(squared_errors))
        self.losses.append(loss)
        if len(self.losses) > 10000:
            self.losses = self.losses[-10000:]
        return loss

    def decay_epsilon(self) -> None:
        """Multiplicative decay, applied while above EPSILON_MIN."""
        if self.epsilon > self.config.EPSILON_MIN:
            self.epsilon *= self.config.EPSILON_DECAY

    def get_average_loss(self, n: int = 100) -> float:
        """Average of the last n learning losses."""
        if not self.losses:
            return 0.0
        return float(np.mean(self.losses[-n:]))

    def save(self, filepath: str) -> None:
        """Save the Q-network weights."""
        self.network.save(filepath)

    def load(self, filepath: str) -> bool:
        """Load Q-network weights; False if the file does not exist."""
        return self.network.load(filepath)
