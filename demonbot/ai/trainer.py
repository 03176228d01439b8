"""
Training Loop
=============

Orchestrates Q-learning:
    1. Run episodes of the game
    2. Shape rewards and collect transitions
    3. Train the agent
    4. Track metrics
    5. Save weights periodically

This module ties together the environment, the agent and the reward shaper.
"""

import time
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

import sys
sys.path.append('../..')
from config import Config

from .agent import Agent
from .rewards import RewardShaper
from demonbot.game.actions import action_from_index
from demonbot.game.base_game import RamEnvironment
from demonbot.game.features import extract_features
from demonbot.utils.logger import get_logger, log_training_metrics

logger = get_logger(__name__)


@dataclass
class EpisodeStats:
    """Statistics for a single episode."""
    episode: int
    score: float
    game_score: float
    steps: int
    epsilon: float
    avg_loss: float
    duration: float
    cowardly: bool


class TrainingMetrics:
    """
    Tracks training metrics over time.

    Metrics tracked:
        - Episode scores (game reward plus shaping)
        - Raw game scores
        - Steps per episode
        - Loss values
        - Epsilon values
    """

    def __init__(self, history_length: int = 1000):
        self.history_length = history_length

        self.scores: List[float] = []
        self.game_scores: List[float] = []
        self.steps: List[int] = []
        self.losses: List[float] = []
        self.epsilons: List[float] = []
        self.cowardly: List[bool] = []

    def add(self, stats: EpisodeStats) -> None:
        """Add episode statistics."""
        self.scores.append(stats.score)
        self.game_scores.append(stats.game_score)
        self.steps.append(stats.steps)
        self.losses.append(stats.avg_loss)
        self.epsilons.append(stats.epsilon)
        self.cowardly.append(stats.cowardly)

        # Trim to history length
        if len(self.scores) > self.history_length:
            for attr in ['scores', 'game_scores', 'steps', 'losses', 'epsilons', 'cowardly']:
                setattr(self, attr, getattr(self, attr)[-self.history_length:])

    def get_recent_average(self, metric: str, n: int = 100) -> float:
        """Get average of last n values for a metric."""
        values = getattr(self, metric, [])
        if not values:
            return 0.0
        return float(np.mean(values[-n:]))

    def get_best_score(self) -> float:
        """Get the highest score achieved."""
        return max(self.scores) if self.scores else 0.0


class Trainer:
    """
    Runs Q-learning episodes against a RAM environment.

    Example:
        >>> env = AtariEnvironment(rom_path)
        >>> agent = Agent(config=config)
        >>> trainer = Trainer(env, agent, config)
        >>> trainer.train(num_episodes=1000)
    """

    def __init__(
        self,
        env: RamEnvironment,
        agent: Agent,
        config: Optional[Config] = None,
        weights_path: Optional[str] = None
    ):
        """
        Initialize the trainer.

        Args:
            env: Environment to play
            agent: Q-learning agent
            config: Configuration object
            weights_path: Where to save weights (default: config.WEIGHTS_FILE)
        """
        self.env = env
        self.agent = agent
        self.config = config or Config()
        self.weights_path = weights_path or self.config.WEIGHTS_FILE
        self.shaper = RewardShaper(self.config)

        self.metrics = TrainingMetrics()
        self.current_episode = 0
        self.total_steps = 0

    def run_episode(self, training: bool = True) -> EpisodeStats:
        """
        Play one episode.

        Args:
            training: Explore, store transitions and learn

        Returns:
            Episode statistics
        """
        start_time = time.time()

        self.env.reset()
        ram = self.env.get_ram()
        state = extract_features(ram, self.config.NUM_FEATURES)
        self.shaper.reset(ram, self.env.lives())

        total_reward = 0.0
        game_score = 0.0
        steps = 0
        cowardly = False
        done = False

        while not done and steps < self.config.MAX_STEPS_PER_EPISODE:
            action_idx = self.agent.select_action(state, training=training)
            game_reward = self.env.act(action_from_index(action_idx))

            ram = self.env.get_ram()
            next_state = extract_features(ram, self.config.NUM_FEATURES)
            shaped = self.shaper.shape(action_idx, ram, self.env.lives(), self.env.game_over())
            done = shaped.done
            cowardly = shaped.cowardly

            reward = game_reward + shaped.reward
            total_reward += reward
            game_score += game_reward

            if training:
                self.agent.remember(state, action_idx, reward, next_state, done)
                self.agent.learn()

            state = next_state
            steps += 1
            self.total_steps += 1

        duration = time.time() - start_time

        return EpisodeStats(
            episode=self.current_episode,
            score=total_reward,
            game_score=game_score,
            steps=steps,
            epsilon=self.agent.epsilon,
            avg_loss=self.agent.get_average_loss(100),
            duration=duration,
            cowardly=cowardly
        )

    def train(self, num_episodes: Optional[int] = None) -> TrainingMetrics:
        """
        Run the training loop.

        Args:
            num_episodes: Number of episodes (default from config)

        Returns:
            Training metrics
        """
        num_episodes = num_episodes or self.config.MAX_EPISODES

        logger.info(
            f"Starting Q-learning: {num_episodes} episodes, "
            f"network={self.agent.network}"
        )

        for episode in range(1, num_episodes + 1):
            self.current_episode = episode

            stats = self.run_episode(training=True)
            self.agent.decay_epsilon()
            stats.epsilon = self.agent.epsilon

            self.metrics.add(stats)

            if episode % self.config.LOG_EVERY == 0:
                log_training_metrics(
                    episode=episode,
                    score=stats.score,
                    epsilon=stats.epsilon,
                    loss=stats.avg_loss,
                    steps=stats.steps
                )

            if episode % self.config.SAVE_EVERY == 0:
                self.save()

        self.save()
        logger.info(
            f"Training complete. Best score: {self.metrics.get_best_score():.1f}, "
            f"final epsilon: {self.agent.epsilon:.4f}, total steps: {self.total_steps:,}"
        )
        return self.metrics

    def evaluate(self, num_episodes: Optional[int] = None) -> Dict[str, float]:
        """
        Play greedily without learning.

        Args:
            num_episodes: Number of evaluation episodes (default: config.EVAL_EPISODES)

        Returns:
            Evaluation statistics
        """
        num_episodes = num_episodes or self.config.EVAL_EPISODES

        original_epsilon = self.agent.epsilon
        self.agent.epsilon = 0.0

        scores = []
        for episode in range(1, num_episodes + 1):
            self.current_episode = episode
            stats = self.run_episode(training=False)
            scores.append(stats.score)
            logger.info(f"Evaluation - episode {episode}, score: {stats.score:.1f}")

        self.agent.epsilon = original_epsilon

        return {
            'mean_score': float(np.mean(scores)),
            'max_score': float(np.max(scores)),
            'min_score': float(np.min(scores)),
        }

    def save(self) -> None:
        """Save the agent's weights to weights_path."""
        self.agent.save(self.weights_path)
