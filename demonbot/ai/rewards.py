"""
Reward Shaping
==============

The raw Demon Attack score is sparse, and an untrained agent quickly learns
to hide in a corner without shooting. The shaper adds dense terms on top of
the game reward:

    +REWARD_SURVIVAL   every step
    +REWARD_LIFE_LOST  when a life is lost
    +REWARD_NO_FIRE    when the agent has not fired for IDLE_FRAMES_PENALTY steps
    +REWARD_NO_MOVE    when the agent has not moved for IDLE_FRAMES_PENALTY steps
    +REWARD_EDGE       while the ship sits near either screen edge
    +REWARD_KILL       on the frame an enemy is destroyed
    +REWARD_COWARD     and the episode ends after IDLE_FRAMES_TERMINATE idle steps
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

import sys
sys.path.append('../..')
from config import Config

from demonbot.game.actions import is_firing
from demonbot.game.features import enemy_destroyed, player_x, SCREEN_WIDTH
from demonbot.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ShapedReward:
    """Outcome of shaping one step."""
    reward: float
    done: bool
    cowardly: bool = False


class RewardShaper:
    """
    Stateful per-episode reward shaper.

    Call reset() at the start of every episode, then shape() once per step.

    Example:
        >>> shaper = RewardShaper(config)
        >>> shaper.reset(env.get_ram(), env.lives())
        >>> result = shaper.shape(action_idx, env.get_ram(), env.lives(), done)
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.frames_without_firing = 0
        self.frames_without_moving = 0
        self.last_x = 0.0
        self.lives = 0

    def reset(self, ram: np.ndarray, lives: int) -> None:
        """Start tracking a new episode."""
        self.frames_without_firing = 0
        self.frames_without_moving = 0
        self.last_x = player_x(ram)
        self.lives = lives

    def shape(self, action_index: int, ram: np.ndarray, lives: int, done: bool) -> ShapedReward:
        """
        Compute the shaping term for one step.

        Args:
            action_index: Q-network action index that was taken
            ram: RAM after the action
            lives: Lives after the action
            done: Whether the game ended on this step

        Returns:
            ShapedReward with the shaping term (game reward not included)
            and the possibly forced done flag
        """
        cfg = self.config

        x = player_x(ram)
        moved = abs(x - self.last_x) > cfg.MOVE_THRESHOLD
        self.last_x = x

        if is_firing(action_index):
            self.frames_without_firing = 0
        else:
            self.frames_without_firing += 1

        if moved:
            self.frames_without_moving = 0
        else:
            self.frames_without_moving += 1

        reward = cfg.REWARD_SURVIVAL

        if lives < self.lives:
            reward += cfg.REWARD_LIFE_LOST
        self.lives = lives

        if self.frames_without_firing > cfg.IDLE_FRAMES_PENALTY:
            reward += cfg.REWARD_NO_FIRE

        if self.frames_without_moving > cfg.IDLE_FRAMES_PENALTY:
            reward += cfg.REWARD_NO_MOVE

        normalized_x = x / SCREEN_WIDTH
        if normalized_x < cfg.EDGE_MARGIN or normalized_x > 1.0 - cfg.EDGE_MARGIN:
            reward += cfg.REWARD_EDGE

        if enemy_destroyed(ram):
            reward += cfg.REWARD_KILL

        cowardly = (
            self.frames_without_firing > cfg.IDLE_FRAMES_TERMINATE
            or self.frames_without_moving > cfg.IDLE_FRAMES_TERMINATE
        )
        if cowardly and not done:
            reward += cfg.REWARD_COWARD
            logger.info("Episode ended for cowardly behaviour")
            return ShapedReward(reward=reward, done=True, cowardly=True)

        return ShapedReward(reward=reward, done=done)
