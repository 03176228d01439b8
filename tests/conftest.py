"""
Pytest configuration for the test suite.

This file is automatically loaded by pytest. Besides the markers it
provides a scripted RAM environment, so the training loops can be tested
without an Atari ROM.
"""

import os
import sys
from typing import List, Optional, Sequence

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from demonbot.game.base_game import RamEnvironment
from demonbot.game.features import LIVES_ADDR, PLAYER_X_ADDR, RAM_SIZE


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


def make_ram(player_x: int = 80, lives: int = 3, **addresses: int) -> np.ndarray:
    """RAM snapshot with the player in place; extra bytes given as addr_<n>=value."""
    ram = np.zeros(RAM_SIZE, dtype=np.uint8)
    ram[PLAYER_X_ADDR] = player_x
    ram[LIVES_ADDR] = lives
    for key, value in addresses.items():
        ram[int(key.split('_')[1])] = value
    return ram


class FakeEnvironment(RamEnvironment):
    """
    Deterministic stand-in for the emulator.

    The ship moves 3 pixels per LEFT/RIGHT action, every action earns
    reward_per_step, and the game ends after episode_length actions.
    """

    def __init__(self, episode_length: int = 20, reward_per_step: float = 1.0,
                 start_lives: int = 3, frames: Optional[Sequence[np.ndarray]] = None):
        self.episode_length = episode_length
        self.reward_per_step = reward_per_step
        self.start_lives = start_lives
        self.frames = list(frames) if frames is not None else None
        self.actions: List[int] = []
        self.resets = 0
        self.closed = False
        self._step = 0
        self._x = 80

    def reset(self) -> None:
        self.resets += 1
        self._step = 0
        self._x = 80

    def act(self, action: int) -> float:
        self.actions.append(int(action))
        if action in (4, 12):
            self._x = max(0, self._x - 3)
        elif action in (3, 11):
            self._x = min(159, self._x + 3)
        self._step += 1
        return self.reward_per_step

    def get_ram(self) -> np.ndarray:
        if self.frames:
            return self.frames[min(self._step, len(self.frames) - 1)].copy()
        return make_ram(player_x=self._x, lives=self.start_lives, addr_32=40)

    def lives(self) -> int:
        return self.start_lives

    def game_over(self) -> bool:
        return self._step >= self.episode_length

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(1234)


@pytest.fixture
def fake_env():
    """Short deterministic game."""
    return FakeEnvironment(episode_length=20)
