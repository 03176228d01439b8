"""
Base Environment Interface
==========================

Abstract base class for the emulators the agents play against.

The agents never see pixels: they read the console RAM, pick an action and
get back the game reward. Lives and game-over are queried separately, the
same way the Arcade Learning Environment exposes them.

To add a new environment:
1. Create a new file in demonbot/game/
2. Inherit from RamEnvironment
3. Implement all abstract methods
"""

from abc import ABC, abstractmethod

import numpy as np


class RamEnvironment(ABC):
    """
    Abstract base class for RAM-observed games.

    Methods:
        reset() -> None
            Start a new game

        act(action: int) -> float
            Execute an emulator action, return the game reward

        get_ram() -> np.ndarray
            Current RAM snapshot (uint8, 128 bytes)

        lives() -> int
            Remaining lives

        game_over() -> bool
            True once the game has ended
    """

    @abstractmethod
    def reset(self) -> None:
        """Reset the game to its initial state."""
        pass

    @abstractmethod
    def act(self, action: int) -> float:
        """
        Execute one action.

        Args:
            action: Emulator action code (see GameAction)

        Returns:
            Reward earned by the action
        """
        pass

    @abstractmethod
    def get_ram(self) -> np.ndarray:
        """Return a copy of the RAM as a uint8 array."""
        pass

    @abstractmethod
    def lives(self) -> int:
        """Return the number of remaining lives."""
        pass

    @abstractmethod
    def game_over(self) -> bool:
        """Return True if the game has ended."""
        pass

    def close(self) -> None:
        """Clean up resources. Override if needed."""
        pass
