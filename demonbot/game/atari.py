"""
Arcade Learning Environment backend
===================================

RamEnvironment implementation on top of ale-py.

Usage:
    env = AtariEnvironment('roms/demon_attack.bin', frame_skip=4)
    env.reset()
    reward = env.act(GameAction.FIRE)
    ram = env.get_ram()
"""

from typing import Optional

import numpy as np

from .base_game import RamEnvironment
from demonbot.utils.logger import get_logger

logger = get_logger(__name__)

# ale-py is only needed when a real ROM is played
ALE_AVAILABLE: bool
try:
    from ale_py import ALEInterface, Action
    ALE_AVAILABLE = True
except ImportError:
    ALE_AVAILABLE = False


class AtariEnvironment(RamEnvironment):
    """
    Atari 2600 game running in the Arcade Learning Environment.

    Example:
        >>> env = AtariEnvironment(rom_path, display_screen=True, frame_skip=1)
        >>> env.reset()
        >>> while not env.game_over():
        ...     env.act(GameAction.FIRE)
    """

    def __init__(
        self,
        rom_path: str,
        display_screen: bool = False,
        sound: bool = False,
        frame_skip: int = 4,
        seed: Optional[int] = None
    ):
        """
        Load a ROM into a new emulator instance.

        Args:
            rom_path: Path to the ROM file
            display_screen: Open an SDL window showing the game
            sound: Enable sound
            frame_skip: Frames repeated per action
            seed: Emulator random seed (None keeps the ALE default)

        Raises:
            RuntimeError: If ale-py is not installed
        """
        if not ALE_AVAILABLE:
            raise RuntimeError(
                "ale-py is required to run Atari ROMs. Install it with: pip install ale-py"
            )

        self.rom_path = rom_path
        self.ale = ALEInterface()
        self.ale.setBool('display_screen', display_screen)
        self.ale.setBool('sound', sound)
        self.ale.setInt('frame_skip', frame_skip)
        if seed is not None:
            self.ale.setInt('random_seed', seed)
        self.ale.loadROM(rom_path)

        logger.info(
            f"Loaded ROM {rom_path} (display={display_screen}, frame_skip={frame_skip})"
        )

    def reset(self) -> None:
        self.ale.reset_game()

    def act(self, action: int) -> float:
        return float(self.ale.act(Action(int(action))))

    def get_ram(self) -> np.ndarray:
        return np.array(self.ale.getRAM(), dtype=np.uint8)

    def lives(self) -> int:
        return int(self.ale.lives())

    def game_over(self) -> bool:
        return bool(self.ale.game_over())
