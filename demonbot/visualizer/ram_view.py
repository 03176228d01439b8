"""
RAM Viewer and Manual Play
==========================

Human-in-the-loop modes:
    - Manual play: drive the ship from the keyboard while watching the RAM
      change, to discover which addresses hold which game state
    - Recording: the same loop, additionally storing (RAM, action) frames
      for imitation learning

The emulator renders the game in its own window; a small pygame window
takes the keyboard focus and mirrors the RAM dump that is also printed to
the terminal.

Controls:
    LEFT/RIGHT arrows: Move ship
    SPACE: Fire
    ESC: Quit
"""

from typing import List, Optional

import numpy as np
import pygame

import sys
sys.path.append('../..')
from config import Config

from demonbot.game.actions import GameAction
from demonbot.game.base_game import RamEnvironment
from demonbot.game.recording import GameplayFrame
from demonbot.utils.logger import get_logger

logger = get_logger(__name__)

RAM_ROWS = 8
RAM_COLS = 16
SEPARATOR = "-" * 61

# ANSI: cursor home / clear screen
CURSOR_HOME = "\033[H"
CLEAR_SCREEN = "\033[H\033[J"


def format_ram(ram: np.ndarray) -> str:
    """
    Hex dump of the 128-byte RAM, 16 bytes per row.

    Example:
        ADDR || 00 01 02 03 04 05 06 07 08 09 0A 0B 0C 0D 0E 0F
        -------------------------------------------------------------
         00  || A9 00 ...
    """
    header = "ADDR || " + " ".join(f"{col:02X}" for col in range(RAM_COLS))
    lines = [header, SEPARATOR]
    for row in range(RAM_ROWS):
        values = ram[row * RAM_COLS:(row + 1) * RAM_COLS]
        lines.append(f" {row * RAM_COLS:02X}  || " + " ".join(f"{int(v):02X}" for v in values))
    lines.append(SEPARATOR)
    return "\n".join(lines)


def action_from_keys(left: bool, right: bool, fire: bool) -> GameAction:
    """Joystick action for the pressed keys (fire combos take precedence)."""
    if left and fire:
        return GameAction.LEFTFIRE
    if right and fire:
        return GameAction.RIGHTFIRE
    if left:
        return GameAction.LEFT
    if right:
        return GameAction.RIGHT
    if fire:
        return GameAction.FIRE
    return GameAction.NOOP


class ManualSession:
    """
    Keyboard-driven play loop with a live RAM dump.

    Example:
        >>> session = ManualSession(env, config, record=True)
        >>> frames = session.run()
    """

    def __init__(
        self,
        env: RamEnvironment,
        config: Optional[Config] = None,
        record: bool = False,
        console: bool = True
    ):
        """
        Initialize the session.

        Args:
            env: Environment to play
            config: Configuration object
            record: Keep a GameplayFrame for every step
            console: Also print the RAM dump to the terminal
        """
        self.env = env
        self.config = config or Config()
        self.record = record
        self.console = console
        self.frames: List[GameplayFrame] = []
        self.running = False

        self._screen: Optional[pygame.Surface] = None
        self._font: Optional[pygame.font.Font] = None

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.running = False

    def _render(self, ram: np.ndarray) -> None:
        dump = format_ram(ram)

        if self.console:
            print(CURSOR_HOME + dump)
            print(f"\nLives: {self.env.lives()} | Frames recorded: {len(self.frames)}")

        if self._screen is None or self._font is None:
            return
        self._screen.fill((15, 15, 35))
        for i, line in enumerate(dump.splitlines()):
            surface = self._font.render(line, True, (0, 255, 128))
            self._screen.blit(surface, (10, 10 + i * 18))
        pygame.display.flip()

    def step(self, left: bool, right: bool, fire: bool) -> GameAction:
        """
        Apply one frame of input.

        Records the RAM seen before the action, executes it and restarts
        the game when it ends.
        """
        ram = self.env.get_ram()
        action = action_from_keys(left, right, fire)

        if self.record:
            self.frames.append(GameplayFrame(ram_state=ram.copy(), action=int(action)))

        self.env.act(action)

        if self.env.game_over():
            logger.info("Game over, restarting")
            self.env.reset()

        return action

    def run(self) -> List[GameplayFrame]:
        """
        Play until the window is closed or ESC is pressed.

        Returns:
            Recorded frames (empty unless record=True)
        """
        pygame.init()
        self._screen = pygame.display.set_mode((560, 200))
        pygame.display.set_caption("Demon Bot - RAM Viewer")
        self._font = pygame.font.SysFont('monospace', 15)
        clock = pygame.time.Clock()

        if self.console:
            print(CLEAR_SCREEN, end="")
        logger.info("Controls: arrows to move, SPACE to fire, ESC to quit")

        self.env.reset()
        self.running = True
        try:
            while self.running:
                self._handle_events()
                if not self.running:
                    break

                self._render(self.env.get_ram())

                pressed = pygame.key.get_pressed()
                self.step(
                    bool(pressed[pygame.K_LEFT]),
                    bool(pressed[pygame.K_RIGHT]),
                    bool(pressed[pygame.K_SPACE])
                )

                clock.tick(self.config.FPS)
        finally:
            pygame.quit()
            self._screen = None
            self._font = None

        return self.frames
