"""
Action Spaces
=============

Maps network output indices to emulator actions and back.

The numeric values of GameAction are the Arcade Learning Environment action
codes, so they can be handed to the emulator unchanged.

Spaces:
    Q-learning / imitation (5 outputs):
        0 LEFT, 1 RIGHT, 2 FIRE, 3 LEFTFIRE, 4 RIGHTFIRE
    Genetic algorithm (2 outputs):
        0 RIGHTFIRE, 1 LEFTFIRE
"""

from enum import IntEnum
from typing import FrozenSet, Tuple


class GameAction(IntEnum):
    """Subset of the ALE joystick actions used by Demon Attack."""
    NOOP = 0
    FIRE = 1
    RIGHT = 3
    LEFT = 4
    RIGHTFIRE = 11
    LEFTFIRE = 12


ACTIONS: Tuple[GameAction, ...] = (
    GameAction.LEFT,
    GameAction.RIGHT,
    GameAction.FIRE,
    GameAction.LEFTFIRE,
    GameAction.RIGHTFIRE,
)

GENETIC_ACTIONS: Tuple[GameAction, ...] = (
    GameAction.RIGHTFIRE,
    GameAction.LEFTFIRE,
)

# Indices (in ACTIONS) that shoot
FIRING_ACTIONS: FrozenSet[int] = frozenset({2, 3, 4})

# Demo frames with an action outside ACTIONS are learned as FIRE
DEFAULT_DEMO_INDEX = 2


def action_from_index(index: int) -> GameAction:
    """Action for a Q-network output index (NOOP when out of range)."""
    if 0 <= index < len(ACTIONS):
        return ACTIONS[index]
    return GameAction.NOOP


def genetic_action_from_index(index: int) -> GameAction:
    """Action for a genetic-network output index (wraps around)."""
    return GENETIC_ACTIONS[index % len(GENETIC_ACTIONS)]


def index_from_action(action: int) -> int:
    """Q-network output index for a recorded emulator action."""
    try:
        return ACTIONS.index(GameAction(action))
    except ValueError:
        return DEFAULT_DEMO_INDEX


def is_firing(index: int) -> bool:
    """Whether a Q-network output index shoots."""
    return index in FIRING_ACTIONS
