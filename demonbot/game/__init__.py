"""
Game Module
===========

Everything that touches the emulator.

Classes:
    RamEnvironment   - Abstract base class for RAM-observed games
    AtariEnvironment - Arcade Learning Environment backend (ale-py)
    GameAction       - Emulator action codes
    GameplayFrame    - One recorded (RAM, action) pair

Functions:
    extract_features / extract_basic_features / extract_all_features
    action_from_index / genetic_action_from_index / index_from_action
    save_recording / load_recording
"""

from .base_game import RamEnvironment
from .atari import AtariEnvironment, ALE_AVAILABLE
from .actions import (
    GameAction,
    ACTIONS,
    GENETIC_ACTIONS,
    FIRING_ACTIONS,
    action_from_index,
    genetic_action_from_index,
    index_from_action,
    is_firing,
)
from .features import extract_features, extract_basic_features, extract_all_features
from .recording import GameplayFrame, save_recording, load_recording

__all__ = [
    'RamEnvironment',
    'AtariEnvironment',
    'ALE_AVAILABLE',
    'GameAction',
    'ACTIONS',
    'GENETIC_ACTIONS',
    'FIRING_ACTIONS',
    'action_from_index',
    'genetic_action_from_index',
    'index_from_action',
    'is_firing',
    'extract_features',
    'extract_basic_features',
    'extract_all_features',
    'GameplayFrame',
    'save_recording',
    'load_recording',
]
