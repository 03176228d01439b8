"""
Gameplay Recording
==================

Stores human gameplay as (RAM snapshot, action) pairs for imitation learning.

File format:
    Compressed numpy archive (.npz) with two arrays:
        ram      (num_frames, 128) uint8 - RAM before the action
        actions  (num_frames,)     int64 - emulator action code
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Union

import numpy as np

from .features import RAM_SIZE
from demonbot.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class GameplayFrame:
    """One recorded frame: the RAM the player saw and what they pressed."""
    ram_state: np.ndarray
    action: int


def save_recording(filepath: Union[str, Path], frames: Sequence[GameplayFrame]) -> None:
    """
    Write recorded frames to a compressed archive.

    Args:
        filepath: Destination file
        frames: Recorded frames
    """
    path = Path(filepath)
    if path.parent != Path('.'):
        path.parent.mkdir(parents=True, exist_ok=True)

    if frames:
        ram = np.stack([np.asarray(f.ram_state, dtype=np.uint8) for f in frames])
    else:
        ram = np.empty((0, RAM_SIZE), dtype=np.uint8)
    actions = np.array([int(f.action) for f in frames], dtype=np.int64)

    with open(path, 'wb') as f:
        np.savez_compressed(f, ram=ram, actions=actions)
    logger.info(f"Saved {len(frames)} frames to {path}")


def load_recording(filepath: Union[str, Path]) -> List[GameplayFrame]:
    """
    Read frames written by save_recording().

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the archive is missing arrays or they disagree in length
    """
    path = Path(filepath)
    with np.load(path) as data:
        if 'ram' not in data or 'actions' not in data:
            raise ValueError(f"{path} is not a gameplay recording")
        ram = data['ram']
        actions = data['actions']

    if len(ram) != len(actions):
        raise ValueError(
            f"{path} has {len(ram)} RAM snapshots but {len(actions)} actions"
        )

    frames = [GameplayFrame(ram_state=ram[i].copy(), action=int(actions[i]))
              for i in range(len(actions))]
    logger.info(f"Loaded {len(frames)} frames from {path}")
    return frames
