"""
RAM Feature Extraction
======================

Turns the 128-byte Demon Attack RAM snapshot into the normalized feature
vector fed to the network.

RAM map (addresses found by watching the RAM viewer in manual mode):
    16          player x position (0-160)
    32..39      enemy x positions (0 = slot empty)
    0x25..0x2D  enemy bullet slots, 0x25 closest to the player
    28          0x01 when the player can fire
    114         remaining lives
    126         0x4E on the frame an enemy is destroyed
"""

from typing import Optional, Tuple

import numpy as np

RAM_SIZE = 128
SCREEN_WIDTH = 160.0
MAX_LIVES = 5.0
NUM_FEATURES = 16

PLAYER_X_ADDR = 16
ENEMY_X_ADDRS = range(32, 40)
BULLET_ADDRS = range(0x25, 0x2E)
CAN_FIRE_ADDR = 28
LIVES_ADDR = 114
KILL_ADDR = 126
KILL_MARKER = 0x4E


def _nearest_enemy(ram: np.ndarray, player_x: float) -> Optional[Tuple[float, float]]:
    """(distance, x) of the enemy closest to the player, or None."""
    nearest = None
    for addr in ENEMY_X_ADDRS:
        enemy_x = float(ram[addr])
        if enemy_x > 0:
            distance = abs(player_x - enemy_x)
            if nearest is None or distance < nearest[0]:
                nearest = (distance, enemy_x)
    return nearest


def _pad(features: list, size: int) -> np.ndarray:
    features.extend([0.0] * (size - len(features)))
    return np.asarray(features, dtype=np.float64)


def extract_features(ram: np.ndarray, size: int = NUM_FEATURES) -> np.ndarray:
    """
    Feature vector used by Q-learning and imitation learning.

    Layout:
        [0] player x / 160
        [1] distance to nearest enemy / 160 (1.0 when no enemy)
        [2] nearest enemy x relative to player / 160 (0.0 when no enemy)
        [3] imminent threat: 1.0 for a bullet in the closest slot, 0.0 in the farthest
        [4] relative x of the threat (nearest enemy's relative x)
        [5] 1.0 if the player can fire
        [6] lives / 5
        rest: zero padding

    Args:
        ram: RAM snapshot (128 bytes)
        size: Length of the returned vector

    Returns:
        Feature vector of length size
    """
    player_x = float(ram[PLAYER_X_ADDR])
    features = [player_x / SCREEN_WIDTH]

    nearest = _nearest_enemy(ram, player_x)
    closest_enemy_x = 0.0
    if nearest is not None:
        min_dist, closest_enemy_x = nearest
        features.append(min_dist / SCREEN_WIDTH)
        features.append((closest_enemy_x - player_x) / SCREEN_WIDTH)
    else:
        features.append(1.0)
        features.append(0.0)

    imminent_threat = 0.0
    threat_relative_pos = 0.0
    for addr in BULLET_ADDRS:
        if ram[addr] > 0:
            threat_level = 1.0 - (addr - BULLET_ADDRS.start) / 8.0
            if threat_level > imminent_threat:
                imminent_threat = threat_level
                threat_relative_pos = (closest_enemy_x - player_x) / SCREEN_WIDTH
    features.append(imminent_threat)
    features.append(threat_relative_pos)

    features.append(1.0 if ram[CAN_FIRE_ADDR] == 0x01 else 0.0)
    features.append(float(ram[LIVES_ADDR]) / MAX_LIVES)

    return _pad(features, size)


def extract_basic_features(ram: np.ndarray, lives: int, size: int = NUM_FEATURES) -> np.ndarray:
    """
    Smaller feature set used by the genetic algorithm.

    Layout: player x, nearest enemy distance, nearest enemy relative x,
    can-fire flag, lives / 5 (from the emulator, not RAM), zero padding.
    """
    player_x = float(ram[PLAYER_X_ADDR])
    features = [player_x / SCREEN_WIDTH]

    nearest = _nearest_enemy(ram, player_x)
    if nearest is not None:
        min_dist, closest_enemy_x = nearest
        features.append(min_dist / SCREEN_WIDTH)
        features.append((closest_enemy_x - player_x) / SCREEN_WIDTH)
    else:
        features.append(1.0)
        features.append(0.0)

    features.append(1.0 if ram[CAN_FIRE_ADDR] == 0x01 else 0.0)
    features.append(float(lives) / MAX_LIVES)

    return _pad(features, size)


def extract_all_features(ram: np.ndarray) -> np.ndarray:
    """Every RAM byte scaled to [0, 1]."""
    return np.asarray(ram, dtype=np.float64)[:RAM_SIZE] / 255.0


def player_x(ram: np.ndarray) -> float:
    """Player x position in pixels."""
    return float(ram[PLAYER_X_ADDR])


def enemy_destroyed(ram: np.ndarray) -> bool:
    """Whether the RAM shows the enemy-destroyed marker."""
    return int(ram[KILL_ADDR]) == KILL_MARKER
