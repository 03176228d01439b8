"""
Configuration file for Demon Bot
================================

All hyperparameters, emulator settings, and file paths are centralized here.
Modify these values to experiment with different training configurations.

Usage:
    from config import Config
    cfg = Config()
    print(cfg.LEARNING_RATE)
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Config:
    """
    Central configuration for the entire project.

    Sections:
    1. Neural Network - Architecture configuration
    2. Training - Q-learning hyperparameters
    3. Exploration - Epsilon-greedy settings
    4. Reward Shaping - Cowardice penalties and kill bonus
    5. Genetic Algorithm - Population search settings
    6. Imitation Learning - Training from recorded gameplay
    7. Emulator - Arcade Learning Environment options
    8. System - Paths, logging and seeding
    """

    # =========================================================================
    # NEURAL NETWORK ARCHITECTURE
    # =========================================================================

    # Size of the feature vector produced from the RAM snapshot
    NUM_FEATURES: int = 16

    # Hidden ReLU units (single hidden layer)
    NUM_HIDDEN: int = 128

    # Action space: LEFT, RIGHT, FIRE, LEFTFIRE, RIGHTFIRE
    NUM_ACTIONS: int = 5

    # Nominal learning rate. The network applies a fixed 0.1 damping on top.
    LEARNING_RATE: float = 0.0001

    # =========================================================================
    # TRAINING HYPERPARAMETERS
    # =========================================================================

    # Discount factor (gamma) - How much to value future rewards
    GAMMA: float = 0.99

    # Transitions sampled per learning call
    BATCH_SIZE: int = 64

    # Replay memory capacity (oldest transitions are dropped first)
    MEMORY_SIZE: int = 10_000

    # Learn every N environment steps
    TRAIN_FREQUENCY: int = 4

    # =========================================================================
    # EXPLORATION SETTINGS (Epsilon-Greedy)
    # =========================================================================

    # Starting exploration rate (1.0 = 100% random)
    EPSILON_START: float = 1.0

    # Kept fairly high so the agent never stops exploring
    EPSILON_MIN: float = 0.1

    # epsilon *= EPSILON_DECAY after each episode
    EPSILON_DECAY: float = 0.9995

    # Share of exploratory actions forced onto the firing actions
    FIRE_EXPLORATION_BIAS: float = 0.5

    # =========================================================================
    # REWARD SHAPING
    # =========================================================================

    REWARD_SURVIVAL: float = 5.0
    REWARD_LIFE_LOST: float = -25.0
    REWARD_NO_FIRE: float = -5.0
    REWARD_NO_MOVE: float = -5.0
    REWARD_EDGE: float = -10.0
    REWARD_KILL: float = 200.0
    REWARD_COWARD: float = -1000.0

    # Frames without firing/moving before the penalty kicks in
    IDLE_FRAMES_PENALTY: int = 60

    # Frames without firing/moving before the episode is cut short
    IDLE_FRAMES_TERMINATE: int = 240

    # Horizontal displacement (pixels) that counts as a move
    MOVE_THRESHOLD: float = 2.0

    # Normalized x outside [EDGE_MARGIN, 1 - EDGE_MARGIN] is penalized
    EDGE_MARGIN: float = 0.15

    # =========================================================================
    # GENETIC ALGORITHM
    # =========================================================================

    POPULATION_SIZE: int = 50
    NUM_GENERATIONS: int = 1000
    TOURNAMENT_SIZE: int = 5

    # Probability that a single gene (weight) mutates
    MUTATION_RATE: float = 0.2

    # Standard deviation of the Gaussian mutation
    MUTATION_STRENGTH: float = 0.3

    # Smaller network for faster evolution: RIGHTFIRE / LEFTFIRE only
    GA_NUM_HIDDEN: int = 32
    GA_NUM_ACTIONS: int = 2

    # Frame limit per fitness evaluation
    GA_MAX_STEPS: int = 18_000

    # Episodes played when evaluating a saved genetic agent
    GA_EVAL_EPISODES: int = 10

    # =========================================================================
    # IMITATION LEARNING
    # =========================================================================

    IMITATION_EPOCHS: int = 100
    IMITATION_BATCH_SIZE: int = 64
    IMITATION_SAVE_EVERY: int = 10

    # =========================================================================
    # EMULATOR
    # =========================================================================

    # Frames repeated per action while training headless
    FRAME_SKIP: int = 4

    # Frame skip for interactive modes (manual, record, watching)
    INTERACTIVE_FRAME_SKIP: int = 1

    # Target frame rate for interactive modes
    FPS: int = 60

    SOUND: bool = False

    # =========================================================================
    # TRAINING CONTROL
    # =========================================================================

    # Total episodes to train
    MAX_EPISODES: int = 35_000

    # Episodes played by --eval and --manual
    EVAL_EPISODES: int = 100

    # Safety net against episodes that never end
    MAX_STEPS_PER_EPISODE: int = 50_000

    # Save weights every N episodes
    SAVE_EVERY: int = 50

    # Log stats every N episodes
    LOG_EVERY: int = 1

    # =========================================================================
    # SYSTEM SETTINGS
    # =========================================================================

    # Paths
    WEIGHTS_FILE: str = 'demon_bot_weights.txt'
    GENETIC_WEIGHTS_FILE: str = 'demon_bot_genetic_weights.txt'
    IMITATION_WEIGHTS_FILE: str = 'demon_bot_imitation_weights.txt'
    RECORDING_FILE: str = 'demon_gameplay_data.npz'
    LOG_DIR: str = 'logs'

    # 'DEBUG', 'INFO', 'WARNING', 'ERROR'
    LOG_LEVEL: str = 'INFO'

    # Random seed for reproducibility (None for entropy-seeded runs)
    SEED: Optional[int] = None

    def __post_init__(self):
        """Validation and derived calculations."""
        assert self.NUM_FEATURES > 0, "Feature count must be positive"
        assert self.NUM_HIDDEN > 0 and self.GA_NUM_HIDDEN > 0, "Hidden size must be positive"
        assert self.NUM_ACTIONS > 0 and self.GA_NUM_ACTIONS > 0, "Action count must be positive"
        assert self.LEARNING_RATE >= 0, "Learning rate must be non-negative"
        assert 0 < self.GAMMA <= 1, "Gamma must be in (0, 1]"
        assert self.BATCH_SIZE > 0, "Batch size must be positive"
        assert self.BATCH_SIZE <= self.MEMORY_SIZE, "Batch size cannot exceed memory size"
        assert self.TRAIN_FREQUENCY > 0, "Train frequency must be positive"
        assert self.EPSILON_START >= self.EPSILON_MIN, "Epsilon start must be >= min"
        assert 0 < self.EPSILON_DECAY <= 1, "Epsilon decay must be in (0, 1]"
        assert self.POPULATION_SIZE > 0, "Population size must be positive"
        assert 0 < self.TOURNAMENT_SIZE, "Tournament size must be positive"
        assert 0 <= self.MUTATION_RATE <= 1, "Mutation rate must be in [0, 1]"
        assert self.MUTATION_STRENGTH >= 0, "Mutation strength must be non-negative"
        assert self.IDLE_FRAMES_PENALTY <= self.IDLE_FRAMES_TERMINATE, \
            "Idle penalty must start before idle termination"


# Global config instance for easy importing
config = Config()


if __name__ == "__main__":
    # Print configuration summary
    cfg = Config()
    print("=" * 60)
    print("Demon Bot - Configuration Summary")
    print("=" * 60)
    print("\nNeural Network:")
    print(f"   Input size: {cfg.NUM_FEATURES}")
    print(f"   Hidden units: {cfg.NUM_HIDDEN}")
    print(f"   Output size: {cfg.NUM_ACTIONS}")
    print("\nTraining:")
    print(f"   Learning rate: {cfg.LEARNING_RATE}")
    print(f"   Batch size: {cfg.BATCH_SIZE}")
    print(f"   Gamma: {cfg.GAMMA}")
    print("\nExploration:")
    print(f"   Epsilon: {cfg.EPSILON_START} -> {cfg.EPSILON_MIN}")
    print(f"   Decay: {cfg.EPSILON_DECAY}")
    print("\nGenetic Algorithm:")
    print(f"   Population: {cfg.POPULATION_SIZE}")
    print(f"   Mutation: rate={cfg.MUTATION_RATE}, strength={cfg.MUTATION_STRENGTH}")
    print("=" * 60)
