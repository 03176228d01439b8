"""
Tests for the configuration dataclass.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Config


class TestConfigDefaults:
    """Test default values."""

    def test_network_defaults(self):
        """Q-network: 16 features, 128 hidden, 5 actions."""
        cfg = Config()
        assert cfg.NUM_FEATURES == 16
        assert cfg.NUM_HIDDEN == 128
        assert cfg.NUM_ACTIONS == 5

    def test_training_defaults(self):
        """Q-learning hyperparameters."""
        cfg = Config()
        assert cfg.LEARNING_RATE == 0.0001
        assert cfg.GAMMA == 0.99
        assert cfg.BATCH_SIZE == 64
        assert cfg.MEMORY_SIZE == 10_000
        assert cfg.TRAIN_FREQUENCY == 4
        assert cfg.SAVE_EVERY == 50

    def test_genetic_defaults(self):
        """Genetic algorithm parameters."""
        cfg = Config()
        assert cfg.POPULATION_SIZE == 50
        assert cfg.TOURNAMENT_SIZE == 5
        assert cfg.MUTATION_RATE == 0.2
        assert cfg.MUTATION_STRENGTH == 0.3
        assert cfg.GA_NUM_ACTIONS == 2

    def test_weights_files(self):
        """Each training mode writes its own weights file."""
        cfg = Config()
        files = {cfg.WEIGHTS_FILE, cfg.GENETIC_WEIGHTS_FILE, cfg.IMITATION_WEIGHTS_FILE}
        assert len(files) == 3

    def test_seed_unset_by_default(self):
        """No seed unless asked for."""
        assert Config().SEED is None


class TestConfigValidation:
    """Test __post_init__ checks."""

    def test_zero_learning_rate_allowed(self):
        """Evolution-only setups use learning rate 0."""
        assert Config(LEARNING_RATE=0.0).LEARNING_RATE == 0.0

    @pytest.mark.parametrize("overrides", [
        {"LEARNING_RATE": -0.1},
        {"GAMMA": 0.0},
        {"GAMMA": 1.5},
        {"BATCH_SIZE": 0},
        {"BATCH_SIZE": 200, "MEMORY_SIZE": 100},
        {"TRAIN_FREQUENCY": 0},
        {"EPSILON_START": 0.05, "EPSILON_MIN": 0.1},
        {"EPSILON_DECAY": 0.0},
        {"MUTATION_RATE": 1.5},
        {"IDLE_FRAMES_PENALTY": 300, "IDLE_FRAMES_TERMINATE": 240},
    ])
    def test_invalid_values_rejected(self, overrides):
        """Inconsistent settings fail at construction."""
        with pytest.raises(AssertionError):
            Config(**overrides)
