"""
AI Module
=========

Learning components for playing Demon Attack from RAM.

Classes:
    Network                 - Hand-rolled 2-layer perceptron (predict/train/genome/persistence)
    Agent                   - Epsilon-greedy Q-learning agent
    PrioritizedReplayMemory - Priority-proportional experience replay
    RewardShaper            - Dense reward terms on top of the game score
    Trainer                 - Q-learning loop
    GeneticTrainer          - Genetic algorithm over network genomes
    ImitationTrainer        - Supervised training from recorded gameplay
"""

from .network import Network, WeightsFormatError, PARAMETER_LAYOUT
from .agent import Agent
from .replay_buffer import PrioritizedReplayMemory, Transition
from .rewards import RewardShaper, ShapedReward
from .trainer import Trainer, TrainingMetrics, EpisodeStats
from .genetic import GeneticTrainer, Individual, GenerationStats
from .imitation import ImitationTrainer, EpochStats

__all__ = [
    'Network',
    'WeightsFormatError',
    'PARAMETER_LAYOUT',
    'Agent',
    'PrioritizedReplayMemory',
    'Transition',
    'RewardShaper',
    'ShapedReward',
    'Trainer',
    'TrainingMetrics',
    'EpisodeStats',
    'GeneticTrainer',
    'Individual',
    'GenerationStats',
    'ImitationTrainer',
    'EpochStats',
]
