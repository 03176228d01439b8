"""
Demon Bot - Source Package
==========================

Agents that learn to play Demon Attack from the Atari 2600 RAM.

Modules:
    game/       - Emulator wrapper, RAM features, action spaces, recordings
    ai/         - Neural network, Q-learning, genetic algorithm, imitation
    visualizer/ - RAM viewer and manual play
    utils/      - Logging
"""

__version__ = "1.0.0"
