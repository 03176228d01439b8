#!/usr/bin/env python3
"""
Demon Bot - Main Entry Point
============================

Trains and runs agents that play Demon Attack from the Atari RAM.

Usage:
    # Q-learning, headless (default)
    python main.py roms/demon_attack.bin

    # Q-learning while watching the emulator window
    python main.py roms/demon_attack.bin --display

    # Watch the trained Q-agent (epsilon=0, no learning)
    python main.py roms/demon_attack.bin --eval

    # Play yourself with a live RAM dump (for finding RAM addresses)
    python main.py roms/demon_attack.bin --manual

    # Genetic algorithm training / evaluation
    python main.py roms/demon_attack.bin --genetic --generations 200
    python main.py roms/demon_attack.bin --genetic-eval

    # Record your own gameplay, then train on it
    python main.py roms/demon_attack.bin --record
    python main.py --imitate --epochs 100

Press Ctrl+C during training to stop; weights are saved before exiting.
"""

import argparse
import os
import sys
from typing import Optional

import numpy as np

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import Config
from demonbot.ai.agent import Agent
from demonbot.ai.genetic import GeneticTrainer
from demonbot.ai.imitation import ImitationTrainer
from demonbot.ai.trainer import Trainer
from demonbot.game.atari import AtariEnvironment
from demonbot.game.recording import load_recording, save_recording
from demonbot.utils.logger import LogLevel, get_logger, setup_logging


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Demon Bot - learn to play Demon Attack from the Atari RAM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES
========
    python main.py demon_attack.bin                     Q-learning (headless)
    python main.py demon_attack.bin --eval              Watch the trained agent
    python main.py demon_attack.bin --manual            Play with RAM viewer
    python main.py demon_attack.bin --genetic           Genetic algorithm
    python main.py demon_attack.bin --record            Record gameplay
    python main.py --imitate                            Train from recording
        """
    )

    parser.add_argument(
        'rom', nargs='?', default=None,
        help='Path to the Demon Attack ROM (not needed for --imitate)'
    )

    # Mode selection
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        '--train', action='store_true',
        help='Q-learning training (default)'
    )
    mode_group.add_argument(
        '--eval', action='store_true',
        help='Evaluate the Q-learning agent (epsilon=0, no training)'
    )
    mode_group.add_argument(
        '--manual', action='store_true',
        help='Play with the keyboard while watching the RAM'
    )
    mode_group.add_argument(
        '--genetic', action='store_true',
        help='Train with the genetic algorithm'
    )
    mode_group.add_argument(
        '--genetic-eval', action='store_true',
        help='Evaluate the best genetic agent'
    )
    mode_group.add_argument(
        '--record', action='store_true',
        help='Record gameplay for imitation learning'
    )
    mode_group.add_argument(
        '--imitate', action='store_true',
        help='Train the Q-network on recorded gameplay'
    )

    # Training parameters
    parser.add_argument(
        '--episodes', type=int, default=None,
        help='Number of episodes (training or evaluation)'
    )
    parser.add_argument(
        '--generations', type=int, default=None,
        help='Number of genetic algorithm generations'
    )
    parser.add_argument(
        '--epochs', type=int, default=None,
        help='Number of imitation learning epochs'
    )
    parser.add_argument(
        '--lr', type=float, default=None,
        help='Learning rate'
    )

    # Files
    parser.add_argument(
        '--weights', type=str, default=None,
        help='Weights file to load/save (default depends on mode)'
    )
    parser.add_argument(
        '--recording', type=str, default=None,
        help='Gameplay recording file'
    )

    # Other options
    parser.add_argument(
        '--display', action='store_true',
        help='Show the emulator window while training'
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Random seed for reproducibility'
    )
    parser.add_argument(
        '--log-level', type=str, default=None,
        choices=[level.name for level in LogLevel],
        help='Logging verbosity'
    )

    args = parser.parse_args(argv)
    if args.rom is None and not args.imitate:
        parser.error("a ROM path is required for this mode")
    return args


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Copy CLI overrides onto the config."""
    if args.lr is not None:
        config.LEARNING_RATE = args.lr
    if args.seed is not None:
        config.SEED = args.seed
    if args.log_level is not None:
        config.LOG_LEVEL = args.log_level
    config.__post_init__()
    return config


def make_env(config: Config, rom: str, display: bool, interactive: bool = False) -> AtariEnvironment:
    """Emulator configured for the given mode."""
    frame_skip = config.INTERACTIVE_FRAME_SKIP if interactive else config.FRAME_SKIP
    return AtariEnvironment(
        rom,
        display_screen=display,
        sound=config.SOUND or interactive,
        frame_skip=frame_skip,
        seed=config.SEED
    )


def run_q_learning(config: Config, args: argparse.Namespace, rng: np.random.Generator) -> None:
    """Q-learning training or evaluation."""
    logger = get_logger('main')
    weights = args.weights or config.WEIGHTS_FILE

    env = make_env(config, args.rom, display=args.display or args.eval)
    agent = Agent(config=config, rng=rng)
    agent.load(weights)
    trainer = Trainer(env, agent, config, weights_path=weights)

    try:
        if args.eval:
            logger.info("Evaluation mode (epsilon=0, no training)")
            results = trainer.evaluate(args.episodes)
            logger.info(
                f"Mean score: {results['mean_score']:.1f} "
                f"(min {results['min_score']:.1f}, max {results['max_score']:.1f})"
            )
        else:
            try:
                trainer.train(args.episodes)
            except KeyboardInterrupt:
                logger.warning("Training interrupted by user, saving weights")
                trainer.save()
    finally:
        env.close()


def run_genetic(config: Config, args: argparse.Namespace, rng: np.random.Generator) -> None:
    """Genetic algorithm training or evaluation."""
    logger = get_logger('main')
    weights = args.weights or config.GENETIC_WEIGHTS_FILE

    env = make_env(config, args.rom, display=args.display or args.genetic_eval)
    trainer = GeneticTrainer(env, config, rng=rng, weights_path=weights)

    try:
        if args.genetic_eval:
            scores = trainer.evaluate(episodes=args.episodes)
            logger.info(f"Mean score: {np.mean(scores):.1f}")
        else:
            try:
                trainer.run(args.generations)
            except KeyboardInterrupt:
                logger.warning("Evolution interrupted by user")
    finally:
        env.close()


def run_manual(config: Config, args: argparse.Namespace) -> None:
    """Keyboard play with RAM viewer, optionally recording."""
    from demonbot.visualizer.ram_view import ManualSession

    logger = get_logger('main')
    env = make_env(config, args.rom, display=True, interactive=True)
    session = ManualSession(env, config, record=args.record)

    try:
        frames = session.run()
    finally:
        env.close()

    if args.record:
        path = args.recording or config.RECORDING_FILE
        save_recording(path, frames)
        logger.info(f"Recording finished: {len(frames)} frames saved to {path}")


def run_imitation(config: Config, args: argparse.Namespace, rng: np.random.Generator) -> None:
    """Supervised training on a gameplay recording."""
    logger = get_logger('main')
    recording = args.recording or config.RECORDING_FILE

    try:
        frames = load_recording(recording)
    except FileNotFoundError:
        logger.error(f"Could not open gameplay recording: {recording}")
        sys.exit(1)

    trainer = ImitationTrainer(
        config=config,
        rng=rng,
        weights_path=args.weights or config.IMITATION_WEIGHTS_FILE
    )
    trainer.train(frames, args.epochs)


def main(argv: Optional[list] = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    config = apply_overrides(Config(), args)

    setup_logging(log_dir=config.LOG_DIR, level=LogLevel[config.LOG_LEVEL])
    logger = get_logger('main')

    # One explicitly seeded generator, threaded through every component
    rng = np.random.default_rng(config.SEED)

    if args.imitate:
        run_imitation(config, args, rng)
    elif args.manual or args.record:
        run_manual(config, args)
    elif args.genetic or args.genetic_eval:
        run_genetic(config, args, rng)
    else:
        run_q_learning(config, args, rng)

    logger.info("Done.")


if __name__ == "__main__":
    main()
