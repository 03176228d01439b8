"""
Imitation Learning
==================

Supervised training of the Q-network on recorded human gameplay.

Every recorded frame becomes one sample:
    input  = extract_features(ram)
    target = one-hot vector of the action the human pressed

Training is the network's own online update, one frame at a time, over
shuffled epochs. The resulting weights file has the Q-learning architecture,
so it can seed or replace demon_bot_weights.txt.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

import sys
sys.path.append('../..')
from config import Config

from .network import Network
from demonbot.game.actions import index_from_action
from demonbot.game.features import extract_features
from demonbot.game.recording import GameplayFrame
from demonbot.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class EpochStats:
    """Loss and accuracy of one pass over the recording."""
    epoch: int
    loss: float
    accuracy: float


class ImitationTrainer:
    """
    Trains a network to reproduce recorded actions.

    Example:
        >>> frames = load_recording('demon_gameplay_data.npz')
        >>> trainer = ImitationTrainer(network, config, rng=np.random.default_rng(0))
        >>> history = trainer.train(frames, epochs=100)
    """

    def __init__(
        self,
        network: Optional[Network] = None,
        config: Optional[Config] = None,
        rng: Optional[np.random.Generator] = None,
        weights_path: Optional[str] = None
    ):
        """
        Initialize the trainer.

        Args:
            network: Network to train (built from config if None)
            config: Configuration object
            rng: Random generator for shuffling
            weights_path: Where to save weights (default: config.IMITATION_WEIGHTS_FILE)
        """
        self.config = config or Config()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.network = network if network is not None else Network(
            self.config.NUM_FEATURES,
            self.config.NUM_HIDDEN,
            self.config.NUM_ACTIONS,
            self.config.LEARNING_RATE,
            rng=self.rng
        )
        self.weights_path = weights_path or self.config.IMITATION_WEIGHTS_FILE
        self.history: List[EpochStats] = []

    def _one_hot(self, index: int) -> np.ndarray:
        target = np.zeros(self.network.output_size, dtype=np.float64)
        target[index] = 1.0
        return target

    def train_epoch(self, frames: Sequence[GameplayFrame], epoch: int = 0) -> EpochStats:
        """
        One shuffled pass over the recording.

        Accuracy counts frames whose argmax prediction (before the update)
        matches the recorded action; loss is the squared error after the
        update, averaged over frames.

        Args:
            frames: Recorded frames
            epoch: Epoch number for the returned stats

        Returns:
            Epoch statistics

        Raises:
            ValueError: If frames is empty
        """
        if not frames:
            raise ValueError("Cannot train on an empty recording")

        order = self.rng.permutation(len(frames))
        batch_size = self.config.IMITATION_BATCH_SIZE

        total_loss = 0.0
        correct = 0

        for start in range(0, len(order), batch_size):
            for i in order[start:start + batch_size]:
                frame = frames[int(i)]
                features = extract_features(frame.ram_state, self.network.input_size)
                action_idx = index_from_action(frame.action)

                predictions = self.network.predict(features)
                if int(np.argmax(predictions)) == action_idx:
                    correct += 1

                target = self._one_hot(action_idx)
                self.network.train(features, target)

                after = self.network.predict(features)
                total_loss += float(np.sum((target - after) ** 2))

        return EpochStats(
            epoch=epoch,
            loss=total_loss / len(frames),
            accuracy=correct / len(frames)
        )

    def train(self, frames: Sequence[GameplayFrame], epochs: Optional[int] = None) -> List[EpochStats]:
        """
        Train for several epochs, saving every IMITATION_SAVE_EVERY epochs
        and after the last one.

        Args:
            frames: Recorded frames
            epochs: Number of epochs (default from config)

        Returns:
            Per-epoch statistics
        """
        epochs = epochs or self.config.IMITATION_EPOCHS
        logger.info(f"Imitation training on {len(frames)} frames for {epochs} epochs")

        for epoch in range(1, epochs + 1):
            stats = self.train_epoch(frames, epoch)
            self.history.append(stats)
            logger.info(
                f"Epoch {epoch}/{epochs} | loss={stats.loss:.6f} | "
                f"accuracy={stats.accuracy * 100.0:.1f}%"
            )

            if epoch % self.config.IMITATION_SAVE_EVERY == 0 or epoch == epochs:
                self.network.save(self.weights_path)

        return self.history
