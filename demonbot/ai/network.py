"""
Feed-Forward Q-Network
======================

A fixed-topology, fully-connected network that maps the RAM feature vector
to one value estimate per action.

Architecture:
    Input (features) -> Hidden (ReLU) -> Output (linear Q-values)

The network is trained by hand-written backpropagation (no autodiff), one
sample at a time, with three independent stability guards:

    1. Error clipping       - output and hidden deltas clipped to [-1, 1]
    2. Step clipping        - each weight change clipped to [-0.1, 0.1]
    3. Post-update repair   - a weight that ends up NaN/Inf is reset to 0.0

Genome view:
    Every trainable scalar can be read out as one flat vector and written
    back in the same order, so the genetic algorithm can treat the network
    as a chromosome. The order is PARAMETER_LAYOUT and it is also the order
    of the plain-text weights file:

        weights_input_hidden rows, bias_hidden,
        weights_hidden_output rows, bias_output
"""

import copy
import math
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from demonbot.utils.logger import get_logger, log_model_event

logger = get_logger(__name__)


# Genome / file order. External evolutionary operators depend on it.
PARAMETER_LAYOUT: Tuple[str, ...] = (
    'weights_input_hidden',
    'bias_hidden',
    'weights_hidden_output',
    'bias_output',
)

# Initial weights are clamped to this magnitude
INIT_WEIGHT_LIMIT = 0.5

# Damping applied on top of the nominal learning rate
LEARNING_RATE_DAMPING = 0.1

# Bound on backpropagated errors
DELTA_CLIP = 1.0

# Bound on a single weight change
WEIGHT_STEP_CLIP = 0.1

# Loaded values beyond this magnitude are treated as corrupt
LOAD_VALUE_LIMIT = 100.0

ArrayLike = Union[Sequence[float], np.ndarray]


class WeightsFormatError(ValueError):
    """Raised when a weights file does not hold enough (or well-formed) values."""


class Network:
    """
    Two-layer perceptron with ReLU hidden units and linear outputs.

    Parameter shapes are fixed at construction; every mutation (training,
    genome writes, loading) happens in place.

    Attributes:
        input_size: Length of the input vector
        hidden_size: Number of hidden ReLU units
        output_size: Number of outputs (actions)
        learning_rate: Nominal SGD step size (0 for evolution-only networks)
        weights_input_hidden: (hidden_size, input_size) matrix
        bias_hidden: (hidden_size,) vector
        weights_hidden_output: (output_size, hidden_size) matrix
        bias_output: (output_size,) vector

    Example:
        >>> net = Network(16, 128, 5, learning_rate=0.0001)
        >>> q_values = net.predict(features)
        >>> net.train(features, targets)
        >>> genome = net.to_flat_vector()
    """

    def __init__(
        self,
        input_size: int,
        hidden_size: int,
        output_size: int,
        learning_rate: float,
        rng: Optional[np.random.Generator] = None
    ):
        """
        Initialize the network.

        Args:
            input_size: Number of input features
            hidden_size: Number of hidden neurons
            output_size: Number of outputs
            learning_rate: Nominal learning rate (may be 0)
            rng: Random generator for weight initialization (fresh if None)
        """
        self.input_size = int(input_size)
        self.hidden_size = int(hidden_size)
        self.output_size = int(output_size)
        self.learning_rate = float(learning_rate)

        rng = rng if rng is not None else np.random.default_rng()

        # Variance scaling for ReLU: std = sqrt(1 / fan_in), then clamp
        self.weights_input_hidden = np.clip(
            rng.normal(0.0, math.sqrt(1.0 / self.input_size),
                       size=(self.hidden_size, self.input_size)),
            -INIT_WEIGHT_LIMIT, INIT_WEIGHT_LIMIT
        )
        self.bias_hidden = np.zeros(self.hidden_size, dtype=np.float64)

        self.weights_hidden_output = np.clip(
            rng.normal(0.0, math.sqrt(1.0 / self.hidden_size),
                       size=(self.output_size, self.hidden_size)),
            -INIT_WEIGHT_LIMIT, INIT_WEIGHT_LIMIT
        )
        self.bias_output = np.zeros(self.output_size, dtype=np.float64)

    # =========================================================================
    # PARAMETER LAYOUT
    # =========================================================================

    def _parameters(self) -> Iterator[np.ndarray]:
        """Yield the parameter arrays in PARAMETER_LAYOUT order."""
        for name in PARAMETER_LAYOUT:
            yield getattr(self, name)

    @property
    def parameter_shapes(self) -> Dict[str, Tuple[int, ...]]:
        """Shape of every parameter container, keyed by layout name."""
        return {name: getattr(self, name).shape for name in PARAMETER_LAYOUT}

    @property
    def parameter_count(self) -> int:
        """Total number of trainable scalars (genome length)."""
        return sum(array.size for array in self._parameters())

    def _row_lengths(self) -> List[int]:
        """Number of values on each line of a weights file."""
        return (
            [self.input_size] * self.hidden_size
            + [self.hidden_size]
            + [self.hidden_size] * self.output_size
            + [self.output_size]
        )

    # =========================================================================
    # INFERENCE
    # =========================================================================

    def _as_vector(self, values: ArrayLike, size: int, what: str) -> np.ndarray:
        vector = np.asarray(values, dtype=np.float64).reshape(-1)
        if vector.size != size:
            raise ValueError(f"{what} has {vector.size} values, expected {size}")
        return vector

    def _forward(self, inputs: np.ndarray) -> Optional[Tuple[np.ndarray, np.ndarray, np.ndarray]]:
        """
        Forward pass returning (hidden_sums, hidden_outputs, outputs).

        Returns None when a sum turns NaN/Inf. A running sum that becomes
        non-finite stays non-finite, so checking the finished sums catches
        every intermediate failure.
        """
        with np.errstate(over='ignore', invalid='ignore'):
            hidden_sums = self.bias_hidden + self.weights_input_hidden @ inputs
        if not np.isfinite(hidden_sums).all():
            logger.warning("NaN/Inf in hidden layer sums")
            return None
        hidden_outputs = np.maximum(hidden_sums, 0.0)

        with np.errstate(over='ignore', invalid='ignore'):
            outputs = self.bias_output + self.weights_hidden_output @ hidden_outputs
        if not np.isfinite(outputs).all():
            logger.warning("NaN/Inf in output layer sums")
            return None

        return hidden_sums, hidden_outputs, outputs

    def predict(self, inputs: ArrayLike) -> np.ndarray:
        """
        Compute Q-values for one input vector.

        Non-finite inputs or sums return a zero vector instead of raising,
        so the calling game loop keeps running.

        Args:
            inputs: Feature vector of length input_size

        Returns:
            Q-values of length output_size (raw linear outputs)
        """
        x = self._as_vector(inputs, self.input_size, "Input")

        if not np.isfinite(x).all():
            logger.warning("NaN or Inf input in predict()")
            return np.zeros(self.output_size, dtype=np.float64)

        forward = self._forward(x)
        if forward is None:
            return np.zeros(self.output_size, dtype=np.float64)
        return forward[2]

    # =========================================================================
    # TRAINING
    # =========================================================================

    def train(self, inputs: ArrayLike, targets: ArrayLike) -> None:
        """
        One step of online gradient descent on squared error.

        The step is skipped entirely (no parameter changes) when the input,
        the target, a forward sum or a delta is not finite.

        Args:
            inputs: Feature vector of length input_size
            targets: Desired outputs of length output_size
        """
        x = self._as_vector(inputs, self.input_size, "Input")
        y = self._as_vector(targets, self.output_size, "Target")

        if not np.isfinite(x).all():
            logger.warning("NaN or Inf input in train(), skipping update")
            return
        if not np.isfinite(y).all():
            logger.warning("NaN or Inf target in train(), skipping update")
            return

        forward = self._forward(x)
        if forward is None:
            return
        hidden_sums, hidden_outputs, outputs = forward

        # Output error, clipped against exploding gradients
        output_deltas = np.clip(y - outputs, -DELTA_CLIP, DELTA_CLIP)
        if not np.isfinite(output_deltas).all():
            logger.warning("NaN/Inf in output deltas, skipping update")
            return

        # Hidden error through the pre-update output weights
        with np.errstate(over='ignore', invalid='ignore'):
            errors = self.weights_hidden_output.T @ output_deltas
            hidden_deltas = np.clip(
                errors * (hidden_sums > 0.0), -DELTA_CLIP, DELTA_CLIP
            )
        if not np.isfinite(hidden_deltas).all():
            logger.warning("NaN/Inf in hidden deltas, skipping update")
            return

        effective_lr = self.learning_rate * LEARNING_RATE_DAMPING

        with np.errstate(over='ignore', invalid='ignore'):
            # Output layer
            self.bias_output += effective_lr * output_deltas
            self._repair(self.bias_output, 'bias_output')
            self.weights_hidden_output += np.clip(
                effective_lr * np.outer(output_deltas, hidden_outputs),
                -WEIGHT_STEP_CLIP, WEIGHT_STEP_CLIP
            )
            self._repair(self.weights_hidden_output, 'weights_hidden_output')

            # Hidden layer
            self.bias_hidden += effective_lr * hidden_deltas
            self._repair(self.bias_hidden, 'bias_hidden')
            self.weights_input_hidden += np.clip(
                effective_lr * np.outer(hidden_deltas, x),
                -WEIGHT_STEP_CLIP, WEIGHT_STEP_CLIP
            )
            self._repair(self.weights_input_hidden, 'weights_input_hidden')

    @staticmethod
    def _repair(array: np.ndarray, name: str) -> None:
        """Reset individual NaN/Inf entries to 0.0 in place."""
        bad = ~np.isfinite(array)
        if bad.any():
            logger.warning(f"NaN/Inf after updating {name}, resetting {int(bad.sum())} value(s)")
            array[bad] = 0.0

    # =========================================================================
    # GENOME ADAPTER
    # =========================================================================

    def to_flat_vector(self) -> np.ndarray:
        """
        Return every parameter as one flat vector in PARAMETER_LAYOUT order.

        The result is a copy; changing it does not touch the network.
        """
        return np.concatenate([array.reshape(-1) for array in self._parameters()])

    def from_flat_vector(self, values: ArrayLike) -> None:
        """
        Overwrite parameters positionally from a flat vector.

        A vector shorter than parameter_count updates only the leading
        parameters and leaves the rest unchanged; extra values are ignored.
        Non-finite genes are rejected and the parameter keeps its value.

        Args:
            values: Flat genome in PARAMETER_LAYOUT order
        """
        genes = np.asarray(values, dtype=np.float64).reshape(-1)

        rejected = 0
        offset = 0
        for array in self._parameters():
            if offset >= genes.size:
                break
            count = min(array.size, genes.size - offset)
            chunk = genes[offset:offset + count]
            finite = np.isfinite(chunk)
            array.flat[:count] = np.where(finite, chunk, array.flat[:count])
            rejected += int(count - finite.sum())
            offset += count

        if rejected:
            logger.warning(f"Ignored {rejected} NaN/Inf gene(s) in from_flat_vector()")

    def copy(self) -> 'Network':
        """Return an independent deep copy of this network."""
        return copy.deepcopy(self)

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def save(self, filepath: Union[str, Path]) -> None:
        """
        Save parameters as plain text, one array row per line.

        Non-finite values are written as 0.0.

        Args:
            filepath: Destination file
        """
        path = Path(filepath)
        if path.parent != Path('.'):
            path.parent.mkdir(parents=True, exist_ok=True)

        lines = []
        for array in self._parameters():
            for row in np.atleast_2d(array):
                lines.append(" ".join(
                    repr(float(value)) if math.isfinite(value) else "0.0"
                    for value in row
                ))

        with open(path, 'w', encoding='utf-8') as f:
            for line in lines:
                f.write(line + "\n")

        log_model_event('save', str(path), parameters=self.parameter_count)

    def load(self, filepath: Union[str, Path], check_shape: bool = False) -> bool:
        """
        Load parameters saved by save().

        The file carries no shape information; values are read positionally.
        Values that are NaN/Inf or larger than 100 in magnitude become 0.0.
        Nothing is changed unless the whole file parses.

        Args:
            filepath: Weights file
            check_shape: Also require every line to hold exactly the number
                of values of the matching array row

        Returns:
            True if weights were loaded, False if the file does not exist

        Raises:
            WeightsFormatError: The file is truncated or holds a non-number
        """
        path = Path(filepath)
        if not path.exists():
            logger.info(f"Weights file not found: {path}. Keeping current weights.")
            return False

        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()

        if check_shape:
            self._check_file_shape(text, path)

        tokens = text.split()
        expected = self.parameter_count
        if len(tokens) < expected:
            raise WeightsFormatError(
                f"{path} holds {len(tokens)} values, network needs {expected}; "
                f"the file may be corrupt or saved from a different architecture"
            )

        try:
            values = np.array([float(token) for token in tokens[:expected]], dtype=np.float64)
        except ValueError as e:
            raise WeightsFormatError(f"{path} contains a non-numeric value: {e}") from e

        with np.errstate(invalid='ignore'):
            corrupt = ~np.isfinite(values) | (np.abs(values) > LOAD_VALUE_LIMIT)
        values[corrupt] = 0.0

        self.from_flat_vector(values)
        log_model_event('load', str(path), parameters=expected)
        return True

    def _check_file_shape(self, text: str, path: Path) -> None:
        rows = [line.split() for line in text.splitlines() if line.strip()]
        expected = self._row_lengths()
        if len(rows) != len(expected):
            raise WeightsFormatError(
                f"{path} has {len(rows)} non-empty lines, network needs {len(expected)}"
            )
        for line_number, (row, length) in enumerate(zip(rows, expected), start=1):
            if len(row) != length:
                raise WeightsFormatError(
                    f"{path} line {line_number} has {len(row)} values, expected {length}"
                )

    # Aliases for callers using the longer names
    save_weights = save
    load_weights = load

    def __repr__(self) -> str:
        return (
            f"Network(input_size={self.input_size}, hidden_size={self.hidden_size}, "
            f"output_size={self.output_size}, learning_rate={self.learning_rate})"
        )


# Testing
if __name__ == "__main__":
    print("Testing Network...")

    net = Network(16, 128, 5, learning_rate=0.0001, rng=np.random.default_rng(0))
    x = np.random.default_rng(1).random(16)

    print(f"Parameters: {net.parameter_count}")
    print(f"Q-values: {net.predict(x)}")

    target = np.zeros(5)
    for _ in range(100):
        net.train(x, target)
    print(f"Q-values after training towards 0: {net.predict(x)}")
