"""
Sample-by-sample streaming FIR filter with persistent history.

Direct-form FIR:

    history = [x[n], x[n-1], ..., x[n-M+1]]
    y[n]    = Σᵢ h[i]·history[i]

Each RealTimeFilter owns its history buffer; independent instances can run
side by side on different streams. A single instance must only be driven by
one caller at a time.
"""

from typing import Optional

import numpy as np
from scipy.signal import lfilter, lfiltic

from blockconv.errors import InvalidArgumentError
from blockconv.logging_utils import get_logger
from blockconv.utils.sequences import as_sample, as_signal, check_castable

logger = get_logger(__name__)


class RealTimeFilter:
    """
    Streaming FIR filter producing one output sample per input sample.

    N calls to process() reproduce the first N samples of the linear
    convolution of the stream with h. No tail is produced after the stream
    ends: there is no end-of-stream signal.

    Example:
        >>> rt = RealTimeFilter([1, 2, 1])
        >>> [int(rt.process(s)) for s in [1, 2, 3, 2]]
        [1, 4, 8, 10]
    """

    def __init__(self, h, dtype: Optional[np.dtype] = None):
        """
        Args:
            h: Filter taps (M,), M >= 1, or an FIRKernel
            dtype: Sample dtype of the history buffer and outputs. When
                given it is fixed, and samples it cannot represent are
                rejected. By default it starts as the dtype of h and widens
                to ``np.result_type`` as float or complex samples arrive.
        """
        h = as_signal(h, name="h")
        self._fixed_dtype = dtype is not None
        self.dtype = np.dtype(dtype) if dtype is not None else h.dtype
        if not np.issubdtype(self.dtype, np.number):
            raise InvalidArgumentError(f"dtype must be numeric, got {self.dtype}")

        self._h = np.array(h, dtype=self.dtype, copy=True)
        self._h.setflags(write=False)
        self.reset()

        logger.debug("RealTimeFilter: M=%d, dtype=%s", self.n_taps, self.dtype)

    @property
    def n_taps(self) -> int:
        """Filter length M."""
        return int(self._h.shape[0])

    @property
    def taps(self) -> np.ndarray:
        return self._h

    @property
    def history(self) -> np.ndarray:
        """Copy of the history buffer, most recent sample first."""
        return self._history.copy()

    def reset(self):
        """Zero the history buffer."""
        self._history = np.zeros(self.n_taps, dtype=self.dtype)

    def _accept(self, sample_dtype: np.dtype):
        """Make sure samples of ``sample_dtype`` can be stored without truncation."""
        if self._fixed_dtype:
            check_castable(sample_dtype, self.dtype, name="sample")
            return
        if np.can_cast(sample_dtype, self.dtype, casting="same_kind"):
            return

        dtype = np.result_type(self.dtype, sample_dtype)
        logger.debug("RealTimeFilter: widening %s -> %s", self.dtype, dtype)

        self._h = self._h.astype(dtype)
        self._h.setflags(write=False)
        self._history = self._history.astype(dtype)
        self.dtype = dtype

    def process(self, sample):
        """
        Filter one sample.

        Args:
            sample: Next input sample (numeric scalar)

        Returns:
            Output sample y[n] of type ``dtype``

        Raises:
            InvalidArgumentError: Non-numeric or non-finite sample, or a
                sample a fixed ``dtype`` cannot represent. The history is
                left unmodified.
        """
        value = as_sample(sample)
        self._accept(value.dtype)

        self._history[0] = value
        y = np.dot(self._h, self._history)

        # history[i+1] = history[i], discarding history[M-1]
        self._history[1:] = self._history[:-1]

        return y

    def process_block(self, x_block) -> np.ndarray:
        """
        Filter a block of samples with the same persistent state.

        Equivalent to calling process() once per sample, including the
        history left behind for the next call.

        Args:
            x_block: Input samples (B,); an empty block is a no-op

        Returns:
            Output block (B,) of type ``dtype``

        Raises:
            InvalidArgumentError: Non-1D, non-numeric or non-finite samples,
                or samples a fixed ``dtype`` cannot represent. The history
                is left unmodified.
        """
        x_block = np.asarray(x_block)
        if x_block.ndim == 1 and x_block.shape[0] == 0:
            return np.zeros(0, dtype=self.dtype)

        x_block = as_signal(x_block, name="x_block")
        if not np.all(np.isfinite(x_block)):
            raise InvalidArgumentError("x_block must contain only finite samples")
        self._accept(x_block.dtype)
        x_block = x_block.astype(self.dtype, copy=False)

        M = self.n_taps
        # Inputs preceding this block, most recent first: x[n-1], ..., x[n-M+1]
        past = self._history[1:]
        x_ext = np.concatenate([past[::-1], x_block])  # (M-1+B,), oldest first

        if np.issubdtype(self.dtype, np.inexact) and self.dtype != np.float16:
            # lfilter has no float16 loop
            zi = lfiltic(self._h, [1.0], y=np.zeros(0, dtype=self.dtype), x=past)
            y, _ = lfilter(self._h, [1.0], x_block, zi=zi)
            y = y.astype(self.dtype, copy=False)
        else:
            # Exact integer path
            y = np.convolve(x_ext, self._h, mode="valid")

        # Same state process() would leave: newest sample duplicated at [0]
        self._history[1:] = x_ext[::-1][: M - 1]
        self._history[0] = x_block[-1]

        return y
