"""
Direct (time-domain) convolution engines.

Engines implement the two single-block kernels every strategy is built on:

- linear:   y[i] = Σⱼ x[j]·h[i-j],           len(y) = N + M - 1
- circular: y[n] = Σₖ x[k]·h[(n-k) mod L],   len(y) = L

Engines receive already validated 1-D arrays of a common dtype and are
stateless, so one instance can serve any number of callers.
"""

from typing import Protocol

import numpy as np

from blockconv.errors import InvalidArgumentError
from blockconv.logging_utils import get_logger

try:
    from numba import njit
    NUMBA_AVAILABLE = True
except ImportError:
    NUMBA_AVAILABLE = False

logger = get_logger(__name__)


class ConvolutionEngine(Protocol):
    """Strategy interface for direct convolution kernels."""

    def linear(self, x: np.ndarray, h: np.ndarray) -> np.ndarray:
        """
        Full linear convolution.

        Args:
            x: Signal (N,)
            h: Filter taps (M,), same dtype as x

        Returns:
            Output (N + M - 1,)
        """
        ...

    def circular(self, x: np.ndarray, h: np.ndarray) -> np.ndarray:
        """
        Circular convolution of two equal-length sequences.

        Args:
            x: Signal (L,)
            h: Filter taps zero padded to (L,), same dtype as x

        Returns:
            Output (L,)
        """
        ...


class DirectNumpyEngine:
    """
    NumPy reference engine.

    Vectorizes over one operand and loops over the other, so the cost is
    O(N·M) for linear and O(L²) for circular with only min(N, M) / L Python
    iterations. Integer dtypes are computed exactly.
    """

    def linear(self, x: np.ndarray, h: np.ndarray) -> np.ndarray:
        N = len(x)
        M = len(h)
        y = np.zeros(N + M - 1, dtype=np.result_type(x, h))

        # Shift-and-add the longer operand, scaled by each sample of the shorter
        if M <= N:
            for i in range(M):
                y[i:i + N] += h[i] * x
        else:
            for j in range(N):
                y[j:j + M] += x[j] * h

        return y

    def circular(self, x: np.ndarray, h: np.ndarray) -> np.ndarray:
        L = len(x)
        y = np.zeros(L, dtype=np.result_type(x, h))
        k = np.arange(L)

        for n in range(L):
            # Explicit wrap: n - k for k <= n, n + L - k otherwise
            wrap_idx = np.where(k <= n, n - k, n + L - k)
            y[n] = np.dot(x, h[wrap_idx])

        return y


# Numba-compiled kernels (if available)
if NUMBA_AVAILABLE:

    @njit(cache=True)
    def _numba_linear(x: np.ndarray, h: np.ndarray, y: np.ndarray) -> None:
        """y[i] = Σⱼ x[j]·h[i-j] over the valid range of j."""
        N = x.shape[0]
        M = h.shape[0]

        for i in range(N + M - 1):
            j_start = max(0, i - M + 1)
            j_stop = min(i, N - 1)
            accum = y[i]
            for j in range(j_start, j_stop + 1):
                accum += x[j] * h[i - j]
            y[i] = accum

    @njit(cache=True)
    def _numba_circular(x: np.ndarray, h: np.ndarray, y: np.ndarray) -> None:
        """y[n] = Σₖ x[k]·h[(n-k) mod L] with explicit wrap."""
        L = x.shape[0]

        for n in range(L):
            accum = y[n]
            for k in range(L):
                if k <= n:
                    accum += x[k] * h[n - k]
                else:
                    accum += x[k] * h[n + L - k]
            y[n] = accum


class DirectNumbaEngine:
    """
    Numba-accelerated direct engine.

    Same arithmetic as DirectNumpyEngine with compiled loops. fastmath is
    left off so float results stay within rounding of the NumPy engine.
    """

    def __init__(self):
        if not NUMBA_AVAILABLE:
            raise RuntimeError("Numba not available. Install with: pip install numba")

        # Warmup JIT compilation
        self._warmup()

    def _warmup(self):
        """Pre-compile the float64 specialization to avoid first-call overhead."""
        x = np.ones(8, dtype=np.float64)
        _numba_linear(x, x[:3].copy(), np.zeros(10, dtype=np.float64))
        _numba_circular(x, x.copy(), np.zeros(8, dtype=np.float64))

    def linear(self, x: np.ndarray, h: np.ndarray) -> np.ndarray:
        dtype = np.result_type(x, h)
        y = np.zeros(len(x) + len(h) - 1, dtype=dtype)
        _numba_linear(
            np.ascontiguousarray(x, dtype=dtype), np.ascontiguousarray(h, dtype=dtype), y
        )
        return y

    def circular(self, x: np.ndarray, h: np.ndarray) -> np.ndarray:
        dtype = np.result_type(x, h)
        y = np.zeros(len(x), dtype=dtype)
        _numba_circular(
            np.ascontiguousarray(x, dtype=dtype), np.ascontiguousarray(h, dtype=dtype), y
        )
        return y


ENGINE_NAMES = ("auto", "numpy", "numba")

_DEFAULT_ENGINE = DirectNumpyEngine()


def default_engine() -> DirectNumpyEngine:
    """Shared NumPy engine used when callers pass ``engine=None``."""
    return _DEFAULT_ENGINE


def get_engine(name: str = "auto") -> ConvolutionEngine:
    """
    Build an engine by name.

    Args:
        name: 'numpy', 'numba', or 'auto' (Numba when importable, else NumPy)

    Returns:
        Engine instance

    Raises:
        InvalidArgumentError: Unknown name
        RuntimeError: 'numba' requested but Numba is not installed
    """
    if name not in ENGINE_NAMES:
        raise InvalidArgumentError(f"engine must be one of {ENGINE_NAMES}, got '{name}'")

    if name == "numba" or (name == "auto" and NUMBA_AVAILABLE):
        logger.debug("Using Numba direct engine")
        return DirectNumbaEngine()

    logger.debug("Using NumPy direct engine")
    return DirectNumpyEngine()
