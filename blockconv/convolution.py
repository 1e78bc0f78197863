"""
Direct linear and circular convolution of finite sequences.

Both functions are pure: inputs are validated, never modified, and a new
array is returned. The arithmetic is delegated to a ConvolutionEngine
(NumPy reference engine by default).
"""

from typing import Optional

import numpy as np

from blockconv.engines import ConvolutionEngine, default_engine
from blockconv.utils.sequences import as_signal, result_dtype, zero_pad


def linear_convolve(x, h, engine: Optional[ConvolutionEngine] = None) -> np.ndarray:
    """
    Linear convolution y = x ∗ h.

    y[i] = Σ_{j=0}^{i} x[j]·h[i-j], with terms where j >= N or i-j >= M
    contributing zero.

    Args:
        x: Signal (N,), N >= 1
        h: Filter taps (M,), M >= 1
        engine: Convolution engine (default: NumPy reference engine)

    Returns:
        Output (N + M - 1,) with dtype np.result_type(x, h)

    Raises:
        InvalidArgumentError: Empty, non-1D or non-numeric operands

    Example:
        >>> linear_convolve([1, 2, 3, 4, 5], [1, 2, 1, 2, 1])
        array([ 1,  4,  8, 14, 21, 22, 16, 14,  5])
    """
    x = as_signal(x, name="x")
    h = as_signal(h, name="h")
    engine = engine or default_engine()

    dtype = result_dtype(x, h)
    return engine.linear(x.astype(dtype, copy=False), h.astype(dtype, copy=False))


def circular_convolve(x, h, engine: Optional[ConvolutionEngine] = None) -> np.ndarray:
    """
    Circular convolution over the working length L = max(len(x), len(h)).

    The shorter operand is zero padded (on a copy) to L, then
    y[n] = Σ_{k=0}^{L-1} x[k]·h[(n-k) mod L].

    Args:
        x: Signal (N,), N >= 1
        h: Filter taps (M,), M >= 1
        engine: Convolution engine (default: NumPy reference engine)

    Returns:
        Output (L,) with dtype np.result_type(x, h)

    Raises:
        InvalidArgumentError: Empty, non-1D or non-numeric operands

    Example:
        >>> circular_convolve([1, 2, 3, 4], [1, 1])
        array([5, 3, 5, 7])
    """
    x = as_signal(x, name="x")
    h = as_signal(h, name="h")
    engine = engine or default_engine()

    dtype = result_dtype(x, h)
    L = max(len(x), len(h))
    x_pad = zero_pad(x.astype(dtype, copy=False), L)
    h_pad = zero_pad(h.astype(dtype, copy=False), L)

    return engine.circular(x_pad, h_pad)
