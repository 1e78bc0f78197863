"""
Block-partitioned convolution: overlap-add and overlap-save.

Both algorithms reproduce the full linear convolution x ∗ h (length
N + M - 1) sample for sample while only ever convolving one block at a time.

Overlap-add:
    disjoint blocks → linear convolution per block (L + M - 1 samples)
    → tails of consecutive blocks overlap by M - 1 samples and are SUMMED

Overlap-save:
    [last M-1 input samples | L new samples] → circular convolution
    → first M - 1 outputs are aliased by the wrap-around and DISCARDED

All state (output buffer, overlap buffer) is local to one call, so both
functions are reentrant.
"""

from typing import Optional

import numpy as np

from blockconv.blocks import Block, n_blocks_for, partition_blocks
from blockconv.engines import ConvolutionEngine, default_engine
from blockconv.errors import InvalidArgumentError
from blockconv.logging_utils import get_logger
from blockconv.utils.sequences import as_signal, result_dtype, zero_pad

logger = get_logger(__name__)


def validate_block_length(block_length: int, minimum: int, method: str) -> int:
    """Check block_length is an integer >= minimum and return it as a plain int."""
    if isinstance(block_length, bool) or not isinstance(block_length, (int, np.integer)):
        raise InvalidArgumentError(
            f"block_length must be an integer, got {type(block_length).__name__}"
        )
    if block_length < minimum:
        raise InvalidArgumentError(
            f"{method} requires block_length >= {minimum}, got {block_length}"
        )
    return int(block_length)


def _overlap_add_block(
    block: Block, x: np.ndarray, h: np.ndarray, engine: ConvolutionEngine
) -> np.ndarray:
    """Linear convolution of one zero-padded block: (L + M - 1,)."""
    return engine.linear(block.take(x), h)


def _overlap_save_block(
    overlap: np.ndarray, new_samples: np.ndarray, h: np.ndarray, engine: ConvolutionEngine
) -> tuple[np.ndarray, np.ndarray]:
    """
    Filter one overlap-save working block.

    Args:
        overlap: Last M-1 samples of the previous working block (M-1,)
        new_samples: Next L input samples (L,)
        h: Filter taps (M,)

    Returns:
        (valid, next_overlap): the L alias-free output samples and the
        overlap buffer for the following block
    """
    M = len(h)
    L = len(new_samples)
    working = np.concatenate([overlap, new_samples])  # (L + M - 1,)

    y_circ = engine.circular(working, zero_pad(h, len(working)))

    # Refill from the input working block, not from the output
    return y_circ[M - 1:], working[L:].copy()


def overlap_add_filter(
    x, h, block_length: int, engine: Optional[ConvolutionEngine] = None
) -> np.ndarray:
    """
    Overlap-add block convolution.

    Args:
        x: Signal (N,), N >= 1
        h: Filter taps (M,), M >= 1
        block_length: Samples per block L, must be >= M
        engine: Convolution engine (default: NumPy reference engine)

    Returns:
        Output (N + M - 1,), equal to linear_convolve(x, h)

    Raises:
        InvalidArgumentError: Invalid operands or block_length < M

    Example:
        >>> overlap_add_filter([1, 2, 3, 2], [1, 2, 1], block_length=3)
        array([ 1,  4,  8, 10,  7,  2])
    """
    x = as_signal(x, name="x")
    h = as_signal(h, name="h")
    M = len(h)
    L = validate_block_length(block_length, M, "overlap-add")
    engine = engine or default_engine()

    dtype = result_dtype(x, h)
    x = x.astype(dtype, copy=False)
    h = h.astype(dtype, copy=False)

    N = len(x)
    n_blocks = n_blocks_for(N, L)
    logger.debug("overlap-add: N=%d, M=%d, L=%d, blocks=%d", N, M, L, n_blocks)

    # Room for the tail of the last (possibly padded) block
    y = np.zeros(n_blocks * L + M - 1, dtype=dtype)

    for block in partition_blocks(N, L):
        y_block = _overlap_add_block(block, x, h, engine)
        # Sum, never overwrite: consecutive tails overlap by M - 1 samples
        y[block.start:block.start + len(y_block)] += y_block

    return y[: N + M - 1]


def overlap_save_filter(
    x, h, block_length: int, engine: Optional[ConvolutionEngine] = None
) -> np.ndarray:
    """
    Overlap-save block convolution.

    The signal is conceptually zero padded: a short final block is padded
    with zeros, and all-zero flush blocks follow the last genuine block
    until the M - 1 sample filter tail has been produced.

    Args:
        x: Signal (N,), N >= 1
        h: Filter taps (M,), M >= 1
        block_length: New samples per block L, must be > M
        engine: Convolution engine (default: NumPy reference engine)

    Returns:
        Output (N + M - 1,), equal to linear_convolve(x, h)

    Raises:
        InvalidArgumentError: Invalid operands or block_length <= M

    Example:
        >>> overlap_save_filter([1, 2, 3, 2], [1, 2, 1], block_length=4)
        array([ 1,  4,  8, 10,  7,  2])
    """
    x = as_signal(x, name="x")
    h = as_signal(h, name="h")
    M = len(h)
    L = validate_block_length(block_length, M + 1, "overlap-save")
    engine = engine or default_engine()

    dtype = result_dtype(x, h)
    x = x.astype(dtype, copy=False)
    h = h.astype(dtype, copy=False)

    N = len(x)
    n_out = N + M - 1
    n_blocks = n_blocks_for(n_out, L)
    logger.debug("overlap-save: N=%d, M=%d, L=%d, blocks=%d", N, M, L, n_blocks)

    y = np.zeros(n_blocks * L, dtype=dtype)
    overlap = np.zeros(M - 1, dtype=dtype)

    for block in partition_blocks(N, L, n_blocks=n_blocks):
        valid, overlap = _overlap_save_block(overlap, block.take(x), h, engine)
        y[block.start:block.start + L] = valid

    return y[:n_out]
