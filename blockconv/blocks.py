"""
Block partitioning for the block-convolution strategies.

A signal of N samples is cut into consecutive, disjoint blocks of
``block_length`` samples. Each block is described by an immutable Block
descriptor; the padded samples themselves are materialized on demand by
``Block.take``, so per-block transforms never share scratch buffers.

Layout for N=7, block_length=3:

    x:       [x0 x1 x2 | x3 x4 x5 | x6  0  0]
    blocks:  start=0     start=3    start=6, length=1, padding=2
"""

from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

from blockconv.errors import InvalidArgumentError


@dataclass(frozen=True)
class Block:
    """
    Descriptor of one analysis block.

    Attributes:
        index: Position of the block in the partition (0-based)
        start: Offset of the block's first sample in the signal
        length: Number of genuine signal samples in the block
        padding: Number of trailing zeros appended to reach block_length
    """

    index: int
    start: int
    length: int
    padding: int

    @property
    def size(self) -> int:
        """Working length: genuine samples plus padding."""
        return self.length + self.padding

    @property
    def stop(self) -> int:
        """End offset (exclusive) of the genuine samples."""
        return self.start + self.length

    def take(self, x: np.ndarray) -> np.ndarray:
        """
        Copy this block's samples out of ``x``, zero padded to ``size``.

        The returned array is new; ``x`` is never written.
        """
        block = np.zeros(self.size, dtype=x.dtype)
        block[: self.length] = x[self.start:self.stop]
        return block


def n_blocks_for(n_samples: int, block_length: int) -> int:
    """ceil(n_samples / block_length)."""
    return -(-n_samples // block_length)


def partition_blocks(
    n_samples: int, block_length: int, n_blocks: Optional[int] = None
) -> Iterator[Block]:
    """
    Yield block descriptors covering ``n_samples`` samples.

    Args:
        n_samples: Signal length N (>= 1)
        block_length: Samples per block L (>= 1)
        n_blocks: Number of blocks to emit. Defaults to ceil(N / L). Larger
            values append all-zero flush blocks past the end of the signal.

    Yields:
        Block descriptors in signal order

    Raises:
        InvalidArgumentError: Non-positive lengths, or n_blocks too small to
            cover the signal
    """
    if n_samples < 1:
        raise InvalidArgumentError(f"n_samples must be >= 1, got {n_samples}")
    if block_length < 1:
        raise InvalidArgumentError(f"block_length must be >= 1, got {block_length}")

    min_blocks = n_blocks_for(n_samples, block_length)
    if n_blocks is None:
        n_blocks = min_blocks
    elif n_blocks < min_blocks:
        raise InvalidArgumentError(
            f"{n_blocks} blocks of {block_length} cannot cover {n_samples} samples"
        )

    for index in range(n_blocks):
        start = index * block_length
        length = max(0, min(block_length, n_samples - start))
        yield Block(index=index, start=start, length=length, padding=block_length - length)
