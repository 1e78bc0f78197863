"""
Direct and block-partitioned FIR convolution.

This package computes the discrete convolution of a finite signal with a
finite impulse response using interchangeable time-domain strategies.

Features:
---------
- Direct linear and circular convolution, generic over numpy dtypes
- Overlap-add and overlap-save block convolution, sample-exact against
  the direct linear convolution
- Stateful real-time FIR filter (one output per input sample)
- NumPy reference engine and optional Numba-compiled engine

Typical usage:
--------------
    from blockconv import linear_convolve, overlap_save_filter, RealTimeFilter

    y = linear_convolve([1, 2, 3, 4, 5], [1, 2, 1, 2, 1])
    y_blocks = overlap_save_filter(x, h, block_length=512)

    rt = RealTimeFilter(h)
    for sample in stream:
        out = rt.process(sample)
"""

from blockconv.errors import InvalidArgumentError
from blockconv.kernels import FIRKernel, ArrayN
from blockconv.blocks import Block, partition_blocks
from blockconv.engines import (
    ConvolutionEngine,
    DirectNumpyEngine,
    DirectNumbaEngine,
    NUMBA_AVAILABLE,
    get_engine,
)
from blockconv.convolution import linear_convolve, circular_convolve
from blockconv.overlap import overlap_add_filter, overlap_save_filter
from blockconv.realtime import RealTimeFilter
from blockconv.processor import FilterConfig, ConvolutionProcessor
from blockconv.logging_utils import LoggingConfig, setup_logging, get_logger

__version__ = "0.1.0"

__all__ = [
    # Errors
    "InvalidArgumentError",
    # Core types
    "FIRKernel",
    "ArrayN",
    "Block",
    "partition_blocks",
    # Engines
    "ConvolutionEngine",
    "DirectNumpyEngine",
    "DirectNumbaEngine",
    "NUMBA_AVAILABLE",
    "get_engine",
    # Convolution
    "linear_convolve",
    "circular_convolve",
    "overlap_add_filter",
    "overlap_save_filter",
    "RealTimeFilter",
    # Processor
    "FilterConfig",
    "ConvolutionProcessor",
    # Logging
    "LoggingConfig",
    "setup_logging",
    "get_logger",
]
