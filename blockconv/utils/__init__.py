"""
Utility functions for convolution processing.

This module provides helper functions for:
- Signal and coefficient validation
- Result dtype handling and cast checks
- Zero padding
"""

from blockconv.utils.sequences import (
    as_sample,
    as_signal,
    check_castable,
    result_dtype,
    zero_pad,
)

__all__ = [
    "as_sample",
    "as_signal",
    "check_castable",
    "result_dtype",
    "zero_pad",
]
