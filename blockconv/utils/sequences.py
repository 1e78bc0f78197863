"""
Validation and padding helpers for numeric sample sequences.

Sequence Conventions
--------------------
Signals and filter coefficients are 1-D numpy arrays of shape (N,).
Any sequence accepted by ``np.asarray`` is allowed at the API boundary:

    - lists / tuples of ints, floats or complex numbers
    - numpy arrays of integer, floating or complex dtype

Boolean, object and string dtypes are rejected: they have no meaningful
multiply-accumulate arithmetic.

Output dtype follows ``np.result_type`` of the operands, so integer inputs
produce integer outputs with numpy's native (wrapping) overflow behavior.
"""

from typing import Optional

import numpy as np

from blockconv.errors import InvalidArgumentError


def as_signal(x, name: str = "x") -> np.ndarray:
    """
    Convert a sequence to a validated 1-D numeric array.

    The caller's data is never modified; arrays are returned as-is when
    already valid, so callers must copy before writing.

    Parameters
    ----------
    x : array_like
        Input samples, shape (N,)
    name : str, default="x"
        Argument name used in error messages

    Returns
    -------
    x_arr : np.ndarray
        1-D numeric array, shape (N,)

    Raises
    ------
    InvalidArgumentError
        If x is not 1-D, is empty, or has a non-numeric dtype

    Examples
    --------
    >>> as_signal([1, 2, 3]).dtype
    dtype('int64')

    >>> as_signal([])
    Traceback (most recent call last):
        ...
    blockconv.errors.InvalidArgumentError: x cannot be empty
    """
    x_arr = np.asarray(x)

    if x_arr.ndim != 1:
        raise InvalidArgumentError(f"{name} must be 1D (N,), got shape {x_arr.shape}")
    if x_arr.shape[0] == 0:
        raise InvalidArgumentError(f"{name} cannot be empty")
    if not np.issubdtype(x_arr.dtype, np.number):
        raise InvalidArgumentError(f"{name} must have a numeric dtype, got {x_arr.dtype}")

    return x_arr


def as_sample(sample, dtype: Optional[np.dtype] = None):
    """
    Validate a single streaming sample, optionally casting it to ``dtype``.

    Without ``dtype`` the sample keeps its own numpy dtype, so the caller
    can decide how to widen its state before storing it.

    Raises
    ------
    InvalidArgumentError
        If the sample is not a numeric scalar, is NaN / infinite, or cannot
        be represented in ``dtype`` (see check_castable)
    """
    value = np.asarray(sample)

    if value.ndim != 0:
        raise InvalidArgumentError(f"sample must be a scalar, got shape {value.shape}")
    if not np.issubdtype(value.dtype, np.number):
        raise InvalidArgumentError(f"sample must be numeric, got {value.dtype}")
    if not np.isfinite(value):
        raise InvalidArgumentError(f"sample must be finite, got {sample!r}")

    if dtype is None:
        return value[()]

    check_castable(value.dtype, dtype, name="sample")
    return value.astype(dtype)[()]


def check_castable(src: np.dtype, dst: np.dtype, name: str = "x") -> None:
    """
    Reject casts that would drop information of a different kind.

    Same-kind casts (int64 -> int16, float64 -> float32, int -> float) are
    allowed and follow numpy's native rounding / wrapping. Casts across
    kinds downwards (float -> int, complex -> float) would silently
    truncate the value and raise instead.

    Raises
    ------
    InvalidArgumentError
        If ``src`` cannot be cast to ``dst`` under ``casting="same_kind"``

    Examples
    --------
    >>> check_castable(np.dtype(np.int64), np.dtype(np.float32))

    >>> check_castable(np.dtype(np.float64), np.dtype(np.int64), name="sample")
    Traceback (most recent call last):
        ...
    blockconv.errors.InvalidArgumentError: sample of dtype float64 cannot be represented as int64
    """
    if not np.can_cast(src, dst, casting="same_kind"):
        raise InvalidArgumentError(f"{name} of dtype {src} cannot be represented as {dst}")


def result_dtype(*arrays: np.ndarray) -> np.dtype:
    """Common dtype of the convolution operands."""
    return np.result_type(*arrays)


def zero_pad(x: np.ndarray, length: int) -> np.ndarray:
    """
    Return a copy of ``x`` zero padded at the end to ``length`` samples.

    Parameters
    ----------
    x : np.ndarray
        Input samples, shape (N,)
    length : int
        Target length, must be >= N

    Returns
    -------
    x_pad : np.ndarray
        New array of shape (length,) with the same dtype as x

    Examples
    --------
    >>> zero_pad(np.array([1, 2]), 4)
    array([1, 2, 0, 0])
    """
    if length < x.shape[0]:
        raise InvalidArgumentError(f"Cannot pad {x.shape[0]} samples down to {length}")

    x_pad = np.zeros(length, dtype=x.dtype)
    x_pad[: x.shape[0]] = x
    return x_pad
