"""
FIR filter coefficient container.

Convention:
    y[n] = Σᵢ taps[i]·x[n-i],  i = 0..M-1
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
import numpy.typing as npt

from blockconv.utils.sequences import as_signal

ArrayN = npt.NDArray[np.number]


@dataclass(frozen=True)
class FIRKernel:
    """
    Impulse response h[0..M-1] of a finite-impulse-response filter.

    The taps are copied into a contiguous read-only array at construction,
    so the kernel can be shared between filters without any of them being
    able to change it.

    Example:
        >>> kernel = FIRKernel([1, 2, 1])
        >>> kernel.n_taps
        3
    """

    taps: ArrayN  # (M,)

    def __post_init__(self):
        """Validate and freeze the coefficients."""
        taps = np.array(as_signal(self.taps, name="taps"), copy=True, order="C")
        taps.setflags(write=False)
        object.__setattr__(self, "taps", taps)

    @property
    def n_taps(self) -> int:
        """Filter length M."""
        return int(self.taps.shape[0])

    @property
    def dtype(self) -> np.dtype:
        return self.taps.dtype

    def __len__(self) -> int:
        return self.n_taps

    def __array__(self, dtype=None, copy=None):
        # Lets np.asarray(kernel) work wherever a plain tap sequence is accepted
        if dtype is not None:
            return self.taps.astype(dtype)
        if copy:
            return self.taps.copy()
        return self.taps

    def to_npz(self, path: Path) -> None:
        """Save taps to compressed NPZ file."""
        np.savez_compressed(path, taps=self.taps)

    @staticmethod
    def from_npz(path: Path) -> FIRKernel:
        """Load taps from NPZ file."""
        with np.load(path) as data:
            return FIRKernel(taps=data["taps"])

    @staticmethod
    def impulse(n_taps: int = 1, dtype=np.int64) -> FIRKernel:
        """
        Unit impulse of length ``n_taps``: the identity filter.

        Useful for testing: convolving with it returns the input followed by
        n_taps - 1 zeros.
        """
        taps = np.zeros(n_taps, dtype=dtype)
        if n_taps > 0:
            taps[0] = 1
        return FIRKernel(taps=taps)
