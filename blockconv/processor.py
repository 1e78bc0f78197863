"""
Configurable convolution processor.

Binds one FIR kernel to a convolution strategy and engine so callers can
switch between direct, circular, overlap-add and overlap-save processing
by configuration instead of by call site.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field, replace
from typing import Optional

import numpy as np

from blockconv.convolution import circular_convolve, linear_convolve
from blockconv.engines import (
    ENGINE_NAMES,
    NUMBA_AVAILABLE,
    ConvolutionEngine,
    DirectNumpyEngine,
    get_engine,
)
from blockconv.errors import InvalidArgumentError
from blockconv.kernels import FIRKernel
from blockconv.logging_utils import get_logger
from blockconv.overlap import overlap_add_filter, overlap_save_filter, validate_block_length

logger = get_logger(__name__)

METHODS = ("linear", "circular", "overlap_add", "overlap_save")
BLOCK_METHODS = ("overlap_add", "overlap_save")


@dataclass(frozen=True)
class FilterConfig:
    """
    Configuration for ConvolutionProcessor.

    Parameters
    ----------
    method : str, default='linear'
        'linear', 'circular', 'overlap_add' or 'overlap_save'
    block_length : int, optional
        Samples per block for the block methods. Required for
        'overlap_add' / 'overlap_save', ignored otherwise.
    engine : str, default='auto'
        'numpy', 'numba' or 'auto' (Numba when installed)
    """

    method: str = "linear"
    block_length: Optional[int] = None
    engine: str = "auto"

    def __post_init__(self):
        """Validate configuration."""
        if self.method not in METHODS:
            raise InvalidArgumentError(f"method must be one of {METHODS}, got '{self.method}'")
        if self.engine not in ENGINE_NAMES:
            raise InvalidArgumentError(
                f"engine must be one of {ENGINE_NAMES}, got '{self.engine}'"
            )
        if self.method in BLOCK_METHODS:
            if self.block_length is None:
                raise InvalidArgumentError(f"method '{self.method}' requires block_length")
            block_length = validate_block_length(self.block_length, 1, self.method)
            object.__setattr__(self, "block_length", block_length)

    @property
    def is_block_method(self) -> bool:
        return self.method in BLOCK_METHODS

    def replace(self, **kwargs) -> FilterConfig:
        """Return a new validated config with updated fields."""
        return replace(self, **kwargs)


@dataclass
class ConvolutionProcessor:
    """
    Offline convolution of whole signals with a fixed FIR kernel.

    Example:
        >>> proc = ConvolutionProcessor(
        ...     FIRKernel([1, 2, 1]), FilterConfig(method="overlap_save", block_length=4)
        ... )
        >>> proc.process([1, 2, 3, 2])
        array([ 1,  4,  8, 10,  7,  2])
    """

    kernel: FIRKernel
    config: FilterConfig = field(default_factory=FilterConfig)
    engine: Optional[ConvolutionEngine] = None

    def __post_init__(self):
        """Validate block length against the kernel and select the engine."""
        if not isinstance(self.kernel, FIRKernel):
            self.kernel = FIRKernel(self.kernel)

        M = self.kernel.n_taps
        if self.config.method == "overlap_add" and self.config.block_length < M:
            raise InvalidArgumentError(
                f"overlap-add requires block_length >= {M}, got {self.config.block_length}"
            )
        if self.config.method == "overlap_save" and self.config.block_length <= M:
            raise InvalidArgumentError(
                f"overlap-save requires block_length > {M}, got {self.config.block_length}"
            )

        if self.engine is None:
            self.engine = self._select_engine()

        logger.info(
            "ConvolutionProcessor: method=%s, M=%d, block_length=%s, engine=%s",
            self.config.method,
            M,
            self.config.block_length,
            self.engine.__class__.__name__,
        )

    def _select_engine(self) -> ConvolutionEngine:
        if self.config.engine == "numba" and not NUMBA_AVAILABLE:
            warnings.warn(
                "Numba requested but not available, using NumPy", RuntimeWarning, stacklevel=4
            )
            return DirectNumpyEngine()
        return get_engine(self.config.engine)

    def process(self, x) -> np.ndarray:
        """
        Convolve a complete signal with the kernel.

        Args:
            x: Input signal (N,)

        Returns:
            (N + M - 1,) for linear and block methods, (max(N, M),) for
            circular
        """
        method = self.config.method
        h = self.kernel.taps

        if method == "linear":
            return linear_convolve(x, h, engine=self.engine)
        if method == "circular":
            return circular_convolve(x, h, engine=self.engine)
        if method == "overlap_add":
            return overlap_add_filter(x, h, self.config.block_length, engine=self.engine)
        return overlap_save_filter(x, h, self.config.block_length, engine=self.engine)

    def get_info(self) -> dict:
        """Get processor configuration info."""
        return {
            "method": self.config.method,
            "kernel_length": self.kernel.n_taps,
            "block_length": self.config.block_length if self.config.is_block_method else None,
            "engine": self.engine.__class__.__name__,
            "dtype": str(self.kernel.dtype),
        }
