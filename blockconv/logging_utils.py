"""
Logging for blockconv.

The package logs under the ``blockconv`` namespace and ships only a
NullHandler, so nothing is printed until an application calls
setup_logging() or configures logging itself.

What gets logged:
    - INFO:  processor construction (method, M, block length, engine)
    - DEBUG: engine selection, block partitioning, real-time dtype widening

Numba logs its compiler passes under the ``numba`` logger; at DEBUG they
drown out everything else, so setup_logging() pins that logger to its own
level.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

ROOT_LOGGER = "blockconv"

logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())


def _level_number(level, field_name: str) -> int:
    if isinstance(level, bool) or not isinstance(level, (str, int)):
        raise TypeError(f"{field_name} must be str or int, got {type(level).__name__}")
    if isinstance(level, int):
        return level
    number = logging.getLevelName(level.upper())
    if not isinstance(number, int):
        raise ValueError(f"unknown log level: {level}")
    return number


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging setup for an application using blockconv.

    Parameters
    ----------
    level : str or int, default='INFO'
        Level of the blockconv logger and its handler
    format : str
        Record format for the installed stream handler
    datefmt : str, optional
        Date format for ``%(asctime)s``
    propagate : bool, default=False
        Also pass records to the root logger
    capture_warnings : bool, default=True
        Route ``warnings.warn`` output (such as the Numba fallback
        RuntimeWarning) through logging as ``py.warnings``, handled by the
        same stream handler
    numba_level : str or int, default='WARNING'
        Level of the ``numba`` logger

    Example:
        >>> config = LoggingConfig(level="DEBUG")
        >>> config.resolve_level()
        10
    """

    level: str | int = "INFO"
    format: str = "%(levelname)s:%(name)s:%(message)s"
    datefmt: Optional[str] = None
    propagate: bool = False
    capture_warnings: bool = True
    numba_level: str | int = "WARNING"

    def __post_init__(self):
        """Validate levels eagerly so bad configs fail at construction."""
        self.resolve_level()
        self.resolve_numba_level()

    def resolve_level(self) -> int:
        """Level of the blockconv logger as a logging integer constant."""
        return _level_number(self.level, "level")

    def resolve_numba_level(self) -> int:
        return _level_number(self.numba_level, "numba_level")

    def replace(self, **kwargs) -> LoggingConfig:
        """Return a new validated config with updated fields."""
        return replace(self, **kwargs)


def _owned_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    for handler in logger.handlers:
        if getattr(handler, "_blockconv_owned", False):
            return handler
    return None


def setup_logging(config: LoggingConfig, *, name: str = ROOT_LOGGER) -> logging.Logger:
    """
    Configure and return the blockconv logger.

    Installs one stream handler tagged as ours. Calling again reuses it,
    updating level and format, so handlers added by others (pytest's
    caplog, an application's file handler) are left alone.

    Example:
        >>> logger = setup_logging(LoggingConfig(level="DEBUG"))
        >>> logger.name
        'blockconv'
    """
    logger = logging.getLogger(name)
    level = config.resolve_level()
    logger.setLevel(level)
    logger.propagate = config.propagate

    handler = _owned_handler(logger)
    if handler is None:
        handler = logging.StreamHandler()
        handler._blockconv_owned = True
        logger.addHandler(handler)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(config.format, datefmt=config.datefmt))

    logging.getLogger("numba").setLevel(config.resolve_numba_level())

    logging.captureWarnings(config.capture_warnings)
    warnings_logger = logging.getLogger("py.warnings")
    if config.capture_warnings:
        if handler not in warnings_logger.handlers:
            warnings_logger.addHandler(handler)
    elif handler in warnings_logger.handlers:
        warnings_logger.removeHandler(handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return a blockconv logger, namespaced under the blockconv root.

    Module loggers are created with ``get_logger(__name__)``.

    Example:
        >>> get_logger("engines").name
        'blockconv.engines'
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER)
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
