"""Utilities for configuring consistent logging across the CLI and loaders."""

from __future__ import annotations

import logging
import os
from typing import Union


__all__ = ["setup_logging"]


_DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_ENV_LEVEL = "FEATCAT_LOG_LEVEL"

# Chatty at DEBUG while plotting heatmaps or fetching the inventory.
_NOISY_LOGGERS: tuple[str, ...] = ("matplotlib", "PIL", "urllib3")


def _coerce_level(value: Union[str, int]) -> int:
    """Translate a string/int log level to the corresponding numeric value."""
    if isinstance(value, int):
        return value

    if not isinstance(value, str):  # pragma: no cover
        raise TypeError("Log level must be a string or integer")

    candidate = value.strip()
    if not candidate:
        raise ValueError("Log level cannot be empty")

    # Accept integers passed as strings
    try:
        return int(candidate)
    except ValueError:
        pass

    level_name = candidate.upper()
    mapping = logging.getLevelNamesMapping()
    if level_name in mapping:
        return mapping[level_name]

    raise ValueError(f"Unknown log level: {value}")


def setup_logging(level: Union[str, int] = "WARNING") -> None:
    """Configure application logging.

    Parameters
    ----------
    level:
        Desired log level. Accepts standard logging names (e.g. ``"INFO"``) or
        numeric levels. Overridden by the ``FEATCAT_LOG_LEVEL`` environment
        variable when present. Plotting and HTTP libraries never log below
        ``WARNING``.

    Examples
    --------
    >>> from feature_catalog.logging_setup import setup_logging
    >>> import logging
    >>> setup_logging("DEBUG")
    >>> logger = logging.getLogger(__name__)
    >>> logger.info("Catalog ready")
    """

    env_level = os.getenv(_ENV_LEVEL)
    resolved_level = _coerce_level(env_level) if env_level else _coerce_level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved_level)

    formatter = logging.Formatter(fmt=_DEFAULT_FORMAT)

    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(resolved_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    else:
        for handler in root_logger.handlers:
            handler.setLevel(resolved_level)
            handler.setFormatter(formatter)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved_level, logging.WARNING))

    logging.captureWarnings(True)
