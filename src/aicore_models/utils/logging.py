"""Logging utilities for aicore_models.

Modules log through ``logging.getLogger(__name__)``; this module only decides
how those records are emitted when running as an application (the CLI).
"""

from __future__ import annotations

import logging
from typing import Union

ROOT_LOGGER = "aicore_models"
_NOISY_LOGGERS = ("httpx", "httpcore")
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a module logger by name (no prefixing).

    Args:
        name: Logger name (typically ``__name__``).

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


def configure_logging(verbose: bool = False) -> None:
    """Attach a stream handler to the package logger.

    Args:
        verbose: Log at DEBUG and let HTTP client loggers through when True.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if not any(getattr(handler, "_aicore_handler", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._aicore_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)


def set_component_level(component: str, level: Union[str, int]) -> None:
    """Set log level for a package component, e.g. ``"discovery"``.

    Accepts either string levels (e.g., "INFO") or numeric constants.
    """
    if isinstance(level, str):
        level_value = getattr(logging, level.upper(), logging.INFO)
    else:
        level_value = level
    name = component if component.startswith(ROOT_LOGGER) else f"{ROOT_LOGGER}.{component}"
    logging.getLogger(name).setLevel(level_value)
