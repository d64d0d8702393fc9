"""Logging configuration."""

import logging
from typing import Optional

ROOT_LOGGER_NAME = "auplay"

_root: Optional[logging.Logger] = None


def _configure_root() -> logging.Logger:
    """Attach the stderr handler once, on the package root logger."""
    global _root
    if _root is None:
        _root = logging.getLogger(ROOT_LOGGER_NAME)
        _root.setLevel(logging.WARNING)  # Only show warnings and errors
        if not _root.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
                )
            )
            _root.addHandler(handler)
    return _root


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name, below the package root."""
    root = _configure_root()
    if name == ROOT_LOGGER_NAME:
        return root
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
