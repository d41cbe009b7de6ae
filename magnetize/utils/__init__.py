"""Shared utilities and infrastructure.

This module contains common utilities used throughout the application.
"""

from __future__ import annotations

from magnetize.utils.exceptions import (
    BencodeError,
    ConfigurationError,
    DecodeError,
    MagnetizeError,
    SourceReadError,
)
from magnetize.utils.logging_config import get_logger, setup_logging

__all__ = [
    # Exceptions
    "BencodeError",
    "ConfigurationError",
    "DecodeError",
    "MagnetizeError",
    "SourceReadError",
    # Logging
    "get_logger",
    "setup_logging",
]
