"""Exception hierarchy for magnetize.

Every failure of the torrent-to-magnet pipeline is one of two kinds:
``SourceReadError`` when the byte-source cannot be read, and
``DecodeError`` when the bytes are not a usable torrent document.
"""

from __future__ import annotations

from typing import Any


class MagnetizeError(Exception):
    """Base exception for all magnetize errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize magnetize error."""
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class SourceReadError(MagnetizeError):
    """Byte-source could not be fully read."""


class DecodeError(MagnetizeError):
    """Torrent document is malformed or missing a required field."""


class BencodeError(DecodeError):
    """Bencode decoding errors."""


class ConfigurationError(MagnetizeError):
    """Configuration validation errors."""
