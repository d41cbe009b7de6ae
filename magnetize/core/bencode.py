"""Bencode access for torrent documents.

Structured decoding is delegated to ``bencodepy``. ``BencodeScanner``
walks the same grammar without building values so callers can recover
the verbatim byte span of any top-level dictionary entry.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import bencodepy

from magnetize.utils.exceptions import BencodeError

logger = logging.getLogger(__name__)

MAX_DEPTH = 512

_INTEGER_RE = re.compile(rb"-?\d+")
_LENGTH_RE = re.compile(rb"\d+")


def decode(data: bytes) -> Any:
    """Decode a complete bencoded document into Python values.

    Dictionary keys and strings come back as ``bytes``.

    Raises:
        BencodeError: If the library rejects the data

    """
    try:
        return bencodepy.decode(bytes(data))
    except Exception as e:
        msg = f"Invalid bencoded data: {e}"
        raise BencodeError(msg) from e


class BencodeScanner:
    """Cursor over a bencoded buffer that reports value spans."""

    def __init__(self, data: bytes, max_depth: int = MAX_DEPTH) -> None:
        """Initialize the scanner at offset 0."""
        self.data = bytes(data)
        self.pos = 0
        self.max_depth = max_depth

    def skip_value(self) -> tuple[int, int]:
        """Advance over one value and return its ``(start, end)`` span."""
        start = self.pos
        self._skip(0)
        return start, self.pos

    def dict_value_spans(self) -> dict[bytes, tuple[int, int]]:
        """Scan a document whose root is a dictionary.

        Returns:
            Mapping of each top-level key to the half-open span of its value

        Raises:
            BencodeError: If the root is not a dictionary, the grammar is
                violated, or bytes remain after the dictionary

        """
        if self._peek() != b"d":
            msg = f"Expected dictionary at offset {self.pos}"
            raise BencodeError(msg)
        self.pos += 1

        spans: dict[bytes, tuple[int, int]] = {}
        while self._peek() != b"e":
            key = self._read_key()
            start = self.pos
            self._skip(1)
            spans[key] = (start, self.pos)
        self.pos += 1

        if self.pos != len(self.data):
            msg = f"Trailing data after dictionary at offset {self.pos}"
            raise BencodeError(msg, {"trailing_bytes": len(self.data) - self.pos})

        logger.debug("Scanned %d top-level keys in %d bytes", len(spans), self.pos)
        return spans

    def _peek(self) -> bytes:
        if self.pos >= len(self.data):
            msg = f"Unexpected end of data at offset {self.pos}"
            raise BencodeError(msg)
        return self.data[self.pos : self.pos + 1]

    def _skip(self, depth: int) -> None:
        if depth > self.max_depth:
            msg = f"Nesting deeper than {self.max_depth} at offset {self.pos}"
            raise BencodeError(msg)

        token = self._peek()
        if token == b"i":
            self._skip_integer()
        elif token == b"l":
            self.pos += 1
            while self._peek() != b"e":
                self._skip(depth + 1)
            self.pos += 1
        elif token == b"d":
            self.pos += 1
            while self._peek() != b"e":
                self._read_key()
                self._skip(depth + 1)
            self.pos += 1
        elif token.isdigit():
            self._read_string()
        else:
            msg = f"Invalid token {token!r} at offset {self.pos}"
            raise BencodeError(msg)

    def _skip_integer(self) -> None:
        end = self.data.find(b"e", self.pos + 1)
        if end == -1:
            msg = f"Unterminated integer at offset {self.pos}"
            raise BencodeError(msg)
        if not _INTEGER_RE.fullmatch(self.data[self.pos + 1 : end]):
            msg = f"Malformed integer at offset {self.pos}"
            raise BencodeError(msg)
        self.pos = end + 1

    def _read_key(self) -> bytes:
        if not self._peek().isdigit():
            msg = f"Dictionary key must be a string at offset {self.pos}"
            raise BencodeError(msg)
        return self._read_string()

    def _read_string(self) -> bytes:
        colon = self.data.find(b":", self.pos)
        if colon == -1 or not _LENGTH_RE.fullmatch(self.data[self.pos : colon]):
            msg = f"Malformed string length at offset {self.pos}"
            raise BencodeError(msg)
        start = colon + 1
        try:
            end = start + int(self.data[self.pos : colon])
        except ValueError as e:
            # Length prefix too long for int conversion
            msg = f"String length out of range at offset {self.pos}"
            raise BencodeError(msg) from e
        if end > len(self.data):
            msg = f"String at offset {self.pos} runs past end of data"
            raise BencodeError(msg)
        self.pos = end
        return self.data[start:end]
