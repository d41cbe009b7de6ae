"""Torrent document reading and structured decoding.

This module reads torrent bytes from a local file or an http(s) URL and
decodes them into the typed ``Torrent`` model.
"""

from __future__ import annotations

import http.client
import logging
import urllib.request
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from magnetize.core.bencode import decode
from magnetize.models import Info, SourceConfig, Torrent
from magnetize.utils.exceptions import DecodeError, SourceReadError

logger = logging.getLogger(__name__)

# Model field -> bencoded key
TORRENT_KEYS: dict[str, bytes] = {
    "announce": b"announce",
    "announce_list": b"announce-list",
    "info": b"info",
}

INFO_KEYS: dict[str, bytes] = {
    "length": b"length",
    "name": b"name",
    "piece_length": b"piece length",
    "pieces": b"pieces",
    "private": b"private",
}

_MISSING = object()


def read_source(source: str | Path, config: SourceConfig | None = None) -> bytes:
    """Read a complete torrent document from a byte-source.

    Args:
        source: Local file path, or an ``http://``/``https://`` URL
        config: Source limits; defaults to the global configuration

    Returns:
        The raw document bytes

    Raises:
        SourceReadError: If the source cannot be fully read or is too large

    """
    if config is None:
        from magnetize.config.config import get_source_config

        config = get_source_config()

    if _is_url(source):
        data = _read_from_url(str(source), config)
    else:
        data = _read_from_file(source, config)

    logger.debug("Read %d bytes from %s", len(data), source)
    return data


def _is_url(source: str | Path) -> bool:
    """Check if source is an http(s) URL."""
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def _check_size(data: bytes, source: str | Path, config: SourceConfig) -> None:
    if len(data) > config.max_source_size:
        msg = f"Torrent source larger than {config.max_source_size} bytes: {source}"
        raise SourceReadError(msg)


def _read_from_file(file_path: str | Path, config: SourceConfig) -> bytes:
    """Read torrent data from a local file."""
    path = Path(file_path)
    try:
        with open(path, "rb") as f:
            data = f.read(config.max_source_size + 1)
    except OSError as e:
        msg = f"Failed to read torrent file: {path}"
        raise SourceReadError(msg, {"error": str(e)}) from e

    _check_size(data, path, config)
    return data


def _read_from_url(url: str, config: SourceConfig) -> bytes:
    """Read torrent data from an http(s) URL."""
    try:
        with urllib.request.urlopen(url, timeout=config.url_timeout) as response:  # nosec S310 - scheme checked by _is_url
            data = response.read(config.max_source_size + 1)
    except (OSError, ValueError, http.client.HTTPException) as e:
        msg = f"Failed to download torrent from URL: {url}"
        raise SourceReadError(msg, {"error": str(e)}) from e

    _check_size(data, url, config)
    return data


def decode_structure(data: bytes) -> Torrent:
    """Decode torrent bytes into a ``Torrent``.

    Only the fields the magnet pipeline uses are read; unknown keys are
    ignored.

    Raises:
        DecodeError: If the document is not valid bencode, a required key
            is missing, or a field has the wrong type

    """
    document = decode(data)
    if not isinstance(document, dict):
        msg = "Torrent document is not a dictionary"
        raise DecodeError(msg)

    info = _get(document, TORRENT_KEYS["info"], required=True)
    if not isinstance(info, dict):
        msg = "Invalid info dictionary in torrent"
        raise DecodeError(msg)

    announce_list = _get(document, TORRENT_KEYS["announce_list"])

    try:
        torrent = Torrent(
            announce=_as_text(
                _get(document, TORRENT_KEYS["announce"], required=True), "announce"
            ),
            announce_list=None
            if announce_list is _MISSING
            else _as_tiers(announce_list),
            info=_decode_info(info),
        )
    except ValidationError as e:
        msg = f"Torrent field out of range: {e.errors()[0]['msg']}"
        raise DecodeError(msg, {"errors": e.error_count()}) from e

    logger.debug(
        "Decoded torrent %r (%d tracker tiers)",
        torrent.info.name,
        len(torrent.announce_list or ()),
    )
    return torrent


def _decode_info(info: dict[bytes, Any]) -> Info:
    length = _get(info, INFO_KEYS["length"])
    name = _get(info, INFO_KEYS["name"])
    private = _get(info, INFO_KEYS["private"])

    return Info(
        length=None if length is _MISSING else _as_int(length, "length"),
        name=None if name is _MISSING else _as_text(name, "name"),
        piece_length=_as_int(
            _get(info, INFO_KEYS["piece_length"], required=True), "piece length"
        ),
        pieces=_as_bytes(_get(info, INFO_KEYS["pieces"], required=True), "pieces"),
        private=None if private is _MISSING else _as_int(private, "private"),
    )


def _get(mapping: dict[bytes, Any], key: bytes, required: bool = False) -> Any:
    if key in mapping:
        return mapping[key]
    if required:
        msg = f"Missing required key in torrent: {key.decode('ascii')}"
        raise DecodeError(msg)
    return _MISSING


def _as_bytes(value: Any, key: str) -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        msg = f"Expected string for '{key}', got {type(value).__name__}"
        raise DecodeError(msg)
    return bytes(value)


def _as_text(value: Any, key: str) -> str:
    try:
        return _as_bytes(value, key).decode("utf-8")
    except UnicodeDecodeError as e:
        msg = f"Field '{key}' is not valid UTF-8"
        raise DecodeError(msg) from e


def _as_int(value: Any, key: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        msg = f"Expected integer for '{key}', got {type(value).__name__}"
        raise DecodeError(msg)
    return value


def _as_tiers(value: Any) -> tuple[tuple[str, ...], ...]:
    if not isinstance(value, list):
        msg = "Expected list for 'announce-list'"
        raise DecodeError(msg)

    tiers = []
    for tier in value:
        if not isinstance(tier, list):
            msg = "Expected list of lists for 'announce-list'"
            raise DecodeError(msg)
        tiers.append(tuple(_as_text(url, "announce-list") for url in tier))
    return tuple(tiers)
