"""Info hash calculation.

The info hash is the SHA-1 of the ``info`` dictionary exactly as it
appears in the torrent file. The span is sliced out of the original
bytes rather than re-encoded from decoded values, so key order and
integer formatting of the source are preserved.
"""

from __future__ import annotations

import base64
import hashlib
import logging

from magnetize.core.bencode import BencodeScanner
from magnetize.utils.exceptions import DecodeError

logger = logging.getLogger(__name__)

INFO_KEY = b"info"


def extract_info_bytes(data: bytes) -> bytes:
    """Return the verbatim bencoded ``info`` dictionary from a torrent.

    Raises:
        DecodeError: If the document is malformed, has no top-level
            ``info`` key, or ``info`` is not a dictionary

    """
    spans = BencodeScanner(data).dict_value_spans()
    if INFO_KEY not in spans:
        msg = "Missing required key in torrent: info"
        raise DecodeError(msg)

    start, end = spans[INFO_KEY]
    info_bytes = bytes(data[start:end])
    if not info_bytes.startswith(b"d"):
        msg = "Invalid info dictionary in torrent"
        raise DecodeError(msg, {"offset": start})

    logger.debug("Info dictionary spans bytes %d-%d", start, end)
    return info_bytes


def compute_hash(info_bytes: bytes) -> str:
    """Return the base-32 SHA-1 of ``info_bytes`` (32 uppercase chars)."""
    digest = hashlib.sha1(info_bytes).digest()  # nosec B324 - SHA-1 required by BitTorrent protocol (BEP 3)
    return base64.b32encode(digest).decode("ascii")


def compute_info_hash_hex(info_bytes: bytes) -> str:
    """Return the hex SHA-1 of ``info_bytes`` (40 lowercase chars)."""
    return hashlib.sha1(info_bytes).hexdigest()  # nosec B324
