"""Core torrent-to-magnet pipeline.

This module contains the pipeline stages:
- Bencode decoding and span scanning
- Torrent structure decoding
- Info hash extraction
- Magnet URI assembly and formatting
"""

from __future__ import annotations

from magnetize.core.bencode import BencodeScanner, decode
from magnetize.core.info_hash import compute_hash, extract_info_bytes
from magnetize.core.magnet import assemble, format_magnet, tracker_urls
from magnetize.core.torrent import decode_structure, read_source

__all__ = [
    # Bencoding
    "BencodeScanner",
    "decode",
    # Torrent
    "decode_structure",
    "read_source",
    # Info hash
    "compute_hash",
    "extract_info_bytes",
    # Magnet
    "assemble",
    "format_magnet",
    "tracker_urls",
]
