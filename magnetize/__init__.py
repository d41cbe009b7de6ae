"""magnetize - Convert BitTorrent metainfo files into magnet URIs."""

from __future__ import annotations

__version__ = "0.1.0"

from magnetize.core.magnet import (
    assemble,
    decode,
    decode_file,
    format_magnet,
    magnet_from_torrent,
    magnet_from_torrent_file,
)
from magnetize.models import Info, MagnetDetail, Torrent
from magnetize.utils.exceptions import (
    BencodeError,
    DecodeError,
    MagnetizeError,
    SourceReadError,
)

__all__ = [
    "BencodeError",
    "DecodeError",
    "Info",
    "MagnetDetail",
    "MagnetizeError",
    "SourceReadError",
    "Torrent",
    "__version__",
    "assemble",
    "decode",
    "decode_file",
    "format_magnet",
    "magnet_from_torrent",
    "magnet_from_torrent_file",
]
