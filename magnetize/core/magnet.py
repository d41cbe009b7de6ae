"""Magnet URI construction from torrent documents.

A ``MagnetDetail`` combines the decoded torrent with the base-32 info
hash; ``format_magnet`` renders it as::

    magnet:?xt=urn:btih:<HASH>&dn=<name>&xl=<length>&tr=<tracker>...

``dn`` and ``xl`` appear only when the torrent has a name or length.
Trackers come from every tier of ``announce-list`` when that key is
present, otherwise from ``announce`` alone.
"""

from __future__ import annotations

import logging
import urllib.parse
from pathlib import Path

from magnetize.core.info_hash import compute_hash, extract_info_bytes
from magnetize.core.torrent import decode_structure, read_source
from magnetize.models import MagnetDetail, SourceConfig, Torrent

logger = logging.getLogger(__name__)


def _quote(value: str) -> str:
    return urllib.parse.quote(value, safe="")


def assemble(data: bytes) -> MagnetDetail:
    """Decode torrent bytes and hash their info dictionary.

    The structured decode and the info span extraction run separately on
    the same bytes; if either fails nothing is returned.

    Raises:
        DecodeError: If the document cannot be decoded

    """
    torrent = decode_structure(data)
    info_hash = compute_hash(extract_info_bytes(data))
    logger.debug("Info hash %s for %r", info_hash, torrent.info.name)
    return MagnetDetail(torrent=torrent, hash=info_hash)


def tracker_urls(torrent: Torrent) -> list[str]:
    """Trackers to advertise, tier by tier, in file order."""
    if torrent.announce_list is None:
        return [torrent.announce]
    return [url for tier in torrent.announce_list for url in tier]


def format_magnet(detail: MagnetDetail) -> str:
    """Render a ``MagnetDetail`` as a magnet URI."""
    info = detail.torrent.info
    params: list[tuple[str, str]] = [("xt", f"urn:btih:{detail.hash}")]
    if info.name is not None:
        params.append(("dn", _quote(info.name)))
    if info.length is not None:
        params.append(("xl", str(info.length)))
    params.extend(("tr", _quote(url)) for url in tracker_urls(detail.torrent))

    return "magnet:?" + "&".join(f"{key}={value}" for key, value in params)


def decode(data: bytes) -> MagnetDetail:
    """Build a ``MagnetDetail`` from an in-memory torrent."""
    return assemble(data)


def decode_file(source: str | Path, config: SourceConfig | None = None) -> MagnetDetail:
    """Build a ``MagnetDetail`` from a torrent file or URL.

    Raises:
        SourceReadError: If the source cannot be read
        DecodeError: If the document cannot be decoded

    """
    return assemble(read_source(source, config))


def magnet_from_torrent(data: bytes) -> str:
    """Get a magnet URI from torrent bytes."""
    return format_magnet(decode(data))


def magnet_from_torrent_file(
    source: str | Path, config: SourceConfig | None = None
) -> str:
    """Get a magnet URI from a torrent file or URL."""
    return format_magnet(decode_file(source, config))
