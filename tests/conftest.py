"""Pytest configuration and shared fixtures for magnetize tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import bencodepy
import pytest

from magnetize.config import config as config_module

PIECES = bytes(range(200, 240))

# Canonically ordered single-file info dictionary
INFO_SINGLE = (
    b"d6:lengthi1048576e4:name14:Big Buck Bunny12:piece lengthi262144e6:pieces40:"
    + PIECES
    + b"e"
)
INFO_SINGLE_HASH = "BZ4NFFPLITMNVISKNKNUXJW7URUGVUA6"
INFO_SINGLE_HEX = "0e78d295eb44d8daa24a6a9b4ba6dfa4686ad01e"

# Same fields, keys out of canonical order
INFO_UNSORTED = (
    b"d4:name14:Big Buck Bunny6:lengthi1048576e6:pieces40:"
    + PIECES
    + b"12:piece lengthi262144ee"
)
INFO_UNSORTED_HASH = "K6P4IGTE6SX37B2OOPEQNKJTYTBB7SMF"

# No name or length, private flag set
INFO_PRIVATE = b"d12:piece lengthi16384e6:pieces20:aaaaaaaaaaaaaaaaaaaa7:privatei1ee"
INFO_PRIVATE_HASH = "33S3BY6KPRAH64DDH35BBKR3UDP6IIPE"

# Multi-file layout
INFO_MULTI = (
    b"d5:filesld6:lengthi10e4:pathl5:a.txteed6:lengthi20e4:pathl3:sub5:b.txteee"
    b"4:name3:Dir12:piece lengthi16384e6:pieces20:bbbbbbbbbbbbbbbbbbbbe"
)
INFO_MULTI_HASH = "PR2HS657ZYLDGXSN3EGJUOMMXM2GH7YP"

ANNOUNCE = b"http://tracker.example.com:6969/announce"


def build_torrent(
    info: bytes = INFO_SINGLE,
    announce: bytes | None = ANNOUNCE,
    announce_list: list[list[bytes]] | None = None,
    comment: bytes | None = None,
) -> bytes:
    """Assemble a torrent document around verbatim ``info`` bytes."""
    parts = [b"d"]
    if announce is not None:
        parts += [bencodepy.encode(b"announce"), bencodepy.encode(announce)]
    if announce_list is not None:
        parts += [bencodepy.encode(b"announce-list"), bencodepy.encode(announce_list)]
    if comment is not None:
        parts += [bencodepy.encode(b"comment"), bencodepy.encode(comment)]
    parts += [b"4:info", info, b"e"]
    return b"".join(parts)


def pytest_configure(config):
    """Register project markers."""
    markers = [
        ("unit", "marks tests as unit tests"),
        ("core", "marks tests as core pipeline tests"),
        ("config", "marks tests as configuration tests"),
        ("cli", "marks tests as CLI tests"),
        ("observability", "marks tests as logging tests"),
    ]
    for name, desc in markers:
        config.addinivalue_line("markers", f"{name}: {desc}")


@pytest.fixture
def make_torrent() -> Callable[..., bytes]:
    """Factory for synthetic torrent documents."""
    return build_torrent


@pytest.fixture
def torrent_file(tmp_path: Path) -> Callable[[bytes], Path]:
    """Write torrent bytes to a temporary ``.torrent`` file."""

    def _write(data: bytes, name: str = "test.torrent") -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep tests away from user config files and MAGNETIZE_* variables."""
    for env_name in config_module.ENV_MAPPINGS:
        monkeypatch.delenv(env_name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Clean up logging handlers after each test to prevent closed file errors."""
    yield
    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        logger = logging.getLogger(logger_name)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    # setup_logging detaches the package logger; let caplog see it again
    package_logger = logging.getLogger("magnetize")
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
