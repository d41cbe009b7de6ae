#!/usr/bin/env python3
"""magnetize - Convert BitTorrent metainfo files into magnet URIs."""

from __future__ import annotations

from magnetize.cli.main import main

if __name__ == "__main__":
    main()
