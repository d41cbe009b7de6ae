"""Command line interface for magnetize."""

from magnetize.cli.main import main

__all__ = ["main"]
