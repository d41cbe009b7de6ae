"""Rich logging integration for magnetize.

Provides the Rich console handler and the markup-stripping file formatter.
"""

from __future__ import annotations

import logging
import re
import sys

from rich.console import Console
from rich.logging import RichHandler

_MARKUP_RE = re.compile(r"\[/?[^\]]+\]")


class CorrelationRichHandler(RichHandler):
    """RichHandler that tags records with the current correlation ID."""

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record with correlation ID."""
        if not hasattr(record, "correlation_id"):
            from magnetize.utils.logging_config import get_correlation_id

            record.correlation_id = get_correlation_id() or "no-correlation-id"
        super().emit(record)


def strip_rich_markup(text: str) -> str:
    """Strip Rich markup like ``[red]`` or ``[/bold]`` from text."""
    return _MARKUP_RE.sub("", text)


class FileFormatter(logging.Formatter):
    """Formatter for file output that strips Rich markup."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record, stripping Rich markup for file output."""
        return strip_rich_markup(super().format(record))


def create_rich_handler(
    console: Console | None = None,
    level: int | str = logging.INFO,
    show_path: bool = False,
    rich_tracebacks: bool = True,
) -> logging.Handler:
    """Create a RichHandler writing to stderr.

    Magnet URIs are printed on stdout, so log output never shares it.
    """
    if console is None:
        console = Console(file=sys.stderr, markup=True)

    return CorrelationRichHandler(
        console=console,
        level=level,
        show_path=show_path,
        rich_tracebacks=rich_tracebacks,
        markup=True,
    )
