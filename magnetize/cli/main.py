"""CLI for magnetize.

Provides:
- ``magnet``: print magnet URIs for torrent files or URLs
- ``info``: show decoded torrent details in a table
- ``show-config``: print the effective configuration
"""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from magnetize.config.config import ConfigManager, init_config
from magnetize.core.info_hash import compute_info_hash_hex, extract_info_bytes
from magnetize.core.magnet import assemble, magnet_from_torrent_file, tracker_urls
from magnetize.core.torrent import read_source
from magnetize.models import LogLevel
from magnetize.utils.exceptions import (
    ConfigurationError,
    DecodeError,
    MagnetizeError,
    SourceReadError,
)
from magnetize.utils.logging_config import LoggingContext

EXIT_SOURCE_ERROR = 1
EXIT_DECODE_ERROR = 2

console = Console()
err_console = Console(stderr=True)


def _exit_code_for(error: MagnetizeError) -> int:
    if isinstance(error, SourceReadError):
        return EXIT_SOURCE_ERROR
    return EXIT_DECODE_ERROR


def _report_error(source: str, error: MagnetizeError) -> None:
    kind = "read" if isinstance(error, SourceReadError) else "decode"
    err_console.print(
        f"[red]Failed to {kind} {escape(source)}:[/red] {escape(str(error))}"
    )


def _get_config_manager(ctx: click.Context) -> ConfigManager:
    return ctx.obj["config_manager"]


@click.group()
@click.version_option(package_name="magnetize")
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(dir_okay=False),
    help="Path to magnetize.toml",
)
@click.option("--verbose", "-v", count=True, help="Increase verbosity (-v INFO, -vv DEBUG)")
@click.pass_context
def cli(ctx: click.Context, config_file: str | None, verbose: int) -> None:
    """Magnetize - convert .torrent files into magnet URIs."""
    ctx.ensure_object(dict)
    try:
        config_manager = init_config(config_file)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    # Map verbosity to log level: -v=INFO, -vv=DEBUG
    if verbose:
        observability = config_manager.config.observability
        observability.log_level = LogLevel.DEBUG if verbose >= 2 else LogLevel.INFO
        config_manager.setup_logging()

    ctx.obj["config_manager"] = config_manager


@cli.command()
@click.argument("sources", nargs=-1, required=True)
@click.pass_context
def magnet(ctx: click.Context, sources: tuple[str, ...]) -> None:
    """Print the magnet URI for each SOURCE (torrent file or http(s) URL)."""
    config = _get_config_manager(ctx).config
    exit_code = 0

    for source in sources:
        try:
            with LoggingContext("magnet", source=source):
                uri = magnet_from_torrent_file(source, config.source)
        except (SourceReadError, DecodeError) as e:
            _report_error(source, e)
            exit_code = max(exit_code, _exit_code_for(e))
            continue
        click.echo(uri)

    ctx.exit(exit_code)


@cli.command()
@click.argument("source")
@click.pass_context
def info(ctx: click.Context, source: str) -> None:
    """Show the decoded contents of a torrent SOURCE."""
    config = _get_config_manager(ctx).config

    try:
        with LoggingContext("info", source=source):
            data = read_source(source, config.source)
            detail = assemble(data)
            hex_hash = compute_info_hash_hex(extract_info_bytes(data))
    except (SourceReadError, DecodeError) as e:
        _report_error(source, e)
        ctx.exit(_exit_code_for(e))

    torrent = detail.torrent
    table = Table(title=escape(torrent.info.name or source), show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", overflow="fold")

    table.add_row("Name", escape(torrent.info.name or "-"))
    table.add_row(
        "Length", "-" if torrent.info.length is None else f"{torrent.info.length:,} bytes"
    )
    table.add_row("Piece length", f"{torrent.info.piece_length:,} bytes")
    table.add_row("Pieces", str(torrent.info.num_pieces))
    table.add_row("Private", "yes" if torrent.info.private else "no")
    table.add_row("Announce", escape(torrent.announce))
    if torrent.announce_list is not None:
        for index, tier in enumerate(torrent.announce_list):
            table.add_row(f"Tier {index}", escape("\n".join(tier)) or "-")
    table.add_row("Trackers used", str(len(tracker_urls(torrent))))
    table.add_row("Info hash (base32)", detail.hash)
    table.add_row("Info hash (hex)", hex_hash)
    table.add_row("Magnet", escape(detail.as_magnet()))

    console.print(table)


@cli.command("show-config")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["toml", "json"]),
    default="toml",
    show_default=True,
)
@click.pass_context
def show_config(ctx: click.Context, fmt: str) -> None:
    """Print the effective configuration."""
    click.echo(_get_config_manager(ctx).export(fmt))


def main() -> None:
    """Main CLI entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
