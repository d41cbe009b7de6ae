"""Pydantic models for magnetize.

Provides the decoded torrent structure, the magnet aggregate built from
it, and the configuration sections.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Info(BaseModel):
    """Metadata from the ``info`` dictionary of a torrent."""

    length: int | None = Field(
        None, ge=0, le=U64_MAX, description="Content length (single-file torrents)"
    )
    name: str | None = Field(None, description="Suggested file or directory name")
    piece_length: int = Field(..., ge=0, le=U64_MAX, description="Piece length in bytes")
    pieces: bytes = Field(..., description="Concatenated SHA-1 piece hashes")
    private: int | None = Field(
        None, ge=0, le=U32_MAX, description="Private flag (BEP 27), unvalidated"
    )

    model_config = {"frozen": True}

    @property
    def num_pieces(self) -> int:
        """Number of complete 20-byte piece hashes."""
        return len(self.pieces) // 20


class Torrent(BaseModel):
    """Decoded torrent document."""

    announce: str = Field(..., description="Primary tracker URL")
    announce_list: tuple[tuple[str, ...], ...] | None = Field(
        None, description="Tracker tiers (BEP 12), outer tuple ordered by priority"
    )
    info: Info

    model_config = {"frozen": True}


class MagnetDetail(BaseModel):
    """Everything needed to render a magnet URI."""

    torrent: Torrent
    hash: str = Field(
        ...,
        pattern=r"^[A-Z2-7]{32}$",
        description="Base-32 SHA-1 of the verbatim info dictionary",
    )

    model_config = {"frozen": True}

    def as_magnet(self) -> str:
        """Render this detail as a ``magnet:`` URI."""
        from magnetize.core.magnet import format_magnet

        return format_magnet(self)


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Log level")
    log_file: str | None = Field(None, description="Log file path")
    structured_logging: bool = Field(
        default=False, description="Write JSON lines to the log file"
    )
    log_correlation_id: bool = Field(
        default=True,
        description="Include correlation IDs",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        """Accept level names in any case."""
        if isinstance(v, str):
            return v.upper()
        return v


class SourceConfig(BaseModel):
    """Byte-source configuration."""

    max_source_size: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        description="Largest torrent document accepted, in bytes",
    )
    url_timeout: float = Field(
        default=30.0,
        gt=0.0,
        le=600.0,
        description="Timeout in seconds for http(s) sources",
    )


class Config(BaseModel):
    """Main configuration model."""

    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    source: SourceConfig = Field(default_factory=SourceConfig)
