"""Configuration data models.

This module defines dataclasses for mp4batch configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )
        if self.max_bytes <= 0:
            raise ValueError(f"max_bytes must be positive, got {self.max_bytes}")
        if self.backup_count < 0:
            raise ValueError(
                f"backup_count must be non-negative, got {self.backup_count}"
            )


@dataclass
class EncodeConfig:
    """Defaults applied to every resolved input."""

    # Specification string used when none is given on the command line
    # (None = single default output)
    formats: str | None = None

    # Directory outputs are written to (None = next to the input)
    output_dir: Path | None = None

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.formats is not None and not isinstance(self.formats, str):
            raise ValueError(
                f"formats must be a specification string, got {self.formats!r}"
            )


@dataclass
class Mp4batchConfig:
    """Main configuration container."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    encode: EncodeConfig = field(default_factory=EncodeConfig)


@dataclass(frozen=True)
class FormatProfile:
    """Named specification string stored in the profiles directory.

    Profiles let users keep frequently used output sets (for example an
    archival AV1 encode plus an x264 compatibility copy) under a short name
    and apply them with --profile.
    """

    name: str
    formats: str
    description: str | None = None
