"""Configuration data models.

This module defines dataclasses for vts configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path

from vts.geometry.types import AspectMode, AspectPolicy

DEFAULT_TIMEOUT: float = 200.0
"""Default inactivity timeout in seconds."""


@dataclass(frozen=True)
class ToolPathsConfig:
    """Configuration for external tool paths.

    All paths are optional. If not specified, tools are looked up in PATH.
    """

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass(frozen=True)
class SupervisorConfig:
    """Settings for supervising the ffmpeg process."""

    timeout: float | None = DEFAULT_TIMEOUT
    """Seconds allowed between two stderr lines. None disables the bound."""

    ffmpeg_path: Path | str = "ffmpeg"
    """ffmpeg executable (path or command name)."""

    kill_grace_seconds: float = 2.0
    """How long to wait for a killed process and its reader thread."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(
                f"timeout must be positive or None (disabled), got {self.timeout}"
            )
        if self.kill_grace_seconds <= 0:
            raise ValueError(
                f"kill_grace_seconds must be positive, got {self.kill_grace_seconds}"
            )


@dataclass(frozen=True)
class TranscodingOptions:
    """Geometry-related transcoding options."""

    preserve_aspect_ratio: AspectMode = AspectMode.NONE
    """Requested axis to keep when preserving the source aspect ratio."""

    enlarge: bool = True
    """Allow the preserved axis to exceed the source dimension."""

    autorotate: bool = False
    """Bake the source rotation into the frames."""

    @property
    def aspect_policy(self) -> AspectPolicy:
        return AspectPolicy(mode=self.preserve_aspect_ratio, enlarge=self.enlarge)


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


@dataclass
class VTSConfig:
    """Complete vts configuration."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    supervisor: SupervisorConfig = field(default_factory=SupervisorConfig)
    transcoding: TranscodingOptions = field(default_factory=TranscodingOptions)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
