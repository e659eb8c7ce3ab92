"""Pydantic models for the configuration file.

The TOML file is validated against these models and then converted to
the dataclasses in vts.config.models. Unknown keys are rejected.

Example config.toml:

    [tools]
    ffmpeg = "/opt/ffmpeg/bin/ffmpeg"

    [supervisor]
    timeout = 300        # or "off" to disable

    [transcoding]
    preserve_aspect_ratio = "width"
    enlarge = false
    autorotate = true

    [logging]
    level = "debug"
    format = "json"
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vts.config.models import (
    DEFAULT_TIMEOUT,
    LoggingConfig,
    SupervisorConfig,
    ToolPathsConfig,
    TranscodingOptions,
    VTSConfig,
)
from vts.geometry.types import AspectMode

DISABLED_TIMEOUT_VALUES = frozenset({"off", "none", "false", "disabled", "0"})


def parse_timeout(value: Any) -> float | None:
    """Parse a timeout setting.

    Accepts a positive number, a numeric string, or false/"off"/"none"/
    "disabled"/0 to disable the timeout.

    Raises:
        ValueError: For negative or unparseable values.
    """
    if value is None or value is False:
        return None
    if isinstance(value, str):
        text = value.strip().casefold()
        if text in DISABLED_TIMEOUT_VALUES:
            return None
        try:
            value = float(text)
        except ValueError:
            raise ValueError(
                f"Invalid timeout '{value}'. Use a number of seconds or 'off'."
            ) from None
    if isinstance(value, bool):
        raise ValueError("timeout = true is ambiguous; give a number of seconds")
    timeout = float(value)
    if timeout == 0:
        return None
    if timeout < 0:
        raise ValueError(f"timeout must not be negative, got {timeout}")
    return timeout


def _optional_path(value: str | None) -> Path | None:
    return Path(value).expanduser() if value else None


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class ToolsModel(_Section):
    """[tools] section."""

    ffmpeg: str | None = None
    ffprobe: str | None = None


class SupervisorModel(_Section):
    """[supervisor] section."""

    timeout: float | None = DEFAULT_TIMEOUT
    kill_grace_seconds: float = Field(default=2.0, gt=0)

    @field_validator("timeout", mode="before")
    @classmethod
    def validate_timeout(cls, v: Any) -> float | None:
        """Accept numbers and the disabled spellings."""
        return parse_timeout(v)


class TranscodingModel(_Section):
    """[transcoding] section."""

    preserve_aspect_ratio: Literal["none", "width", "height"] = "none"
    enlarge: bool = True
    autorotate: bool = False


class LoggingModel(_Section):
    """[logging] section."""

    level: Literal["debug", "info", "warning", "error"] = "info"
    file: str | None = None
    format: Literal["text", "json"] = "text"
    include_stderr: bool = False
    max_bytes: int = Field(default=10_485_760, gt=0)
    backup_count: int = Field(default=5, ge=0)

    @field_validator("level", "format", mode="before")
    @classmethod
    def lowercase(cls, v: Any) -> Any:
        """Accept any capitalization."""
        return v.casefold() if isinstance(v, str) else v


class ConfigFileModel(_Section):
    """Whole configuration file."""

    tools: ToolsModel = Field(default_factory=ToolsModel)
    supervisor: SupervisorModel = Field(default_factory=SupervisorModel)
    transcoding: TranscodingModel = Field(default_factory=TranscodingModel)
    logging: LoggingModel = Field(default_factory=LoggingModel)

    def to_config(self) -> VTSConfig:
        """Convert to the runtime configuration dataclasses."""
        ffmpeg = _optional_path(self.tools.ffmpeg)
        ffprobe = _optional_path(self.tools.ffprobe)
        return VTSConfig(
            tools=ToolPathsConfig(ffmpeg=ffmpeg, ffprobe=ffprobe),
            supervisor=SupervisorConfig(
                timeout=self.supervisor.timeout,
                ffmpeg_path=ffmpeg or "ffmpeg",
                kill_grace_seconds=self.supervisor.kill_grace_seconds,
            ),
            transcoding=TranscodingOptions(
                preserve_aspect_ratio=AspectMode(
                    self.transcoding.preserve_aspect_ratio
                ),
                enlarge=self.transcoding.enlarge,
                autorotate=self.transcoding.autorotate,
            ),
            logging=LoggingConfig(
                level=self.logging.level,
                file=_optional_path(self.logging.file),
                format=self.logging.format,
                include_stderr=self.logging.include_stderr,
                max_bytes=self.logging.max_bytes,
                backup_count=self.logging.backup_count,
            ),
        )
