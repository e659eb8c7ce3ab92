"""Encoding option sets and their ffmpeg argument rendering.

Two shapes of option input are supported:

- EncodingOptions: an ordered mapping of semantic option names
  ("video_codec", "resolution", ...) to values, rendered to ffmpeg
  arguments by to_args().
- RawOptions: a pre-formatted argument string passed through verbatim.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from vts.exceptions import ConfigurationError
from vts.geometry.types import Resolution

logger = logging.getLogger(__name__)

# Options rendered as "<flag> <value>"
SIMPLE_FLAGS: dict[str, str] = {
    "video_codec": "-vcodec",
    "frame_rate": "-r",
    "resolution": "-s",
    "audio_codec": "-acodec",
    "audio_sample_rate": "-ar",
    "audio_channels": "-ac",
    "aspect": "-aspect",
    "keyframe_interval": "-g",
    "threads": "-threads",
    "seek_time": "-ss",
    "duration": "-t",
    "x264_vprofile": "-vprofile",
    "x264_preset": "-preset",
    "video_filter": "-vf",
    "metadata": "-metadata",
}

# Options whose integer values are kilobits per second
BITRATE_FLAGS: dict[str, str] = {
    "video_bitrate": "-b:v",
    "audio_bitrate": "-b:a",
    "video_max_bitrate": "-maxrate",
    "video_min_bitrate": "-minrate",
    "video_bitrate_tolerance": "-bt",
    "buffer_size": "-bufsize",
}

SCREENSHOT_ARGS = ("-vframes", "1", "-f", "image2")

KNOWN_OPTIONS = frozenset(SIMPLE_FLAGS) | frozenset(BITRATE_FLAGS) | {
    "screenshot",
    "custom",
}


def _format_bitrate(value: Any) -> str:
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid bitrate value: {value!r}")
    if isinstance(value, int):
        return f"{value}k"
    return str(value)


class EncodingOptions(Mapping[str, Any]):
    """Ordered, structured encoding options.

    Values are strings, integers, booleans or a Resolution. Insertion
    order is kept when rendering; "custom" is always rendered last.
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = {}
        for key, value in (values or {}).items():
            if not isinstance(key, str):
                raise ConfigurationError(
                    f"Encoding option names must be strings, got {key!r}"
                )
            self._values[key] = value

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"EncodingOptions({self._values!r})"

    def merged(self, overrides: Mapping[str, Any]) -> EncodingOptions:
        """Return a copy with overrides applied; override keys win."""
        values = dict(self._values)
        values.update(overrides)
        return EncodingOptions(values)

    @property
    def resolution(self) -> Resolution | None:
        """Requested resolution, or None if not set.

        Raises:
            ConfigurationError: If the resolution value cannot be parsed.
        """
        value = self._values.get("resolution")
        if value is None:
            return None
        try:
            return Resolution.parse(value)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

    @property
    def width(self) -> int | None:
        """Requested width, or None."""
        resolution = self.resolution
        return resolution.width if resolution else None

    @property
    def height(self) -> int | None:
        """Requested height, or None."""
        resolution = self.resolution
        return resolution.height if resolution else None

    def to_args(self) -> list[str]:
        """Render the options as ffmpeg arguments.

        Unknown option names are skipped with a warning; None values are
        skipped silently.
        """
        args: list[str] = []
        for key, value in self._values.items():
            if value is None or key == "custom":
                continue
            if key in SIMPLE_FLAGS:
                args.extend([SIMPLE_FLAGS[key], str(value)])
            elif key in BITRATE_FLAGS:
                args.extend([BITRATE_FLAGS[key], _format_bitrate(value)])
            elif key == "screenshot":
                if value:
                    args.extend(SCREENSHOT_ARGS)
            else:
                logger.warning("Ignoring unknown encoding option: %s", key)

        custom = self._values.get("custom")
        if custom:
            if isinstance(custom, str):
                args.extend(shlex.split(custom))
            else:
                args.extend(str(part) for part in custom)
        return args


@dataclass(frozen=True)
class RawOptions:
    """Pre-formatted ffmpeg argument string, passed through verbatim."""

    text: str

    def to_args(self) -> list[str]:
        """Split the string into arguments the way a POSIX shell would."""
        try:
            return shlex.split(self.text)
        except ValueError as e:
            raise ConfigurationError(
                f"Cannot parse raw options '{self.text}': {e}"
            ) from e

    def __str__(self) -> str:
        return self.text


OptionInput = EncodingOptions | RawOptions
"""Option input after parsing: structured mapping or raw string."""
