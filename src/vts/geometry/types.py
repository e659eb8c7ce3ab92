"""Geometry data types.

Resolutions, aspect policies and the read-only view of the source media
that the geometry resolver works from.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

_RESOLUTION_PATTERN = re.compile(r"^\s*(\d+)\s*[xX:]\s*(\d+)\s*$")


@dataclass(frozen=True)
class Resolution:
    """A width/height pair in pixels."""

    width: int
    height: int

    @classmethod
    def parse(cls, value: str | Resolution) -> Resolution:
        """Parse a resolution string such as "640x480".

        Args:
            value: Resolution string (WxH) or an existing Resolution.

        Returns:
            Parsed Resolution.

        Raises:
            ValueError: If the string is not in WxH form.
        """
        if isinstance(value, Resolution):
            return value
        match = _RESOLUTION_PATTERN.match(str(value))
        if not match:
            raise ValueError(
                f"Invalid resolution '{value}'. Expected WIDTHxHEIGHT (e.g. 640x480)."
            )
        return cls(int(match.group(1)), int(match.group(2)))

    def swapped(self) -> Resolution:
        """Return the resolution with width and height exchanged."""
        return Resolution(self.height, self.width)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


class AspectMode(Enum):
    """Which requested dimension to keep when preserving aspect ratio."""

    NONE = "none"
    WIDTH = "width"
    HEIGHT = "height"

    @classmethod
    def from_value(cls, value: str | AspectMode | None) -> AspectMode:
        """Coerce a user-supplied value to an AspectMode.

        None and empty strings mean no preservation.
        """
        if isinstance(value, AspectMode):
            return value
        if not value:
            return cls.NONE
        try:
            return cls(str(value).casefold())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ValueError(
                f"Invalid preserve_aspect_ratio '{value}'. Must be one of: {valid}"
            ) from None

    def inverted(self) -> AspectMode:
        """Return the opposite axis (NONE stays NONE)."""
        if self is AspectMode.WIDTH:
            return AspectMode.HEIGHT
        if self is AspectMode.HEIGHT:
            return AspectMode.WIDTH
        return self


@dataclass(frozen=True)
class AspectPolicy:
    """Aspect-ratio preservation policy.

    Attributes:
        mode: Axis whose requested value is kept.
        enlarge: Whether the preserved axis may exceed the source dimension.
    """

    mode: AspectMode = AspectMode.NONE
    enlarge: bool = True


@dataclass(frozen=True)
class SourceMedia:
    """Read-only view of the input media.

    width/height are the dimensions as stored in the stream, before any
    rotation metadata is applied.
    """

    path: Path
    duration_seconds: float | None = None
    width: int | None = None
    height: int | None = None
    rotation: int | None = None
    calculated_aspect_ratio: float | None = None

    @property
    def resolution(self) -> Resolution | None:
        """Stored resolution, or None if unknown."""
        if self.width is None or self.height is None:
            return None
        return Resolution(self.width, self.height)

    def dimension(self, axis: AspectMode) -> int | None:
        """Return the stored dimension on the given axis."""
        if axis is AspectMode.WIDTH:
            return self.width
        if axis is AspectMode.HEIGHT:
            return self.height
        return None


@dataclass(frozen=True)
class OrientationDirectives:
    """ffmpeg options that bake the rotation into the frames.

    Attributes:
        video_filter: Filter chain that rotates or flips the frames.
        metadata: Metadata assignment clearing the stream rotation tag so
            rotation-aware players do not rotate a second time.
    """

    video_filter: str
    metadata: str


@dataclass(frozen=True)
class GeometryResult:
    """Output of the geometry resolver."""

    resolution: Resolution | None = None
    orientation: OrientationDirectives | None = None
