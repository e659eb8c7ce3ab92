"""MediaProbe interface for media metadata extraction."""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from vts.geometry.types import SourceMedia


class MediaIntrospectionError(Exception):
    """Raised when media introspection fails."""

    pass


@dataclass(frozen=True)
class ProbeResult:
    """Metadata extracted from a media file.

    Attributes:
        media: Geometry and duration view used by the transcoder.
        video_codec: Codec of the first video stream, if any.
        audio_codec: Codec of the first audio stream, if any.
        container_format: Container format name reported by ffprobe.
        valid: False if ffprobe found no readable streams.
    """

    media: SourceMedia
    video_codec: str | None = None
    audio_codec: str | None = None
    container_format: str | None = None
    valid: bool = True

    @property
    def path(self) -> Path:
        return self.media.path


class MediaProbe(Protocol):
    """Protocol for media probe implementations."""

    def probe(self, path: Path) -> ProbeResult:
        """Extract metadata from a media file.

        Args:
            path: Path to the media file.

        Returns:
            ProbeResult for the file.

        Raises:
            MediaIntrospectionError: If the file cannot be probed.
        """
        ...
