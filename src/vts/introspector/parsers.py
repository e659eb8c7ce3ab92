"""Parsing of ffprobe JSON output into ProbeResult."""

import logging
from pathlib import Path
from typing import Any

from vts.geometry.types import SourceMedia
from vts.introspector.interface import ProbeResult

logger = logging.getLogger(__name__)


def _parse_float(value: Any) -> float | None:
    if value in (None, "", "N/A"):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_int(value: Any) -> int | None:
    parsed = _parse_float(value)
    return int(parsed) if parsed is not None else None


def parse_rotation(stream: dict[str, Any]) -> int | None:
    """Get the rotation of a video stream in degrees clockwise.

    Older ffmpeg exposes a "rotate" tag; newer versions only report a
    display matrix whose rotation is counter-clockwise.

    Returns:
        Rotation normalized to 0-359, or None if the stream has none.
    """
    tags = stream.get("tags") or {}
    rotate = _parse_int(tags.get("rotate"))
    if rotate is not None:
        return rotate % 360

    for side_data in stream.get("side_data_list") or []:
        rotation = _parse_int(side_data.get("rotation"))
        if rotation is not None:
            return (-rotation) % 360
    return None


def parse_aspect_ratio(
    display_aspect_ratio: str | None, width: int | None, height: int | None
) -> float | None:
    """Compute the aspect ratio from the DAR, falling back to dimensions.

    Returns None if neither gives a usable ratio.
    """
    if display_aspect_ratio and ":" in display_aspect_ratio:
        num, _, den = display_aspect_ratio.partition(":")
        numerator = _parse_float(num)
        denominator = _parse_float(den)
        if numerator and denominator:
            return numerator / denominator
    if width and height:
        return width / height
    return None


def parse_ffprobe_output(path: Path, data: dict[str, Any]) -> ProbeResult:
    """Build a ProbeResult from ffprobe -show_streams -show_format JSON.

    Args:
        path: Path of the probed file.
        data: Parsed ffprobe JSON.

    Returns:
        ProbeResult; valid is False if no video or audio stream was found.
    """
    streams = data.get("streams") or []
    format_info = data.get("format") or {}

    video = next((s for s in streams if s.get("codec_type") == "video"), None)
    audio = next((s for s in streams if s.get("codec_type") == "audio"), None)

    width = height = rotation = None
    aspect_ratio = None
    if video is not None:
        width = _parse_int(video.get("width"))
        height = _parse_int(video.get("height"))
        rotation = parse_rotation(video)
        aspect_ratio = parse_aspect_ratio(
            video.get("display_aspect_ratio"), width, height
        )

    duration = _parse_float(format_info.get("duration"))
    if duration is None and video is not None:
        duration = _parse_float(video.get("duration"))

    media = SourceMedia(
        path=path,
        duration_seconds=duration,
        width=width,
        height=height,
        rotation=rotation,
        calculated_aspect_ratio=aspect_ratio,
    )
    valid = video is not None or audio is not None
    if not valid:
        logger.debug("No audio or video streams found in %s", path)

    return ProbeResult(
        media=media,
        video_codec=video.get("codec_name") if video else None,
        audio_codec=audio.get("codec_name") if audio else None,
        container_format=format_info.get("format_name"),
        valid=valid,
    )
