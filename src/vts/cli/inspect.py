"""CLI inspect command for vts."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import click

from vts.cli.exit_codes import ExitCode
from vts.cli.output import error_exit
from vts.cli.settings import load_settings
from vts.introspector import (
    FFprobeIntrospector,
    MediaIntrospectionError,
    ProbeResult,
)

logger = logging.getLogger(__name__)


def probe_result_to_dict(result: ProbeResult) -> dict[str, Any]:
    """Convert a probe result to a JSON-serializable dict."""
    media = result.media
    return {
        "path": str(media.path),
        "valid": result.valid,
        "container_format": result.container_format,
        "duration_seconds": media.duration_seconds,
        "width": media.width,
        "height": media.height,
        "rotation": media.rotation,
        "aspect_ratio": media.calculated_aspect_ratio,
        "video_codec": result.video_codec,
        "audio_codec": result.audio_codec,
    }


def format_human(result: ProbeResult) -> str:
    """Format a probe result for terminal display."""
    media = result.media
    resolution = media.resolution
    lines = [
        f"File: {media.path}",
        f"Format: {result.container_format or 'unknown'}",
    ]
    if media.duration_seconds is not None:
        lines.append(f"Duration: {media.duration_seconds:.2f}s")
    if resolution is not None:
        lines.append(f"Resolution: {resolution}")
    if media.rotation:
        lines.append(f"Rotation: {media.rotation}")
    if media.calculated_aspect_ratio is not None:
        lines.append(f"Aspect ratio: {media.calculated_aspect_ratio:.4f}")
    if result.video_codec:
        lines.append(f"Video codec: {result.video_codec}")
    if result.audio_codec:
        lines.append(f"Audio codec: {result.audio_codec}")
    if not result.valid:
        lines.append("Warning: no readable streams")
    return "\n".join(lines)


@click.command("inspect")
@click.argument("file", type=click.Path(path_type=Path))
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    default=False,
    help="Output probe results as JSON.",
)
@click.option(
    "--ffprobe",
    "ffprobe_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to ffprobe.",
)
@click.pass_context
def inspect_command(
    ctx: click.Context,
    file: Path,
    json_output: bool,
    ffprobe_path: Path | None,
) -> None:
    """Inspect a media file and display what the transcoder sees.

    FILE is the path to the media file to inspect.
    """
    config = load_settings(ctx, ffprobe_path=ffprobe_path, json_output=json_output)

    if not file.exists():
        error_exit(f"File not found: {file}", ExitCode.TARGET_NOT_FOUND, json_output)

    try:
        introspector = FFprobeIntrospector(config.tools.ffprobe)
    except MediaIntrospectionError as e:
        error_exit(str(e), ExitCode.TOOL_NOT_AVAILABLE, json_output)

    try:
        result = introspector.probe(file)
    except MediaIntrospectionError as e:
        error_exit(
            f"Could not probe {file}: {e}", ExitCode.PROBE_FAILED, json_output
        )

    if json_output:
        click.echo(json.dumps(probe_result_to_dict(result), indent=2))
    else:
        click.echo(format_human(result))
