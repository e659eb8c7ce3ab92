"""CLI transcode command for vts."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any

import click

from vts.cli.exit_codes import ExitCode, exit_code_for
from vts.cli.inspect import probe_result_to_dict
from vts.cli.output import ProgressDisplay, error_exit
from vts.cli.settings import load_settings
from vts.exceptions import ConfigurationError, ToolNotAvailableError
from vts.executor import RunOutcome, Transcoder
from vts.geometry import AspectMode
from vts.introspector import FFprobeIntrospector, MediaIntrospectionError
from vts.tools import require_tool

logger = logging.getLogger(__name__)

# Lines of ffmpeg output shown when a transcode fails
OUTPUT_TAIL_LINES = 10


def _build_options(
    raw_options: str | None,
    resolution: str | None,
    video_codec: str | None,
    audio_codec: str | None,
    video_bitrate: str | None,
    audio_bitrate: str | None,
) -> dict[str, Any] | str | None:
    """Collect option flags into the form Transcoder accepts.

    Raises:
        ConfigurationError: If raw options are combined with option flags.
    """
    structured = {
        "video_codec": video_codec,
        "audio_codec": audio_codec,
        "video_bitrate": video_bitrate,
        "audio_bitrate": audio_bitrate,
        "resolution": resolution,
    }
    structured = {key: value for key, value in structured.items() if value}
    if raw_options is not None:
        if structured:
            raise ConfigurationError(
                "--raw-options cannot be combined with "
                + ", ".join(f"--{key.replace('_', '-')}" for key in structured)
            )
        return raw_options
    return structured or None


def _failure_message(outcome: RunOutcome) -> str:
    error = outcome.to_error()
    summary = str(error).split(" Full output:", 1)[0]
    tail = outcome.output.strip().splitlines()[-OUTPUT_TAIL_LINES:]
    if not tail:
        return summary
    return summary + "\nLast output:\n" + "\n".join(f"  {line}" for line in tail)


@click.command("transcode")
@click.argument("input_file", type=click.Path(path_type=Path))
@click.argument("output_file", type=click.Path(path_type=Path))
@click.option("--resolution", "-s", default=None, help="Target size as WxH.")
@click.option("--video-codec", default=None, help="Video codec (e.g. libx264).")
@click.option("--audio-codec", default=None, help="Audio codec (e.g. aac).")
@click.option(
    "--video-bitrate", default=None, help="Video bitrate (plain numbers are kb/s)."
)
@click.option(
    "--audio-bitrate", default=None, help="Audio bitrate (plain numbers are kb/s)."
)
@click.option(
    "--raw-options",
    default=None,
    help="Pre-formatted ffmpeg options, passed through as-is.",
)
@click.option(
    "--preserve-aspect-ratio",
    type=click.Choice([m.value for m in AspectMode], case_sensitive=False),
    default=None,
    help="Keep the requested width or height and derive the other.",
)
@click.option(
    "--enlarge/--no-enlarge",
    default=None,
    help="Allow upscaling the preserved dimension beyond the source.",
)
@click.option(
    "--autorotate/--no-autorotate",
    default=None,
    help="Bake the source rotation into the frames.",
)
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Seconds without ffmpeg output before it is killed (default: 200).",
)
@click.option(
    "--no-timeout",
    is_flag=True,
    default=False,
    help="Never kill ffmpeg for inactivity.",
)
@click.option(
    "--ffmpeg",
    "ffmpeg_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to ffmpeg.",
)
@click.option(
    "--ffprobe",
    "ffprobe_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to ffprobe.",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    default=False,
    help="Print the result as JSON.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Do not show progress.",
)
@click.pass_context
def transcode_command(
    ctx: click.Context,
    input_file: Path,
    output_file: Path,
    resolution: str | None,
    video_codec: str | None,
    audio_codec: str | None,
    video_bitrate: str | None,
    audio_bitrate: str | None,
    raw_options: str | None,
    preserve_aspect_ratio: str | None,
    enlarge: bool | None,
    autorotate: bool | None,
    timeout: float | None,
    no_timeout: bool,
    ffmpeg_path: Path | None,
    ffprobe_path: Path | None,
    json_output: bool,
    quiet: bool,
) -> None:
    """Transcode INPUT_FILE into OUTPUT_FILE with ffmpeg.

    Progress is shown on stderr. The exit status tells why a transcode
    failed: 41 unsupported input, 42 ffmpeg hung, 43 no output file,
    44 unreadable output file, 40 any other ffmpeg failure.
    """
    config = load_settings(
        ctx,
        ffmpeg_path=ffmpeg_path,
        ffprobe_path=ffprobe_path,
        timeout=timeout,
        disable_timeout=no_timeout,
        json_output=json_output,
    )

    if not input_file.exists():
        error_exit(
            f"File not found: {input_file}", ExitCode.TARGET_NOT_FOUND, json_output
        )

    try:
        ffmpeg = require_tool("ffmpeg", config.supervisor.ffmpeg_path)
        introspector = FFprobeIntrospector(config.tools.ffprobe)
    except (ToolNotAvailableError, MediaIntrospectionError) as e:
        error_exit(str(e), ExitCode.TOOL_NOT_AVAILABLE, json_output)

    try:
        source = introspector.probe(input_file)
    except MediaIntrospectionError as e:
        error_exit(
            f"Could not probe {input_file}: {e}", ExitCode.PROBE_FAILED, json_output
        )

    transcoding = config.transcoding
    if preserve_aspect_ratio is not None:
        transcoding = replace(
            transcoding,
            preserve_aspect_ratio=AspectMode.from_value(preserve_aspect_ratio),
        )
    if enlarge is not None:
        transcoding = replace(transcoding, enlarge=enlarge)
    if autorotate is not None:
        transcoding = replace(transcoding, autorotate=autorotate)

    try:
        options = _build_options(
            raw_options,
            resolution,
            video_codec,
            audio_codec,
            video_bitrate,
            audio_bitrate,
        )
        transcoder = Transcoder(
            source,
            output_file,
            options,
            transcoding=transcoding,
            config=replace(config.supervisor, ffmpeg_path=ffmpeg),
            probe=introspector,
        )
    except ConfigurationError as e:
        error_exit(str(e), ExitCode.CONFIG_ERROR, json_output)

    progress = ProgressDisplay(enabled=not quiet and not json_output)
    try:
        outcome = transcoder.run(on_progress=progress.update)
    except KeyboardInterrupt:
        progress.finish()
        error_exit("Interrupted", ExitCode.INTERRUPTED, json_output)
    progress.finish()

    if not outcome.success:
        code = exit_code_for(outcome.status, outcome.cancelled)
        error_exit(_failure_message(outcome), code, json_output)

    if json_output:
        data: dict[str, Any] = {
            "status": "completed",
            "command": list(outcome.command),
        }
        if outcome.encoded is not None:
            data["output"] = probe_result_to_dict(outcome.encoded)
        click.echo(json.dumps(data, indent=2))
    else:
        click.echo(f"Transcoded {input_file} -> {output_file}")
        encoded = outcome.encoded
        if encoded is not None and encoded.media.resolution is not None:
            click.echo(f"Output resolution: {encoded.media.resolution}")
