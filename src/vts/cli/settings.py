"""Per-command configuration and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from vts.cli.exit_codes import ExitCode
from vts.cli.output import error_exit
from vts.config import VTSConfig, build_logging_config, get_config
from vts.exceptions import ConfigurationError
from vts.logging import configure_logging

logger = logging.getLogger(__name__)


def load_settings(
    ctx: click.Context,
    *,
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    timeout: float | None = None,
    disable_timeout: bool = False,
    json_output: bool = False,
) -> VTSConfig:
    """Load configuration for a command and configure logging from it.

    Group options (--config, --log-*) are read from ctx.obj. Exits with
    CONFIG_ERROR if the configuration is invalid.
    """
    obj = ctx.obj or {}
    try:
        config = get_config(
            obj.get("config_path"),
            ffmpeg_path=ffmpeg_path,
            ffprobe_path=ffprobe_path,
            timeout=timeout,
            disable_timeout=disable_timeout,
            log_level=obj.get("log_level"),
            strict=True,
        )
        logging_config = build_logging_config(
            config.logging,
            file=obj.get("log_file"),
            format="json" if obj.get("log_json") else None,
        )
    except (ConfigurationError, ValueError) as e:
        error_exit(str(e), ExitCode.CONFIG_ERROR, json_output)

    configure_logging(logging_config)
    logger.debug(
        "Effective settings: ffmpeg=%s, ffprobe=%s, timeout=%s",
        config.supervisor.ffmpeg_path,
        config.tools.ffprobe or "ffprobe",
        config.supervisor.timeout,
    )
    return config
