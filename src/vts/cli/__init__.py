"""CLI module for vts."""

from pathlib import Path

import click


@click.group()
@click.version_option(package_name="video-transcode-supervisor")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Config file (default: $VTS_CONFIG_PATH or ~/.vts/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Video Transcode Supervisor - run ffmpeg transcodes to completion."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["log_level"] = log_level.lower() if log_level else None
    ctx.obj["log_file"] = log_file
    ctx.obj["log_json"] = log_json


# Defer import to avoid circular dependency
def _register_commands():
    from vts.cli.inspect import inspect_command
    from vts.cli.transcode import transcode_command

    main.add_command(inspect_command)
    main.add_command(transcode_command)


_register_commands()
