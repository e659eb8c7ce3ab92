"""CLI output helpers shared by the commands."""

from __future__ import annotations

import json
import sys
from typing import NoReturn

import click

from vts.cli.exit_codes import ExitCode


def error_exit(
    message: str,
    code: ExitCode | int,
    json_output: bool = False,
) -> NoReturn:
    """Exit with a formatted error message.

    Args:
        message: Error message to display.
        code: Exit code to use (ExitCode enum or int).
        json_output: Whether to format output as JSON.
    """
    if isinstance(code, ExitCode):
        code_name = code.name
        exit_value = int(code)
    else:
        code_name = "UNKNOWN_ERROR"
        exit_value = code

    if json_output:
        click.echo(
            json.dumps(
                {
                    "status": "failed",
                    "error": {
                        "code": code_name,
                        "message": message,
                    },
                }
            ),
            err=True,
        )
    else:
        click.echo(f"Error: {message}", err=True)

    sys.exit(exit_value)


class ProgressDisplay:
    """Single-line progress display on stderr."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._last_percent: int | None = None

    def update(self, fraction: float) -> None:
        """Show fraction as a percentage; repeated percentages are skipped."""
        percent = int(min(max(fraction, 0.0), 1.0) * 100)
        if not self.enabled or percent == self._last_percent:
            return
        self._last_percent = percent
        sys.stderr.write(f"\rTranscoding: {percent:3d}%")
        sys.stderr.flush()

    def finish(self) -> None:
        """Complete progress display with newline."""
        if self.enabled and self._last_percent is not None:
            sys.stderr.write("\n")
            sys.stderr.flush()
