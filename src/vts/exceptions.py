"""Exception taxonomy for transcode runs.

Configuration problems are raised before any process is spawned. Every
other failure is first captured as a terminal RunOutcome and only becomes
one of the TranscodeError subclasses when the caller asks for it
(RunOutcome.raise_for_status or Transcoder.transcode).
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class VTSError(Exception):
    """Base exception for all vts errors."""


class ConfigurationError(VTSError):
    """Raised for malformed or unsupported configuration and option input."""


class TranscodeError(VTSError):
    """Base exception for a failed transcode run.

    Attributes:
        command: The command line that was executed.
        output: Diagnostic output accumulated from the process.
    """

    def __init__(
        self,
        message: str,
        command: Sequence[str] = (),
        output: str = "",
    ) -> None:
        self.command = tuple(command)
        self.output = output
        super().__init__(message)


class UnsupportedInputError(TranscodeError):
    """Raised when ffmpeg reports that it cannot process the source.

    Attributes:
        line: The diagnostic line that signalled the condition.
    """

    def __init__(
        self,
        line: str,
        command: Sequence[str] = (),
        output: str = "",
    ) -> None:
        self.line = line
        super().__init__(f"Failed encoding: {line}", command, output)


class HungProcessError(TranscodeError):
    """Raised when the process produced no output within the inactivity timeout."""

    def __init__(
        self,
        timeout: float | None,
        command: Sequence[str] = (),
        output: str = "",
        cancelled: bool = False,
    ) -> None:
        self.timeout = timeout
        self.cancelled = cancelled
        if cancelled:
            message = f"Process cancelled. Full output: {output}"
        else:
            message = f"Process hung after {timeout}s. Full output: {output}"
        super().__init__(message, command, output)


class ProcessExitError(TranscodeError):
    """Raised when the process exited abnormally without a more specific cause."""

    def __init__(
        self,
        exit_code: int | None,
        command: Sequence[str] = (),
        output: str = "",
    ) -> None:
        self.exit_code = exit_code
        super().__init__(
            f"Failed encoding. Process exited with status {exit_code}. "
            f"Full output: {output}",
            command,
            output,
        )


class NoOutputError(TranscodeError):
    """Raised when no output file was created."""

    def __init__(
        self,
        path: Path,
        command: Sequence[str] = (),
        output: str = "",
    ) -> None:
        self.path = path
        super().__init__(
            f"Failed encoding. Errors: no output file created. Full output: {output}",
            command,
            output,
        )


class InvalidOutputError(TranscodeError):
    """Raised when the output file exists but ffprobe cannot read it."""

    def __init__(
        self,
        path: Path,
        command: Sequence[str] = (),
        output: str = "",
        reason: str | None = None,
    ) -> None:
        self.path = path
        self.reason = reason
        detail = f" ({reason})" if reason else ""
        super().__init__(
            f"Failed encoding. Errors: encoded file is invalid{detail}. "
            f"Full output: {output}",
            command,
            output,
        )


class ToolNotAvailableError(VTSError):
    """Raised when a required external tool cannot be found."""
