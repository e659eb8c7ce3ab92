"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (config, options)
    20-29: Input file errors
    30-39: Tool/dependency errors
    40-49: Transcode failures
"""

from enum import IntEnum

from vts.executor.outcome import RunStatus


class ExitCode(IntEnum):
    """Exit codes for vts CLI commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1
    INTERRUPTED = 2

    # Validation errors (10-19)
    CONFIG_ERROR = 11

    # Input file errors (20-29)
    TARGET_NOT_FOUND = 20
    PROBE_FAILED = 21

    # Tool/dependency errors (30-39)
    TOOL_NOT_AVAILABLE = 30

    # Transcode failures (40-49)
    PROCESS_ERROR = 40
    UNSUPPORTED_INPUT = 41
    PROCESS_HUNG = 42
    NO_OUTPUT = 43
    INVALID_OUTPUT = 44
    CANCELLED = 45


def exit_code_for(status: RunStatus, cancelled: bool = False) -> ExitCode:
    """Map a terminal run status to the CLI exit code."""
    if status is RunStatus.HUNG and cancelled:
        return ExitCode.CANCELLED
    return _STATUS_EXIT_CODES[status]


_STATUS_EXIT_CODES: dict[RunStatus, ExitCode] = {
    RunStatus.SUCCEEDED: ExitCode.SUCCESS,
    RunStatus.PROCESS_ERROR: ExitCode.PROCESS_ERROR,
    RunStatus.UNSUPPORTED_INPUT: ExitCode.UNSUPPORTED_INPUT,
    RunStatus.HUNG: ExitCode.PROCESS_HUNG,
    RunStatus.NO_OUTPUT: ExitCode.NO_OUTPUT,
    RunStatus.INVALID_OUTPUT: ExitCode.INVALID_OUTPUT,
}
