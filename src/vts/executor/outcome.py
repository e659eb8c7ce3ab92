"""Terminal run outcomes and post-run artifact validation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path

from vts.exceptions import (
    HungProcessError,
    InvalidOutputError,
    NoOutputError,
    ProcessExitError,
    TranscodeError,
    UnsupportedInputError,
)
from vts.introspector.interface import MediaIntrospectionError, MediaProbe, ProbeResult

logger = logging.getLogger(__name__)


class RunStatus(Enum):
    """Terminal status of a transcode run."""

    SUCCEEDED = "succeeded"
    NO_OUTPUT = "no_output"
    INVALID_OUTPUT = "invalid_output"
    UNSUPPORTED_INPUT = "unsupported_input"
    HUNG = "hung"
    PROCESS_ERROR = "process_error"


@dataclass(frozen=True)
class RunOutcome:
    """Result of one supervised run.

    Exactly one outcome is produced per run. Which of the optional fields
    are set depends on the status.
    """

    status: RunStatus
    """Terminal status."""

    command: tuple[str, ...] = ()
    """Command line that was executed."""

    output: str = ""
    """Diagnostic output accumulated from stderr."""

    artifact_path: Path | None = None
    """Output file (set for SUCCEEDED, NO_OUTPUT and INVALID_OUTPUT)."""

    message: str | None = None
    """Error line for UNSUPPORTED_INPUT, reason for INVALID_OUTPUT."""

    exit_code: int | None = None
    """Process exit status, if the process was waited on."""

    timeout: float | None = None
    """Inactivity timeout in effect, for HUNG."""

    cancelled: bool = False
    """True if HUNG was caused by an explicit cancel()."""

    encoded: ProbeResult | None = None
    """Probe result of the produced artifact, for SUCCEEDED."""

    @property
    def success(self) -> bool:
        return self.status is RunStatus.SUCCEEDED

    def with_diagnostics(
        self, command: tuple[str, ...], output: str, exit_code: int | None
    ) -> RunOutcome:
        """Return a copy carrying the run's command, output and exit status."""
        return replace(self, command=command, output=output, exit_code=exit_code)

    def to_error(self) -> TranscodeError | None:
        """Build the exception matching this outcome, or None on success."""
        status = self.status
        if status is RunStatus.SUCCEEDED:
            return None
        if status is RunStatus.NO_OUTPUT:
            return NoOutputError(
                self.artifact_path,  # type: ignore[arg-type]
                self.command,
                self.output,
            )
        if status is RunStatus.INVALID_OUTPUT:
            return InvalidOutputError(
                self.artifact_path,  # type: ignore[arg-type]
                self.command,
                self.output,
                reason=self.message,
            )
        if status is RunStatus.UNSUPPORTED_INPUT:
            return UnsupportedInputError(self.message or "", self.command, self.output)
        if status is RunStatus.HUNG:
            return HungProcessError(
                self.timeout, self.command, self.output, cancelled=self.cancelled
            )
        return ProcessExitError(self.exit_code, self.command, self.output)

    def raise_for_status(self) -> None:
        """Raise the matching TranscodeError if the run failed."""
        error = self.to_error()
        if error is not None:
            raise error


class OutcomeValidator:
    """Checks the artifact of a finished run.

    The checks run in order and the first failure wins: the file must
    exist, then the probe must report it as readable.
    """

    def __init__(self, probe: MediaProbe) -> None:
        self._probe = probe

    def validate(self, artifact_path: Path) -> RunOutcome:
        """Validate the artifact at artifact_path.

        Returns:
            RunOutcome with status SUCCEEDED, NO_OUTPUT or INVALID_OUTPUT.
        """
        artifact_path = Path(artifact_path)
        if not artifact_path.exists():
            return RunOutcome(RunStatus.NO_OUTPUT, artifact_path=artifact_path)

        try:
            result = self._probe.probe(artifact_path)
        except (MediaIntrospectionError, OSError) as e:
            logger.debug("Probe of %s failed: %s", artifact_path, e)
            return RunOutcome(
                RunStatus.INVALID_OUTPUT, artifact_path=artifact_path, message=str(e)
            )

        if not result.valid:
            return RunOutcome(
                RunStatus.INVALID_OUTPUT,
                artifact_path=artifact_path,
                message="no readable streams",
            )

        return RunOutcome(
            RunStatus.SUCCEEDED, artifact_path=artifact_path, encoded=result
        )
