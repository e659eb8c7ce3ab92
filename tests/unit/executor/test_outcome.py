"""Unit tests for RunOutcome and OutcomeValidator."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from vts.exceptions import (
    HungProcessError,
    InvalidOutputError,
    NoOutputError,
    ProcessExitError,
    UnsupportedInputError,
)
from vts.executor import OutcomeValidator, RunOutcome, RunStatus

COMMAND = ("ffmpeg", "-y", "-i", "in.mp4", "out.mp4")


class TestOutcomeValidator:
    """Tests for OutcomeValidator.validate()."""

    def test_missing_file(self, fake_probe, temp_dir: Path) -> None:
        """A missing artifact is NO_OUTPUT and is not probed."""
        outcome = OutcomeValidator(fake_probe).validate(temp_dir / "out.mp4")

        assert outcome.status is RunStatus.NO_OUTPUT
        assert outcome.artifact_path == temp_dir / "out.mp4"
        assert fake_probe.probed == []

    def test_valid_file(self, fake_probe, temp_dir: Path) -> None:
        """A readable artifact succeeds and carries the probe result."""
        artifact = temp_dir / "out.mp4"
        artifact.write_bytes(b"encoded")

        outcome = OutcomeValidator(fake_probe).validate(artifact)

        assert outcome.success
        assert outcome.encoded is not None
        assert outcome.encoded.path == artifact

    def test_probe_error(self, make_probe, temp_dir: Path) -> None:
        """A probe failure is INVALID_OUTPUT with the reason."""
        artifact = temp_dir / "out.mp4"
        artifact.write_bytes(b"garbage")

        outcome = OutcomeValidator(make_probe(error="bad header")).validate(artifact)

        assert outcome.status is RunStatus.INVALID_OUTPUT
        assert outcome.message == "bad header"

    def test_probe_os_error(self, fake_probe, temp_dir: Path) -> None:
        """An OS error while probing is INVALID_OUTPUT, not an exception."""
        artifact = temp_dir / "out.mp4"
        artifact.write_bytes(b"encoded")
        fake_probe.probe = MagicMock(
            side_effect=PermissionError("ffprobe: Permission denied")
        )

        outcome = OutcomeValidator(fake_probe).validate(artifact)

        assert outcome.status is RunStatus.INVALID_OUTPUT
        assert outcome.message == "ffprobe: Permission denied"

    def test_no_streams(self, make_probe, temp_dir: Path) -> None:
        """A file without readable streams is INVALID_OUTPUT."""
        artifact = temp_dir / "out.mp4"
        artifact.write_bytes(b"")

        outcome = OutcomeValidator(make_probe(valid=False)).validate(artifact)

        assert outcome.status is RunStatus.INVALID_OUTPUT
        assert outcome.message == "no readable streams"


class TestRunOutcomeErrors:
    """Tests for RunOutcome.to_error() and raise_for_status()."""

    def test_success_has_no_error(self) -> None:
        """Successful outcomes do not raise."""
        outcome = RunOutcome(RunStatus.SUCCEEDED)
        assert outcome.to_error() is None
        outcome.raise_for_status()

    @pytest.mark.parametrize(
        ("outcome", "error_type", "fragment"),
        [
            (
                RunOutcome(RunStatus.NO_OUTPUT, artifact_path=Path("out.mp4")),
                NoOutputError,
                "no output file created",
            ),
            (
                RunOutcome(
                    RunStatus.INVALID_OUTPUT,
                    artifact_path=Path("out.mp4"),
                    message="no readable streams",
                ),
                InvalidOutputError,
                "encoded file is invalid (no readable streams)",
            ),
            (
                RunOutcome(RunStatus.UNSUPPORTED_INPUT, message="Unsupported codec"),
                UnsupportedInputError,
                "Failed encoding: Unsupported codec",
            ),
            (
                RunOutcome(RunStatus.HUNG, timeout=200.0),
                HungProcessError,
                "Process hung after 200.0s",
            ),
            (
                RunOutcome(RunStatus.HUNG, cancelled=True),
                HungProcessError,
                "Process cancelled",
            ),
            (
                RunOutcome(RunStatus.PROCESS_ERROR, exit_code=1),
                ProcessExitError,
                "exited with status 1",
            ),
        ],
    )
    def test_error_per_status(
        self, outcome: RunOutcome, error_type: type, fragment: str
    ) -> None:
        """Each failure status maps to its own exception type."""
        failed = outcome.with_diagnostics(COMMAND, "ffmpeg said no\n", 1)

        with pytest.raises(error_type) as exc_info:
            failed.raise_for_status()

        assert fragment in str(exc_info.value)
        assert exc_info.value.command == COMMAND
        assert exc_info.value.output == "ffmpeg said no\n"
        assert "Full output: ffmpeg said no" in str(exc_info.value)

    def test_with_diagnostics_keeps_status(self) -> None:
        """with_diagnostics() only adds command, output and exit status."""
        outcome = RunOutcome(RunStatus.HUNG, timeout=5.0)
        updated = outcome.with_diagnostics(COMMAND, "out", -9)

        assert updated.status is RunStatus.HUNG
        assert updated.timeout == 5.0
        assert updated.exit_code == -9
        assert outcome.command == ()
