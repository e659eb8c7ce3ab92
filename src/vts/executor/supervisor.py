"""Supervision of a running ffmpeg process.

The supervisor spawns the command, reads its stderr on a background
thread and consumes the lines on the calling thread. Waiting on the line
queue with the inactivity timeout lets the calling thread notice a silent
process even while the reader thread is blocked in read(); killing the
process group then closes the pipe and unblocks the reader.

State machine per run:

    starting -> streaming -> succeeded | hung | unsupported input
                           | process error | no output | invalid output
"""

from __future__ import annotations

import logging
import queue
import shlex
import subprocess  # nosec B404 - only used for TimeoutExpired
import threading
from collections.abc import Callable, Sequence
from pathlib import Path

from vts.config.models import SupervisorConfig
from vts.executor.outcome import OutcomeValidator, RunOutcome, RunStatus
from vts.executor.process import (
    ProcessHandle,
    ProcessLauncher,
    SubprocessLauncher,
    iter_stream_lines,
)
from vts.tools.ffmpeg_progress import (
    ProgressLine,
    UnsupportedInputLine,
    classify_line,
    decode_line,
    fraction_complete,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]

# Sentinel put on the queue when the reader thread is done
_EOF = object()


class ProcessSupervisor:
    """Runs one ffmpeg command at a time and reports its outcome.

    Instances are not shared between concurrent runs; create one
    supervisor per concurrent invocation.
    """

    def __init__(
        self,
        validator: OutcomeValidator,
        config: SupervisorConfig | None = None,
        launcher: ProcessLauncher | None = None,
    ) -> None:
        """Initialize the supervisor.

        Args:
            validator: Checks the artifact once the process has finished.
            config: Supervisor settings (inactivity timeout, kill grace).
            launcher: Spawns the process. Defaults to SubprocessLauncher.
        """
        self.validator = validator
        self.config = config or SupervisorConfig()
        self.launcher = launcher or SubprocessLauncher()
        self._lock = threading.Lock()
        self._handle: ProcessHandle | None = None
        self._cancelled = False
        self._output: list[str] = []
        self._progress: float | None = None

    @property
    def output(self) -> str:
        """Diagnostic output accumulated by the current or last run."""
        return "".join(self._output)

    @property
    def progress(self) -> float | None:
        """Last progress fraction reported by the current or last run."""
        return self._progress

    def cancel(self) -> None:
        """Kill the running process.

        The run ends with a HUNG outcome marked as cancelled. Does nothing
        if no process is running or the process has already exited.
        """
        with self._lock:
            handle = self._handle
            if handle is not None and handle.poll() is not None:
                logger.debug("Process %d already exited, ignoring cancel", handle.pid)
                return
            self._cancelled = True
        if handle is not None:
            logger.warning("Cancelling process %d", handle.pid)
            handle.kill()

    def run(
        self,
        command: Sequence[str],
        output_path: Path,
        duration_seconds: float | None,
        on_progress: ProgressCallback | None = None,
    ) -> RunOutcome:
        """Run command to completion.

        Args:
            command: Full command line, executable first.
            output_path: File the command is expected to produce.
            duration_seconds: Source duration used to compute progress.
                Progress samples are skipped when unknown or zero.
            on_progress: Called with 0.0 after spawning, with each parsed
                fraction, and with 1.0 on success. Runs on the calling
                thread; slow callbacks delay line consumption.

        Returns:
            The terminal RunOutcome.
        """
        cmd = tuple(str(part) for part in command)
        output_path = Path(output_path)
        self._output = []
        self._progress = None
        with self._lock:
            self._cancelled = False

        logger.info("Running transcoding...\n%s", shlex.join(cmd))

        try:
            handle = self.launcher.spawn(cmd)
        except OSError as e:
            outcome = RunOutcome(
                RunStatus.PROCESS_ERROR, command=cmd, output=str(e), exit_code=None
            )
            self._log_failure(outcome)
            return outcome

        with self._lock:
            self._handle = handle
            cancelled_early = self._cancelled
        if cancelled_early:
            handle.kill()

        try:
            outcome = self._supervise(
                handle, cmd, output_path, duration_seconds, on_progress
            )
        except BaseException:
            # KeyboardInterrupt and friends must not leave ffmpeg running
            handle.kill()
            raise
        finally:
            with self._lock:
                self._handle = None

        if outcome.success:
            self._emit(on_progress, 1.0)
            logger.info("Transcoding to %s succeeded", output_path)
        else:
            self._log_failure(outcome)
        return outcome

    def _supervise(
        self,
        handle: ProcessHandle,
        cmd: tuple[str, ...],
        output_path: Path,
        duration_seconds: float | None,
        on_progress: ProgressCallback | None,
    ) -> RunOutcome:
        self._emit(on_progress, 0.0)

        lines: queue.Queue[object] = queue.Queue()
        reader = threading.Thread(
            target=self._read_stderr,
            args=(handle, lines),
            name=f"vts-stderr-{handle.pid}",
            daemon=True,
        )
        reader.start()

        timeout = self.config.timeout
        failure: RunOutcome | None = None

        while True:
            try:
                item = lines.get(timeout=timeout)
            except queue.Empty:
                logger.warning(
                    "No output from process %d for %ss, killing it", handle.pid, timeout
                )
                failure = RunOutcome(RunStatus.HUNG, timeout=timeout)
                break
            if item is _EOF:
                break

            line = decode_line(item)  # type: ignore[arg-type]
            self._output.append(line + "\n")
            event = classify_line(line)

            if isinstance(event, ProgressLine):
                fraction = fraction_complete(event.elapsed_seconds, duration_seconds)
                if fraction is not None:
                    logger.debug("Progress: %.3f", fraction)
                    self._emit(on_progress, fraction)
            elif isinstance(event, UnsupportedInputLine):
                failure = RunOutcome(
                    RunStatus.UNSUPPORTED_INPUT, message=event.message
                )
                break

        if failure is not None:
            exit_code = self._terminate(handle, reader)
            return failure.with_diagnostics(cmd, self.output, exit_code)

        try:
            exit_code = handle.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning(
                "Process %d closed its output but did not exit, killing it", handle.pid
            )
            exit_code = self._terminate(handle, reader)
            return RunOutcome(RunStatus.HUNG, timeout=timeout).with_diagnostics(
                cmd, self.output, exit_code
            )
        reader.join(timeout=self.config.kill_grace_seconds)

        with self._lock:
            cancelled = self._cancelled
        # A cancel that lost the race with a clean exit is ignored
        if cancelled and exit_code != 0:
            return RunOutcome(
                RunStatus.HUNG, timeout=timeout, cancelled=True
            ).with_diagnostics(cmd, self.output, exit_code)

        outcome = self.validator.validate(output_path)
        if outcome.success and exit_code != 0:
            # A readable artifact does not make an abnormal exit a success
            outcome = RunOutcome(RunStatus.PROCESS_ERROR)
        return outcome.with_diagnostics(cmd, self.output, exit_code)

    def _terminate(self, handle: ProcessHandle, reader: threading.Thread) -> int | None:
        """Kill the process group and reap it."""
        handle.kill()
        grace = self.config.kill_grace_seconds
        exit_code: int | None
        try:
            exit_code = handle.wait(timeout=grace)
        except subprocess.TimeoutExpired:
            logger.error("Process %d did not exit after kill", handle.pid)
            exit_code = None
        reader.join(timeout=grace)
        if reader.is_alive():
            logger.error(
                "Stderr reader for process %d did not stop; abandoning it", handle.pid
            )
        return exit_code

    @staticmethod
    def _read_stderr(handle: ProcessHandle, lines: queue.Queue[object]) -> None:
        try:
            if handle.stderr is not None:
                for raw in iter_stream_lines(handle.stderr):
                    lines.put(raw)
        except (ValueError, OSError) as e:
            # Pipe closed or process killed
            logger.debug("Stderr reader stopped: %s", e)
        finally:
            lines.put(_EOF)

    def _emit(self, on_progress: ProgressCallback | None, fraction: float) -> None:
        self._progress = fraction
        if on_progress is None:
            return
        try:
            on_progress(fraction)
        except Exception as e:
            logger.warning("Progress callback error: %s", e)

    @staticmethod
    def _log_failure(outcome: RunOutcome) -> None:
        if outcome.status is RunStatus.HUNG and not outcome.cancelled:
            summary = "Process hung..."
        else:
            summary = f"Failed encoding ({outcome.status.value})..."
        logger.error(
            "%s\nCommand\n%s\nOutput\n%s",
            summary,
            shlex.join(outcome.command),
            outcome.output,
            extra={
                "status": outcome.status.value,
                "exit_code": outcome.exit_code,
                "error_line": outcome.message,
            },
        )
