"""Transcode execution.

- Transcoder: one source/output pair, options to outcome
- ProcessSupervisor: runs ffmpeg with progress and inactivity tracking
- OutcomeValidator: checks the produced artifact
- RunOutcome / RunStatus: terminal result of a run
"""

from vts.executor.outcome import OutcomeValidator, RunOutcome, RunStatus
from vts.executor.process import (
    ProcessHandle,
    ProcessLauncher,
    SubprocessHandle,
    SubprocessLauncher,
    iter_stream_lines,
)
from vts.executor.supervisor import ProcessSupervisor, ProgressCallback
from vts.executor.transcoder import Transcoder

__all__ = [
    "OutcomeValidator",
    "ProcessHandle",
    "ProcessLauncher",
    "ProcessSupervisor",
    "ProgressCallback",
    "RunOutcome",
    "RunStatus",
    "SubprocessHandle",
    "SubprocessLauncher",
    "Transcoder",
    "iter_stream_lines",
]
