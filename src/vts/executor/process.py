"""External process abstraction.

The supervisor only needs to spawn a command, read its stderr as bytes,
wait for it and kill it (including any children it started). The
subprocess implementation puts the child in its own session so the whole
process group can be killed on POSIX systems.
"""

from __future__ import annotations

import logging
import os
import re
import signal
import subprocess  # nosec B404 - subprocess is required for FFmpeg invocation
from collections.abc import Iterator, Sequence
from typing import IO, Protocol

logger = logging.getLogger(__name__)

# ffmpeg terminates progress lines with \r and everything else with \n
_LINE_BREAK = re.compile(rb"[\r\n]")

READ_CHUNK_SIZE = 4096


class ProcessHandle(Protocol):
    """A running external process."""

    pid: int
    stderr: IO[bytes] | None

    def poll(self) -> int | None:
        """Return the exit status, or None if still running."""
        ...

    def wait(self, timeout: float | None = None) -> int:
        """Wait for exit and return the exit status.

        Raises:
            subprocess.TimeoutExpired: If the process is still running
                after timeout seconds.
        """
        ...

    def kill(self) -> None:
        """Forcibly terminate the process and its children."""
        ...


class ProcessLauncher(Protocol):
    """Spawns external processes."""

    def spawn(self, command: Sequence[str]) -> ProcessHandle:
        """Start command with a readable binary stderr stream.

        Raises:
            OSError: If the executable cannot be started.
        """
        ...


class SubprocessHandle:
    """ProcessHandle backed by subprocess.Popen."""

    def __init__(self, process: subprocess.Popen[bytes], own_group: bool) -> None:
        self._process = process
        self._own_group = own_group

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def stderr(self) -> IO[bytes] | None:
        return self._process.stderr

    @property
    def returncode(self) -> int | None:
        return self._process.returncode

    def poll(self) -> int | None:
        return self._process.poll()

    def wait(self, timeout: float | None = None) -> int:
        return self._process.wait(timeout=timeout)

    def kill(self) -> None:
        if self._process.poll() is not None:
            return
        if self._own_group:
            try:
                os.killpg(self._process.pid, signal.SIGKILL)
                logger.debug("Killed process group %d", self._process.pid)
                return
            except ProcessLookupError:
                logger.debug("Process group %d already gone", self._process.pid)
                return
            except PermissionError as e:
                logger.warning(
                    "Could not kill process group %d (%s), killing process only",
                    self._process.pid,
                    e,
                )
        try:
            self._process.kill()
        except ProcessLookupError:
            pass


class SubprocessLauncher:
    """ProcessLauncher using subprocess.Popen.

    stdout is discarded; ffmpeg reports progress and errors on stderr.
    """

    def spawn(self, command: Sequence[str]) -> SubprocessHandle:
        own_group = os.name == "posix"
        process = subprocess.Popen(  # nosec B603 - argument list, no shell
            [str(part) for part in command],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            start_new_session=own_group,
        )
        return SubprocessHandle(process, own_group)


def iter_stream_lines(
    stream: IO[bytes], chunk_size: int = READ_CHUNK_SIZE
) -> Iterator[bytes]:
    """Yield lines from a binary stream as soon as they are complete.

    Lines end at \\r or \\n; the empty pieces produced by \\r\\n pairs are
    skipped. A trailing unterminated line is yielded at end of stream.
    """
    read = getattr(stream, "read1", stream.read)
    pending = b""
    while True:
        chunk = read(chunk_size)
        if not chunk:
            break
        *complete, pending = _LINE_BREAK.split(pending + chunk)
        for line in complete:
            if line:
                yield line
    if pending:
        yield pending
