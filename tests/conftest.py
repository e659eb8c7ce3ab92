"""Shared test fixtures for vts."""

import logging
import shutil
import sys
import tempfile
import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from vts.geometry.types import SourceMedia
from vts.introspector.interface import MediaIntrospectionError, ProbeResult


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def fake_ffmpeg(temp_dir: Path) -> Callable[[str], list[str]]:
    """Return a factory for stand-in ffmpeg commands.

    The factory takes the body of a Python script and returns the command
    prefix that runs it. Inside the script, ``err(text)`` writes raw text
    to stderr and flushes, and ``touch()`` creates the output file given
    as the last argument.
    """
    counter = iter(range(1000))

    def factory(body: str) -> list[str]:
        script = temp_dir / f"fake_ffmpeg_{next(counter)}.py"
        script.write_text(
            textwrap.dedent(
                """\
                import sys
                import time


                def err(text):
                    if isinstance(text, str):
                        text = text.encode("utf-8")
                    sys.stderr.buffer.write(text)
                    sys.stderr.buffer.flush()


                def touch():
                    with open(sys.argv[-1], "wb") as f:
                        f.write(b"encoded")


                """
            )
            + textwrap.dedent(body)
        )
        return [sys.executable, str(script)]

    return factory


class FakeProbe:
    """MediaProbe stand-in that never runs ffprobe."""

    def __init__(
        self,
        *,
        valid: bool = True,
        error: str | None = None,
        width: int | None = 320,
        height: int | None = 240,
    ) -> None:
        self.valid = valid
        self.error = error
        self.width = width
        self.height = height
        self.probed: list[Path] = []

    def probe(self, path: Path) -> ProbeResult:
        self.probed.append(Path(path))
        if self.error is not None:
            raise MediaIntrospectionError(self.error)
        return ProbeResult(
            media=SourceMedia(
                path=Path(path),
                duration_seconds=4.0,
                width=self.width,
                height=self.height,
            ),
            video_codec="h264",
            container_format="mov,mp4,m4a,3gp,3g2,mj2",
            valid=self.valid,
        )


@pytest.fixture
def fake_probe() -> FakeProbe:
    """Return a probe that reports every file as a valid 320x240 video."""
    return FakeProbe()


@pytest.fixture
def make_probe() -> type[FakeProbe]:
    """Return the FakeProbe class for tests that need custom probe results."""
    return FakeProbe


@pytest.fixture
def restore_root_logging():
    """Restore root logger handlers and level changed by configure_logging()."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
