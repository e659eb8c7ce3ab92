"""Run context for structured logging.

Tags every log record emitted while a transcode runs with the run id and
source path, using contextvars so concurrent runs in different threads
keep their own context.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_source_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "source_path", default=None
)


def get_run_context() -> tuple[str | None, str | None]:
    """Get current run context as (run_id, source_path)."""
    return _run_id.get(), _source_path.get()


@contextmanager
def run_context(
    run_id: str, source_path: Path | str | None = None
) -> Generator[None, None, None]:
    """Context manager setting the run context for its body.

    Example:
        with run_context("3f2a9c1e", "/videos/in.mov"):
            logger.info("Running transcoding")  # tagged [3f2a9c1e]
    """
    id_token = _run_id.set(run_id)
    path_token = _source_path.set(
        str(source_path) if source_path is not None else None
    )
    try:
        yield
    finally:
        _run_id.reset(id_token)
        _source_path.reset(path_token)


class RunContextFilter(logging.Filter):
    """Logging filter that injects run context into log records.

    Adds run_id and source_path for JSON output and a compact run_tag such
    as "[3f2a9c1e] " for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        run_id, source_path = get_run_context()
        record.run_id = run_id
        record.source_path = source_path
        record.run_tag = f"[{run_id}] " if run_id else ""
        return True
