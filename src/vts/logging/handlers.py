"""JSON log formatting for vts."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord has; anything else came from extra= or a filter
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

# Set by RunContextFilter
_RUN_FIELDS = ("run_id", "source_path")
_RUN_ATTRS = frozenset(_RUN_FIELDS) | {"run_tag"}


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Fields: timestamp (ISO-8601 UTC), level, message, logger, and when
    present a context object holding extra= fields plus the run id and
    source path, and the formatted exception.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        record_time = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_entry: dict[str, Any] = {
            "timestamp": record_time.isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.name != "root":
            log_entry["logger"] = record.name

        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS
            and key not in _RUN_ATTRS
            and not key.startswith("_")
        }
        for field in _RUN_FIELDS:
            value = getattr(record, field, None)
            if value:
                context[field] = value
        if context:
            log_entry["context"] = context

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)
