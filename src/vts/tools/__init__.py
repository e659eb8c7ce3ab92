"""External tool helpers: ffmpeg output parsing and executable lookup."""

from vts.tools.detection import find_tool, require_tool
from vts.tools.ffmpeg_progress import (
    LineEvent,
    OtherLine,
    ProgressLine,
    UnsupportedInputLine,
    classify_line,
    decode_line,
    fraction_complete,
    parse_elapsed_seconds,
)

__all__ = [
    "LineEvent",
    "OtherLine",
    "ProgressLine",
    "UnsupportedInputLine",
    "classify_line",
    "decode_line",
    "find_tool",
    "fraction_complete",
    "parse_elapsed_seconds",
    "require_tool",
]
