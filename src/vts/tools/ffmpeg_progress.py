"""FFmpeg diagnostic line parsing.

ffmpeg writes progress and errors to stderr. Two progress formats exist:

    ffmpeg <  0.8: frame=  413 fps= 48 q=31.0 size=    2139kB time=16.52 bitrate=1060.6kbits/s
    ffmpeg >= 0.8: frame= 4855 fps= 46 q=31.0 size=   45306kB time=00:02:42.28 bitrate=2287.0kbits/

Each line is classified into exactly one event so that the parser can be
tested without running a process.
"""

import re
from dataclasses import dataclass

PROGRESS_MARKER = "time="

# Substrings that mean ffmpeg cannot process the input at all
UNSUPPORTED_INPUT_MARKERS = ("Unsupported codec",)

_CLOCK_TIME = re.compile(r"time=\s*(\d+):(\d+):(\d+(?:\.\d+)?)")
_SECONDS_TIME = re.compile(r"time=\s*(\d+\.\d+)")

# Fallback for lines that are not valid UTF-8
LEGACY_ENCODING = "iso-8859-1"


@dataclass(frozen=True)
class ProgressLine:
    """A progress line with the elapsed output time."""

    elapsed_seconds: float


@dataclass(frozen=True)
class UnsupportedInputLine:
    """A line reporting that the input cannot be processed."""

    message: str


@dataclass(frozen=True)
class OtherLine:
    """Any line that carries no progress or error signal."""


LineEvent = ProgressLine | UnsupportedInputLine | OtherLine


def decode_line(raw: bytes) -> str:
    """Decode a raw stderr line.

    Falls back to ISO-8859-1, which accepts every byte, when the line is
    not valid UTF-8.
    """
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode(LEGACY_ENCODING)


def parse_elapsed_seconds(line: str) -> float:
    """Parse the time= value of a progress line.

    Returns 0.0 for a progress line in an unrecognized format.
    """
    match = _CLOCK_TIME.search(line)
    if match:
        hours, minutes, seconds = match.groups()
        return int(hours) * 3600 + int(minutes) * 60 + float(seconds)
    match = _SECONDS_TIME.search(line)
    if match:
        return float(match.group(1))
    return 0.0


def classify_line(line: str) -> LineEvent:
    """Classify a single decoded stderr line."""
    for marker in UNSUPPORTED_INPUT_MARKERS:
        if marker in line:
            return UnsupportedInputLine(message=line.strip())
    if PROGRESS_MARKER in line:
        return ProgressLine(elapsed_seconds=parse_elapsed_seconds(line))
    return OtherLine()


def fraction_complete(
    elapsed_seconds: float, duration_seconds: float | None
) -> float | None:
    """Convert elapsed output time to a fraction of the total duration.

    Returns None when the duration is unknown or zero. The value is not
    clamped; ffmpeg may report slightly more than the probed duration.
    """
    if not duration_seconds or duration_seconds <= 0:
        return None
    return elapsed_seconds / duration_seconds
