"""Introspector module for vts.

- MediaProbe: Protocol defining the probe interface
- FFprobeIntrospector: Production implementation using ffprobe
- ProbeResult: Probe output (SourceMedia plus codecs and validity)
- MediaIntrospectionError: Exception for introspection failures
"""

from vts.introspector.ffprobe import FFprobeIntrospector
from vts.introspector.interface import (
    MediaIntrospectionError,
    MediaProbe,
    ProbeResult,
)
from vts.introspector.parsers import parse_ffprobe_output

__all__ = [
    "FFprobeIntrospector",
    "MediaIntrospectionError",
    "MediaProbe",
    "ProbeResult",
    "parse_ffprobe_output",
]
