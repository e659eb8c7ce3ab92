"""Encoding option handling.

- parse_option_input: classify caller input as structured or raw
- assemble_options: merge geometry output into the options
- EncodingOptions / RawOptions: the two option set shapes
"""

from vts.options.assembler import assemble_options, parse_option_input
from vts.options.encoding import (
    KNOWN_OPTIONS,
    EncodingOptions,
    OptionInput,
    RawOptions,
)

__all__ = [
    "KNOWN_OPTIONS",
    "EncodingOptions",
    "OptionInput",
    "RawOptions",
    "assemble_options",
    "parse_option_input",
]
