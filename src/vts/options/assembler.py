"""Option assembly.

Turns whatever the caller passed as encoding options into an OptionInput
once, then merges the geometry resolver's output into it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from vts.exceptions import ConfigurationError
from vts.geometry.types import GeometryResult
from vts.options.encoding import EncodingOptions, OptionInput, RawOptions

logger = logging.getLogger(__name__)

VALID_OPTION_TYPES = ("EncodingOptions", "Mapping", "str")


def parse_option_input(value: Any) -> OptionInput:
    """Classify user-supplied encoding options.

    Args:
        value: None, an EncodingOptions, any mapping, a RawOptions or a
            pre-formatted argument string.

    Returns:
        EncodingOptions for structured input, RawOptions for strings.

    Raises:
        ConfigurationError: For any other type.
    """
    if value is None:
        return EncodingOptions()
    if isinstance(value, (EncodingOptions, RawOptions)):
        return value
    if isinstance(value, str):
        return RawOptions(value)
    if isinstance(value, Mapping):
        return EncodingOptions(value)
    raise ConfigurationError(
        f"Unknown options format '{type(value).__name__}', should be either "
        f"{', '.join(VALID_OPTION_TYPES)}."
    )


def assemble_options(options: OptionInput, geometry: GeometryResult) -> OptionInput:
    """Merge geometry output into the option input.

    Geometry-derived entries replace user-supplied ones. Raw option
    strings are returned unchanged: there is no structure to merge into,
    so rotation and aspect handling need structured options.

    Args:
        options: Parsed option input.
        geometry: Result of resolve_geometry().

    Returns:
        The canonical option set handed to the supervisor.
    """
    if isinstance(options, RawOptions):
        if geometry.orientation is not None:
            logger.warning(
                "Raw option string given; autorotation directives are not applied"
            )
        return options

    overrides: dict[str, Any] = {}
    if geometry.resolution is not None:
        overrides["resolution"] = geometry.resolution
    if geometry.orientation is not None:
        if "video_filter" in options:
            logger.warning(
                "Replacing video_filter '%s' with autorotation filter '%s'",
                options["video_filter"],
                geometry.orientation.video_filter,
            )
        overrides["video_filter"] = geometry.orientation.video_filter
        overrides["metadata"] = geometry.orientation.metadata

    return options.merged(overrides)
