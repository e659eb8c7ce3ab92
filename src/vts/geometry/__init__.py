"""Geometry resolution for transcodes.

- resolve_geometry: final resolution and orientation directives
- evenize: round a computed dimension to an even integer
- Resolution, AspectMode, AspectPolicy, SourceMedia: input types
- GeometryResult, OrientationDirectives: output types
"""

from vts.geometry.resolver import (
    AUTOROTATION_FILTERS,
    STRIP_ROTATION_METADATA,
    changes_orientation,
    evenize,
    orientation_directives,
    preserve_aspect_ratio,
    resolve_geometry,
)
from vts.geometry.types import (
    AspectMode,
    AspectPolicy,
    GeometryResult,
    OrientationDirectives,
    Resolution,
    SourceMedia,
)

__all__ = [
    "AUTOROTATION_FILTERS",
    "STRIP_ROTATION_METADATA",
    "AspectMode",
    "AspectPolicy",
    "GeometryResult",
    "OrientationDirectives",
    "Resolution",
    "SourceMedia",
    "changes_orientation",
    "evenize",
    "orientation_directives",
    "preserve_aspect_ratio",
    "resolve_geometry",
]
