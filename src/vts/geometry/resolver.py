"""Target resolution and orientation resolution.

Computes the resolution ffmpeg should scale to and the filters needed to
correct rotated sources. Everything here is pure; no I/O happens.

Scaling together with autorotation:

    When the source is rotated by 90 or 270 degrees, the user's requested
    dimensions describe the upright (rotated) frame, but the scale is
    computed against the stored frame. The preserved axis is therefore
    inverted before the derived axis is computed, and the result is swapped
    back afterwards.

    Example: stored 640x480 with rotation 90, requested 660x42 preserving
    width. The preserved axis becomes height, the derived width is
    660 * (640 / 480) = 880, giving 880x660, which is swapped to 660x880.
"""

from __future__ import annotations

import logging
import math

from vts.geometry.types import (
    AspectMode,
    AspectPolicy,
    GeometryResult,
    OrientationDirectives,
    Resolution,
    SourceMedia,
)

logger = logging.getLogger(__name__)

AUTOROTATION_FILTERS: dict[int, str] = {
    90: "transpose=1",
    180: "hflip,vflip",
    270: "transpose=2",
}

# Clears the rotate tag on the first video stream.
STRIP_ROTATION_METADATA = "s:v:0 rotate=0"

ORIENTATION_FLIPPING_ROTATIONS = frozenset({90, 270})

MIN_DIMENSION = 2


def evenize(number: float) -> int:
    """Round a computed dimension to an even integer.

    Takes the ceiling if it is even, otherwise the floor; a value that was
    already an odd integer is bumped up by one.

        >>> [evenize(n) for n in (2.2, 3.2, 0.2, 42, 43)]
        [2, 4, 0, 42, 44]
    """
    ceiling = math.ceil(number)
    result = ceiling if ceiling % 2 == 0 else math.floor(number)
    if result % 2 != 0:
        result += 1
    return result


def _derived(number: float) -> int:
    # Encoders reject zero-sized frames.
    return max(MIN_DIMENSION, evenize(number))


def is_autorotating(source: SourceMedia, autorotate: bool) -> bool:
    """True if autorotation is requested and the source carries a rotation."""
    return bool(autorotate and source.rotation)


def changes_orientation(source: SourceMedia, autorotate: bool) -> bool:
    """True if autorotating swaps the frame's width and height."""
    return (
        is_autorotating(source, autorotate)
        and source.rotation in ORIENTATION_FLIPPING_ROTATIONS
    )


def orientation_directives(
    source: SourceMedia, autorotate: bool
) -> OrientationDirectives | None:
    """Build the rotation-correcting directives for a source.

    Returns None when autorotation is off, the source is not rotated, or
    the rotation is not one of 90, 180 or 270 degrees.
    """
    if not is_autorotating(source, autorotate):
        return None
    video_filter = AUTOROTATION_FILTERS.get(source.rotation)  # type: ignore[arg-type]
    if video_filter is None:
        logger.debug(
            "Rotation %s of %s is not correctable, leaving orientation untouched",
            source.rotation,
            source.path,
        )
        return None
    return OrientationDirectives(
        video_filter=video_filter, metadata=STRIP_ROTATION_METADATA
    )


def preserve_aspect_ratio(
    source: SourceMedia,
    requested: Resolution,
    policy: AspectPolicy,
    autorotate: bool = False,
) -> Resolution:
    """Derive the non-preserved dimension from the source aspect ratio.

    Args:
        source: Source media (aspect ratio, stored dimensions, rotation).
        requested: Requested resolution, in the upright frame.
        policy: Aspect policy; must not be AspectMode.NONE.
        autorotate: Whether the source will be autorotated.

    Returns:
        Resolution in the stored (pre-rotation) frame.
    """
    aspect_ratio = source.calculated_aspect_ratio
    if aspect_ratio is None or policy.mode is AspectMode.NONE:
        return requested

    new_size = (
        requested.width if policy.mode is AspectMode.WIDTH else requested.height
    )
    inverted = changes_orientation(source, autorotate)
    side = policy.mode.inverted() if inverted else policy.mode

    if not policy.enlarge:
        # The side has already been mapped onto the stored frame, which is
        # the frame the source dimensions are measured in.
        original_size = source.dimension(side)
        if original_size is not None and original_size < new_size:
            new_size = original_size

    if side is AspectMode.WIDTH:
        resolution = Resolution(new_size, _derived(new_size / aspect_ratio))
    else:
        resolution = Resolution(_derived(new_size * aspect_ratio), new_size)

    if inverted:
        resolution = resolution.swapped()
    return resolution


def resolve_geometry(
    source: SourceMedia,
    requested: Resolution | None,
    policy: AspectPolicy | None = None,
    autorotate: bool = False,
) -> GeometryResult:
    """Resolve the final resolution and orientation directives.

    Args:
        source: Source media metadata.
        requested: Requested resolution, or None if the caller set none.
        policy: Aspect policy (defaults to no preservation, enlarge allowed).
        autorotate: Whether to correct the source rotation.

    Returns:
        GeometryResult with the final resolution (None when nothing was
        requested) and orientation directives (None when not needed).
    """
    policy = policy or AspectPolicy()
    orientation = orientation_directives(source, autorotate)

    resolution = requested
    if requested is not None and policy.mode is not AspectMode.NONE:
        resolution = preserve_aspect_ratio(source, requested, policy, autorotate)
        if resolution != requested:
            logger.debug(
                "Preserving %s aspect ratio of %s: %s -> %s",
                policy.mode.value,
                source.path,
                requested,
                resolution,
            )

    return GeometryResult(resolution=resolution, orientation=orientation)
