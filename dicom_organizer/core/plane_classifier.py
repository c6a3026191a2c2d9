"""Anatomical plane classification from Image Orientation (Patient).

The slice normal is the cross product of the row and column direction
cosines. A normal within ``PLANE_TOLERANCE`` of a patient axis selects that
axis's plane, checked in the order z, y, x. Oblique slices that match no
axis go to the dominant axis, with ties resolved toward axial, then
coronal, then sagittal.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from .constants import DEFAULT_SLICE_NORMAL, PLANE_TOLERANCE
from .types import Plane

#: Axis index checked for each plane, in decision order (z > y > x)
PLANE_AXES: tuple[tuple[Plane, int], ...] = (
    (Plane.AXIAL, 2),
    (Plane.CORONAL, 1),
    (Plane.SAGITTAL, 0),
)


def slice_normal(orientation: Sequence[float]) -> np.ndarray:
    """Compute the unit slice normal for an orientation 6-vector.

    Args:
        orientation: Row cosines (3) followed by column cosines (3)

    Returns:
        Unit normal as a length-3 array; ``DEFAULT_SLICE_NORMAL`` when the
        cross product has no usable magnitude

    Raises:
        ValueError: If ``orientation`` does not have exactly six components

    """
    values = np.asarray(orientation, dtype=float)
    if values.shape != (6,):
        raise ValueError(
            f"Orientation must have 6 components, got {values.size}"
        )

    normal = np.cross(values[:3], values[3:])
    magnitude = float(np.linalg.norm(normal))
    # NaN magnitude fails the comparison as well
    if magnitude > 0:
        return normal / magnitude
    return np.array(DEFAULT_SLICE_NORMAL)


def is_aligned(component: float) -> bool:
    """Whether a normal component is within tolerance of a unit axis."""
    return abs(abs(component) - 1.0) < PLANE_TOLERANCE


def dominant_axis_plane(normal: Sequence[float]) -> Plane:
    """Pick the plane of the largest normal component.

    Ties go to the plane checked first in ``PLANE_AXES`` (axial, coronal,
    sagittal).
    """
    magnitudes = [abs(float(c)) for c in normal]
    largest = max(magnitudes)
    for plane, axis in PLANE_AXES:
        if magnitudes[axis] == largest:
            return plane
    # All components NaN
    return Plane.AXIAL


def classify(orientation: Sequence[float]) -> Plane:
    """Classify an image into its anatomical viewing plane.

    Args:
        orientation: Image Orientation (Patient) 6-vector

    Returns:
        The plane whose axis the slice normal is aligned with

    Example:
        >>> classify([1, 0, 0, 0, 1, 0])
        <Plane.AXIAL: 'axial'>
        >>> classify([1, 0, 0, 0, 0, 1])
        <Plane.CORONAL: 'coronal'>

    """
    normal = slice_normal(orientation)
    for plane, axis in PLANE_AXES:
        if is_aligned(normal[axis]):
            return plane
    return dominant_axis_plane(normal)
