"""DICOM Organizer Type Definitions.

Shared record types produced by one archive-processing run. Records and
series groups are build-once values: they are frozen and never updated
after a run returns them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .constants import (
    DEFAULT_BITS_ALLOCATED,
    DEFAULT_COLUMNS,
    DEFAULT_IMAGE_ORIENTATION,
    DEFAULT_IMAGE_POSITION,
    DEFAULT_INSTANCE_NUMBER,
    DEFAULT_PHOTOMETRIC_INTERPRETATION,
    DEFAULT_PIXEL_SPACING,
    DEFAULT_RESCALE_INTERCEPT,
    DEFAULT_RESCALE_SLOPE,
    DEFAULT_ROWS,
    DEFAULT_SAMPLES_PER_PIXEL,
    DEFAULT_SERIES_DESCRIPTION,
    DEFAULT_SERIES_MODALITY,
    DEFAULT_SLICE_LOCATION,
    DEFAULT_WINDOW_CENTER,
    DEFAULT_WINDOW_WIDTH,
)
from .exceptions import BatchProcessingError

# =============================================================================
# Anatomical Planes
# =============================================================================


class Plane(Enum):
    """Canonical anatomical viewing planes.

    Each plane is identified by the patient axis its slice normal is
    dominantly aligned with.
    """

    AXIAL = "axial"  # normal along z
    CORONAL = "coronal"  # normal along y
    SAGITTAL = "sagittal"  # normal along x


# =============================================================================
# Image and Series Records
# =============================================================================


@dataclass(frozen=True, eq=False)
class ImageRecord:
    """One decoded slice.

    Equality is identity: plane stacks hold references to the same record
    objects as ``SeriesGroup.images``, never copies.
    """

    image_key: str
    instance_number: int = DEFAULT_INSTANCE_NUMBER
    slice_location: float = DEFAULT_SLICE_LOCATION
    image_position: tuple[float, float, float] = DEFAULT_IMAGE_POSITION
    image_orientation: tuple[float, ...] = DEFAULT_IMAGE_ORIENTATION
    pixel_spacing: tuple[float, float] = DEFAULT_PIXEL_SPACING
    rows: int = DEFAULT_ROWS
    columns: int = DEFAULT_COLUMNS
    bits_allocated: int = DEFAULT_BITS_ALLOCATED
    samples_per_pixel: int = DEFAULT_SAMPLES_PER_PIXEL
    photometric_interpretation: str = DEFAULT_PHOTOMETRIC_INTERPRETATION
    window_center: float = DEFAULT_WINDOW_CENTER
    window_width: float = DEFAULT_WINDOW_WIDTH
    rescale_intercept: float = DEFAULT_RESCALE_INTERCEPT
    rescale_slope: float = DEFAULT_RESCALE_SLOPE
    modality: str = ""
    series_description: str = ""

    @property
    def row_cosines(self) -> tuple[float, float, float]:
        """Direction cosines of the image rows."""
        o = self.image_orientation
        return (o[0], o[1], o[2])

    @property
    def column_cosines(self) -> tuple[float, float, float]:
        """Direction cosines of the image columns."""
        o = self.image_orientation
        return (o[3], o[4], o[5])

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation."""
        return {
            "image_key": self.image_key,
            "instance_number": self.instance_number,
            "slice_location": self.slice_location,
            "image_position": list(self.image_position),
            "image_orientation": list(self.image_orientation),
            "pixel_spacing": list(self.pixel_spacing),
            "rows": self.rows,
            "columns": self.columns,
            "bits_allocated": self.bits_allocated,
            "samples_per_pixel": self.samples_per_pixel,
            "photometric_interpretation": self.photometric_interpretation,
            "window_center": self.window_center,
            "window_width": self.window_width,
            "rescale_intercept": self.rescale_intercept,
            "rescale_slope": self.rescale_slope,
            "modality": self.modality,
            "series_description": self.series_description,
        }


@dataclass(frozen=True)
class SeriesGroup:
    """One display-ready series with its three per-plane slice stacks."""

    series_id: str
    images: tuple[ImageRecord, ...]
    axial: tuple[ImageRecord, ...]
    coronal: tuple[ImageRecord, ...]
    sagittal: tuple[ImageRecord, ...]
    modality: str = DEFAULT_SERIES_MODALITY
    series_description: str = DEFAULT_SERIES_DESCRIPTION

    @property
    def slice_count(self) -> int:
        """Number of member images."""
        return len(self.images)

    def plane(self, plane: Plane) -> tuple[ImageRecord, ...]:
        """Return the slice stack for ``plane``."""
        if plane is Plane.AXIAL:
            return self.axial
        if plane is Plane.CORONAL:
            return self.coronal
        return self.sagittal

    def to_dict(self, include_images: bool = False) -> dict[str, Any]:
        """Return a JSON-friendly summary of the series.

        Args:
            include_images: Also embed every member image record

        """
        summary: dict[str, Any] = {
            "series_id": self.series_id,
            "modality": self.modality,
            "series_description": self.series_description,
            "slice_count": self.slice_count,
            "planes": {
                plane.value: [img.image_key for img in self.plane(plane)]
                for plane in Plane
            },
        }
        if include_images:
            summary["images"] = [img.to_dict() for img in self.images]
        return summary


# =============================================================================
# Run Progress and Outcome
# =============================================================================


@dataclass(frozen=True)
class ProgressEvent:
    """Progress notification emitted while an archive is processed."""

    percent: float
    message: str


@dataclass
class BatchStatistics:
    """Per-run counters."""

    entries_total: int = 0
    candidates: int = 0
    decoded: int = 0
    unattributed: int = 0
    skipped: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "entries_total": self.entries_total,
            "candidates": self.candidates,
            "decoded": self.decoded,
            "unattributed": self.unattributed,
            "skipped": self.skipped,
        }


@dataclass(frozen=True)
class BatchOutcome:
    """Terminal value of a run: either a non-empty series list or an error."""

    series: tuple[SeriesGroup, ...] = ()
    error: BatchProcessingError | None = None
    statistics: BatchStatistics = field(default_factory=BatchStatistics)

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def unwrap(self) -> list[SeriesGroup]:
        """Return the series list, or raise the batch-level error.

        Raises:
            BatchProcessingError: If the run failed

        """
        if self.error is not None:
            raise self.error
        return list(self.series)
