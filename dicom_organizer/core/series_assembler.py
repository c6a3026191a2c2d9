"""Series assembly: grouping, ordering and per-plane slice stacks.

Pure functions over decoded image records. For each series:

1. Members are sorted ascending by ``slice_location`` (stable, so equal
   locations keep decode order).
2. Each member is classified into a plane and dropped into that bucket.
3. No-empty-plane fallback: when at least one bucket has images, every
   empty bucket becomes the whole sorted member list.
4. Each bucket is re-sorted by its spatial key: axial by position z,
   coronal by y, sagittal by x (ascending, stable).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from dicom_organizer.utils.logger import get_logger

from .constants import DEFAULT_SERIES_DESCRIPTION, DEFAULT_SERIES_MODALITY
from .plane_classifier import classify
from .types import ImageRecord, Plane, SeriesGroup

logger = get_logger(__name__)

Classifier = Callable[[Sequence[float]], Plane]

#: Index into ``image_position`` used to order each plane's stack
PLANE_SORT_AXIS: dict[Plane, int] = {
    Plane.AXIAL: 2,
    Plane.CORONAL: 1,
    Plane.SAGITTAL: 0,
}


def sort_by_slice_location(images: Iterable[ImageRecord]) -> list[ImageRecord]:
    """Stable ascending sort on ``slice_location``."""
    return sorted(images, key=lambda img: img.slice_location)


def partition_by_plane(
    images: Sequence[ImageRecord], classifier: Classifier = classify
) -> dict[Plane, list[ImageRecord]]:
    """Bucket ``images`` by their primary plane, preserving input order."""
    buckets: dict[Plane, list[ImageRecord]] = {plane: [] for plane in Plane}
    for image in images:
        buckets[classifier(image.image_orientation)].append(image)
    return buckets


def fill_empty_planes(
    buckets: dict[Plane, list[ImageRecord]], images: Sequence[ImageRecord]
) -> dict[Plane, list[ImageRecord]]:
    """Replace every empty bucket with the whole image list.

    Applies only when some other bucket has content; three empty buckets
    stay empty. The replacement is the entire sorted series, not just the
    images that were classified elsewhere.
    """
    if not any(buckets.values()):
        return buckets
    return {
        plane: list(bucket) if bucket else list(images)
        for plane, bucket in buckets.items()
    }


def sort_by_plane_axis(images: Sequence[ImageRecord], plane: Plane) -> list[ImageRecord]:
    """Stable ascending sort on the patient-position component for ``plane``."""
    axis = PLANE_SORT_AXIS[plane]
    return sorted(images, key=lambda img: img.image_position[axis])


def _first_non_empty(values: Iterable[str], default: str) -> str:
    for value in values:
        if value:
            return value
    return default


class SeriesAssembler:
    """Build ordered ``SeriesGroup`` values from decoded images.

    The assembler holds no state between calls; ``classifier`` can be
    swapped for testing.
    """

    def __init__(self, classifier: Classifier = classify) -> None:
        self.classifier = classifier

    def assemble(
        self, members: Iterable[tuple[str, ImageRecord]]
    ) -> list[SeriesGroup]:
        """Group ``(series_id, image)`` pairs and build each series.

        Series appear in order of first occurrence; series with no members
        are never produced.

        Args:
            members: Series identifier and image record, in decode order

        Returns:
            One ``SeriesGroup`` per distinct series identifier

        """
        grouped: dict[str, list[ImageRecord]] = {}
        for series_id, image in members:
            grouped.setdefault(series_id, []).append(image)

        return [
            self.build_series(series_id, images)
            for series_id, images in grouped.items()
            if images
        ]

    def build_series(
        self, series_id: str, images: Sequence[ImageRecord]
    ) -> SeriesGroup:
        """Sort, classify and stack the members of one series.

        Raises:
            ValueError: If ``images`` is empty

        """
        if not images:
            raise ValueError(f"Series {series_id} has no images")

        ordered = sort_by_slice_location(images)
        buckets = fill_empty_planes(
            partition_by_plane(ordered, self.classifier), ordered
        )
        stacks = {
            plane: tuple(sort_by_plane_axis(bucket, plane))
            for plane, bucket in buckets.items()
        }

        logger.info(
            "series_assembled",
            series_id=series_id,
            slices=len(ordered),
            axial=len(stacks[Plane.AXIAL]),
            coronal=len(stacks[Plane.CORONAL]),
            sagittal=len(stacks[Plane.SAGITTAL]),
        )

        return SeriesGroup(
            series_id=series_id,
            images=tuple(ordered),
            axial=stacks[Plane.AXIAL],
            coronal=stacks[Plane.CORONAL],
            sagittal=stacks[Plane.SAGITTAL],
            modality=_first_non_empty(
                (img.modality for img in ordered), DEFAULT_SERIES_MODALITY
            ),
            series_description=_first_non_empty(
                (img.series_description for img in ordered),
                DEFAULT_SERIES_DESCRIPTION,
            ),
        )
