"""Tests for record types."""

import dataclasses

import pytest

from dicom_organizer.core.exceptions import NoSeriesFoundError
from dicom_organizer.core.types import (
    BatchOutcome,
    BatchStatistics,
    ImageRecord,
    Plane,
    SeriesGroup,
)


def make_series(images: tuple[ImageRecord, ...]) -> SeriesGroup:
    return SeriesGroup(
        series_id="1.2.3",
        images=images,
        axial=images,
        coronal=images[:1],
        sagittal=(),
        modality="MR",
        series_description="T1 AX",
    )


class TestImageRecord:
    """Test ImageRecord defaults and helpers."""

    def test_defaults(self):
        """Test absent attributes use display defaults."""
        record = ImageRecord(image_key="dicom:a.dcm")

        assert record.instance_number == 0
        assert record.slice_location == 0.0
        assert record.image_position == (0.0, 0.0, 0.0)
        assert record.image_orientation == (1.0, 0.0, 0.0, 0.0, 1.0, 0.0)
        assert record.pixel_spacing == (1.0, 1.0)
        assert record.photometric_interpretation == "MONOCHROME2"
        assert record.bits_allocated == 16
        assert record.samples_per_pixel == 1
        assert record.rescale_slope == 1.0

    def test_frozen(self):
        """Test records cannot be modified."""
        record = ImageRecord(image_key="dicom:a.dcm")
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.slice_location = 5.0

    def test_identity_equality(self):
        """Test equal-valued records are still distinct members."""
        assert ImageRecord(image_key="k") != ImageRecord(image_key="k")

    def test_cosines(self):
        """Test orientation splits into row and column cosines."""
        record = ImageRecord(image_key="k", image_orientation=(0, 1, 0, 0, 0, -1))
        assert record.row_cosines == (0, 1, 0)
        assert record.column_cosines == (0, 0, -1)

    def test_to_dict(self):
        """Test the dict form is JSON-friendly."""
        data = ImageRecord(image_key="dicom:a.dcm", rows=512).to_dict()
        assert data["image_key"] == "dicom:a.dcm"
        assert data["rows"] == 512
        assert data["image_position"] == [0.0, 0.0, 0.0]


class TestSeriesGroup:
    """Test SeriesGroup accessors."""

    def test_plane_accessor(self):
        """Test plane() returns the matching stack."""
        images = (ImageRecord(image_key="dicom:a"), ImageRecord(image_key="dicom:b"))
        group = make_series(images)

        assert group.plane(Plane.AXIAL) is group.axial
        assert group.plane(Plane.CORONAL) is group.coronal
        assert group.plane(Plane.SAGITTAL) == ()
        assert group.slice_count == 2

    def test_to_dict(self):
        """Test the summary lists image keys per plane."""
        images = (ImageRecord(image_key="dicom:a"), ImageRecord(image_key="dicom:b"))
        data = make_series(images).to_dict()

        assert data["series_id"] == "1.2.3"
        assert data["modality"] == "MR"
        assert data["slice_count"] == 2
        assert data["planes"] == {
            "axial": ["dicom:a", "dicom:b"],
            "coronal": ["dicom:a"],
            "sagittal": [],
        }
        assert "images" not in data

    def test_to_dict_with_images(self):
        """Test image records can be embedded."""
        images = (ImageRecord(image_key="dicom:a"),)
        data = make_series(images).to_dict(include_images=True)
        assert [img["image_key"] for img in data["images"]] == ["dicom:a"]


class TestBatchOutcome:
    """Test BatchOutcome."""

    def test_success(self):
        """Test unwrap returns the series list."""
        group = make_series((ImageRecord(image_key="k"),))
        outcome = BatchOutcome(series=(group,))
        assert outcome.succeeded
        assert outcome.unwrap() == [group]

    def test_failure(self):
        """Test unwrap raises the stored error."""
        error = NoSeriesFoundError("none", error_code="NO_SERIES")
        outcome = BatchOutcome(error=error, statistics=BatchStatistics(decoded=0))
        assert not outcome.succeeded
        with pytest.raises(NoSeriesFoundError) as exc_info:
            outcome.unwrap()
        assert exc_info.value is error

    def test_statistics_to_dict(self):
        """Test counters serialize by name."""
        stats = BatchStatistics(entries_total=4, candidates=3, decoded=3, skipped=1)
        assert stats.to_dict() == {
            "entries_total": 4,
            "candidates": 3,
            "decoded": 3,
            "unattributed": 0,
            "skipped": 1,
        }
