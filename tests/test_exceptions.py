"""Tests for custom exception classes."""

import pytest

from dicom_organizer.core.exceptions import (
    ArchiveError,
    BatchProcessingError,
    DecodeError,
    DicomOrganizerError,
    NoSeriesFoundError,
)


class TestDicomOrganizerError:
    """Test base DicomOrganizerError exception class."""

    def test_basic_initialization(self):
        """Test creating exception with just a message."""
        error = DicomOrganizerError("Test error message")

        assert str(error) == "Test error message"
        assert error.message == "Test error message"
        assert error.error_code is None
        assert error.context == {}

    def test_initialization_with_all_parameters(self):
        """Test creating exception with error code and context."""
        error = DicomOrganizerError(
            "Archive failed", error_code="ERR002", context={"entries": 3}
        )

        assert error.error_code == "ERR002"
        assert error.context == {"entries": 3}

    def test_context_not_shared(self):
        """Test default contexts are independent dicts."""
        first = DicomOrganizerError("a")
        second = DicomOrganizerError("b")
        first.context["key"] = "value"
        assert second.context == {}


class TestHierarchy:
    """Test the exception hierarchy."""

    @pytest.mark.parametrize(
        "exc_class",
        [DecodeError, BatchProcessingError, ArchiveError, NoSeriesFoundError],
    )
    def test_subclasses_base(self, exc_class):
        """Test every error derives from the package base error."""
        assert issubclass(exc_class, DicomOrganizerError)

    @pytest.mark.parametrize("exc_class", [ArchiveError, NoSeriesFoundError])
    def test_batch_level_errors(self, exc_class):
        """Test batch-level errors are catchable as BatchProcessingError."""
        with pytest.raises(BatchProcessingError):
            raise exc_class("batch failed", error_code="X")

    def test_decode_error_is_not_batch_level(self):
        """Test entry-level decode errors stay separate from batch errors."""
        assert not issubclass(DecodeError, BatchProcessingError)
