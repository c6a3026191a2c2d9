"""Custom exceptions for DICOM archive organization.

Entry-level failures (``DecodeError``) are absorbed by the orchestrator and
turn into skipped entries. Batch-level failures (``BatchProcessingError`` and
its subclasses) are the only errors that reach the caller of a run.
"""

from typing import Any


class DicomOrganizerError(Exception):
    """Base exception for DICOM organizer operations.

    Attributes:
        message: Human-readable error description
        error_code: Optional error code for categorization
        context: Additional context information

    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}


class DecodeError(DicomOrganizerError):
    """Raised when a buffer cannot be decoded as a DICOM image object."""

    pass


class BatchProcessingError(DicomOrganizerError):
    """Raised when a whole archive run fails."""

    pass


class ArchiveError(BatchProcessingError):
    """Raised when the archive container cannot be opened."""

    pass


class NoSeriesFoundError(BatchProcessingError):
    """Raised when no series could be assembled from an archive."""

    pass
