"""
DICOM Organizer - turn a ZIP archive of DICOM files into display-ready series.

Identifies the DICOM image objects in an archive, decodes the geometric and
radiometric attributes needed for display, classifies every slice into the
axial, coronal or sagittal plane, and orders slices into per-series,
per-plane stacks.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from dicom_organizer.core.byte_cache import ByteCache
from dicom_organizer.core.exceptions import (
    ArchiveError,
    BatchProcessingError,
    DecodeError,
    DicomOrganizerError,
    NoSeriesFoundError,
)
from dicom_organizer.core.orchestrator import ArchiveOrchestrator
from dicom_organizer.core.plane_classifier import classify
from dicom_organizer.core.series_assembler import SeriesAssembler
from dicom_organizer.core.types import ImageRecord, Plane, ProgressEvent, SeriesGroup

__all__ = [
    "__version__",
    "__license__",
    "ArchiveError",
    "ArchiveOrchestrator",
    "BatchProcessingError",
    "ByteCache",
    "DecodeError",
    "DicomOrganizerError",
    "ImageRecord",
    "NoSeriesFoundError",
    "Plane",
    "ProgressEvent",
    "SeriesAssembler",
    "SeriesGroup",
    "classify",
]
