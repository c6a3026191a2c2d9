"""Core components: candidate filtering, decoding, plane classification,
series assembly and archive orchestration."""

from .byte_cache import ByteCache
from .candidate_filter import is_candidate
from .decoder import AttributeDecoder, make_image_key
from .exceptions import (
    ArchiveError,
    BatchProcessingError,
    DecodeError,
    DicomOrganizerError,
    NoSeriesFoundError,
)
from .orchestrator import ArchiveOrchestrator, ProcessingRun
from .plane_classifier import classify, slice_normal
from .series_assembler import SeriesAssembler
from .types import (
    BatchOutcome,
    BatchStatistics,
    ImageRecord,
    Plane,
    ProgressEvent,
    SeriesGroup,
)

__all__ = [
    "ArchiveError",
    "ArchiveOrchestrator",
    "AttributeDecoder",
    "BatchOutcome",
    "BatchProcessingError",
    "BatchStatistics",
    "ByteCache",
    "DecodeError",
    "DicomOrganizerError",
    "ImageRecord",
    "NoSeriesFoundError",
    "Plane",
    "ProcessingRun",
    "ProgressEvent",
    "SeriesAssembler",
    "SeriesGroup",
    "classify",
    "is_candidate",
    "make_image_key",
    "slice_normal",
]
