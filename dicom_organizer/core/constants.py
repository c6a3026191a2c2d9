"""Shared constants for DICOM archive organization.

Tag numbers, attribute defaults and the fixed geometric tolerance used by
the decoder, the plane classifier and the orchestrator.

References:
- DICOM PS3.10 Section 7.1 (File Preamble and DICM prefix)
- DICOM PS3.3 C.7.6.2 (Image Plane Module)
"""

from __future__ import annotations

from typing import Final

from pydicom.tag import BaseTag, Tag

# =============================================================================
# File Signature
# =============================================================================

#: Length of the file preamble that precedes the magic marker
PREAMBLE_LENGTH: Final[int] = 128

#: Magic marker at bytes 128..132 of a DICOM Part 10 file
DICOM_MAGIC: Final[bytes] = b"DICM"

#: Bounded probe decode stops before the first element past this tag.
#: Any object carrying a series identifier has at least one element at or
#: before it.
PROBE_LAST_TAG: Final[BaseTag] = Tag(0x0020, 0x000E)  # Series Instance UID

# =============================================================================
# Attribute Tags
# =============================================================================

TAG_SERIES_INSTANCE_UID: Final[BaseTag] = Tag(0x0020, 0x000E)
TAG_SERIES_DESCRIPTION: Final[BaseTag] = Tag(0x0008, 0x103E)
TAG_MODALITY: Final[BaseTag] = Tag(0x0008, 0x0060)
TAG_INSTANCE_NUMBER: Final[BaseTag] = Tag(0x0020, 0x0013)
TAG_SLICE_LOCATION: Final[BaseTag] = Tag(0x0020, 0x1041)
TAG_IMAGE_POSITION_PATIENT: Final[BaseTag] = Tag(0x0020, 0x0032)
TAG_IMAGE_ORIENTATION_PATIENT: Final[BaseTag] = Tag(0x0020, 0x0037)
TAG_PIXEL_SPACING: Final[BaseTag] = Tag(0x0028, 0x0030)
TAG_ROWS: Final[BaseTag] = Tag(0x0028, 0x0010)
TAG_COLUMNS: Final[BaseTag] = Tag(0x0028, 0x0011)
TAG_BITS_ALLOCATED: Final[BaseTag] = Tag(0x0028, 0x0100)
TAG_SAMPLES_PER_PIXEL: Final[BaseTag] = Tag(0x0028, 0x0002)
TAG_PHOTOMETRIC_INTERPRETATION: Final[BaseTag] = Tag(0x0028, 0x0004)
TAG_WINDOW_CENTER: Final[BaseTag] = Tag(0x0028, 0x1050)
TAG_WINDOW_WIDTH: Final[BaseTag] = Tag(0x0028, 0x1051)
TAG_RESCALE_INTERCEPT: Final[BaseTag] = Tag(0x0028, 0x1052)
TAG_RESCALE_SLOPE: Final[BaseTag] = Tag(0x0028, 0x1053)

# =============================================================================
# Attribute Defaults
# =============================================================================

DEFAULT_INSTANCE_NUMBER: Final[int] = 0
DEFAULT_SLICE_LOCATION: Final[float] = 0.0
DEFAULT_IMAGE_POSITION: Final[tuple[float, float, float]] = (0.0, 0.0, 0.0)
DEFAULT_IMAGE_ORIENTATION: Final[tuple[float, ...]] = (1.0, 0.0, 0.0, 0.0, 1.0, 0.0)
DEFAULT_PIXEL_SPACING: Final[tuple[float, float]] = (1.0, 1.0)
DEFAULT_ROWS: Final[int] = 0
DEFAULT_COLUMNS: Final[int] = 0
DEFAULT_BITS_ALLOCATED: Final[int] = 16
DEFAULT_SAMPLES_PER_PIXEL: Final[int] = 1
DEFAULT_PHOTOMETRIC_INTERPRETATION: Final[str] = "MONOCHROME2"
DEFAULT_WINDOW_CENTER: Final[float] = 0.0
DEFAULT_WINDOW_WIDTH: Final[float] = 0.0
DEFAULT_RESCALE_INTERCEPT: Final[float] = 0.0
DEFAULT_RESCALE_SLOPE: Final[float] = 1.0

DEFAULT_SERIES_MODALITY: Final[str] = "CT"
DEFAULT_SERIES_DESCRIPTION: Final[str] = "DICOM Series"

#: Prefix of every image key handed to the rendering collaborator
IMAGE_KEY_SCHEME: Final[str] = "dicom:"

# =============================================================================
# Plane Classification
# =============================================================================

#: A normal component within this distance of 1 counts as aligned with its axis
PLANE_TOLERANCE: Final[float] = 0.1

#: Normal used when row and column cosines are parallel or degenerate
DEFAULT_SLICE_NORMAL: Final[tuple[float, float, float]] = (0.0, 0.0, 1.0)

# =============================================================================
# Progress Stages (percent)
# =============================================================================

PROGRESS_START: Final[float] = 0.0
PROGRESS_ARCHIVE_LOADING: Final[float] = 10.0
PROGRESS_ENTRIES_FOUND: Final[float] = 20.0
PROGRESS_ENTRY_SPAN: Final[float] = 60.0
PROGRESS_ASSEMBLING: Final[float] = 85.0
PROGRESS_DONE: Final[float] = 100.0
