"""Cheap pre-check deciding whether an archive entry is worth decoding.

Two independent checks, either one sufficient:

1. Signature: the buffer carries the ``DICM`` marker at bytes 128..132.
2. Structural probe: a bounded decode that stops after ``PROBE_LAST_TAG``
   (Series Instance UID) completes and yields at least one data element.
   This admits headerless (legacy, no preamble) objects, including ones
   without an identifying group 0008 header, at the cost of a small
   false-positive rate. Printable text starts with a group of at least
   0x2020 and so yields nothing.
"""

from io import BytesIO

from pydicom.filereader import read_partial
from pydicom.tag import BaseTag

from dicom_organizer.utils.logger import get_logger

from .constants import DICOM_MAGIC, PREAMBLE_LENGTH, PROBE_LAST_TAG

logger = get_logger(__name__)

_MAGIC_END = PREAMBLE_LENGTH + len(DICOM_MAGIC)


def has_dicom_signature(data: bytes) -> bool:
    """Check for the Part 10 magic marker after the 128-byte preamble."""
    return len(data) > _MAGIC_END and data[PREAMBLE_LENGTH:_MAGIC_END] == DICOM_MAGIC


def _stop_past_series_id(tag: BaseTag, vr: str | None, length: int) -> bool:
    return tag > PROBE_LAST_TAG


def probe_structure(data: bytes) -> bool:
    """Attempt a bounded decode of the leading elements of ``data``.

    Returns:
        True if the partial decode finished without error and produced at
        least one file meta or dataset element

    """
    try:
        dataset = read_partial(
            BytesIO(data), stop_when=_stop_past_series_id, force=True
        )
    except Exception as e:
        logger.debug("structural_probe_failed", error=str(e))
        return False

    file_meta = getattr(dataset, "file_meta", None)
    return len(dataset) > 0 or bool(file_meta)


def is_candidate(data: bytes) -> bool:
    """Decide whether ``data`` should be fully processed.

    Example:
        >>> is_candidate(b"\\x00" * 128 + b"DICM" + meta_and_dataset)
        True
        >>> is_candidate(b"plain text notes")
        False

    """
    if has_dicom_signature(data):
        return True
    return probe_structure(data)
