"""DICOM attribute decoding for archive entries.

Decodes a byte buffer believed to hold one DICOM image object into a flat
``ImageRecord``. Optional attributes never make decoding fail: a missing
tag, a multi-valued tag with too few components, or a value that does not
convert to a finite number all resolve to the documented default. Only a
buffer that cannot be decoded at all raises ``DecodeError``.
"""

import math
from collections.abc import Callable
from io import BytesIO
from typing import Any, TypeVar

import pydicom
from pydicom.dataset import Dataset
from pydicom.multival import MultiValue
from pydicom.tag import BaseTag

from dicom_organizer.utils.logger import get_logger

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
    DEFAULT_SLICE_LOCATION,
    DEFAULT_WINDOW_CENTER,
    DEFAULT_WINDOW_WIDTH,
    IMAGE_KEY_SCHEME,
    TAG_BITS_ALLOCATED,
    TAG_COLUMNS,
    TAG_IMAGE_ORIENTATION_PATIENT,
    TAG_IMAGE_POSITION_PATIENT,
    TAG_INSTANCE_NUMBER,
    TAG_MODALITY,
    TAG_PHOTOMETRIC_INTERPRETATION,
    TAG_PIXEL_SPACING,
    TAG_RESCALE_INTERCEPT,
    TAG_RESCALE_SLOPE,
    TAG_ROWS,
    TAG_SAMPLES_PER_PIXEL,
    TAG_SERIES_DESCRIPTION,
    TAG_SERIES_INSTANCE_UID,
    TAG_SLICE_LOCATION,
    TAG_WINDOW_CENTER,
    TAG_WINDOW_WIDTH,
)
from .exceptions import DecodeError
from .types import ImageRecord

logger = get_logger(__name__)

T = TypeVar("T")


def make_image_key(display_name: str) -> str:
    """Build the image key the rendering collaborator resolves through the cache."""
    return f"{IMAGE_KEY_SCHEME}{display_name}"


def _element_values(dataset: Dataset, tag: BaseTag) -> list[Any]:
    """Return the values of ``tag`` as a list (empty when absent)."""
    if tag not in dataset:
        return []
    value = dataset[tag].value
    if value is None or value == "" or value == b"":
        return []
    if isinstance(value, (MultiValue, list, tuple)):
        return list(value)
    return [value]


def _to_float(value: Any) -> float:
    result = float(value)
    if not math.isfinite(result):
        raise ValueError(f"non-finite value {value!r}")
    return result


def _to_int(value: Any) -> int:
    if isinstance(value, bytes):
        value = value.decode("ascii").strip()
    return int(value)


class AttributeDecoder:
    """Decode DICOM byte buffers into ``ImageRecord`` values.

    The decoder is stateless; a single instance can be shared across runs.

    Example:
        >>> decoder = AttributeDecoder()
        >>> record = decoder.decode(data, "slice_001.dcm")
        >>> record.image_key
        'dicom:slice_001.dcm'

    """

    def decode(self, data: bytes, display_name: str) -> ImageRecord:
        """Fully decode ``data`` and extract the display attribute set.

        Args:
            data: Raw bytes of one archive entry
            display_name: Name the image key is derived from (entry basename)

        Returns:
            Decoded image record with defaults applied

        Raises:
            DecodeError: If the buffer cannot be decoded as a DICOM object

        """
        dataset = self._read_dataset(data, display_name)

        return ImageRecord(
            image_key=make_image_key(display_name),
            instance_number=self._read_scalar(
                dataset, TAG_INSTANCE_NUMBER, _to_int, DEFAULT_INSTANCE_NUMBER
            ),
            slice_location=self._read_scalar(
                dataset, TAG_SLICE_LOCATION, _to_float, DEFAULT_SLICE_LOCATION
            ),
            image_position=self._read_vector(
                dataset, TAG_IMAGE_POSITION_PATIENT, 3, DEFAULT_IMAGE_POSITION
            ),
            image_orientation=self._read_vector(
                dataset, TAG_IMAGE_ORIENTATION_PATIENT, 6, DEFAULT_IMAGE_ORIENTATION
            ),
            pixel_spacing=self._read_vector(
                dataset, TAG_PIXEL_SPACING, 2, DEFAULT_PIXEL_SPACING
            ),
            rows=self._read_scalar(dataset, TAG_ROWS, _to_int, DEFAULT_ROWS),
            columns=self._read_scalar(dataset, TAG_COLUMNS, _to_int, DEFAULT_COLUMNS),
            bits_allocated=self._read_scalar(
                dataset, TAG_BITS_ALLOCATED, _to_int, DEFAULT_BITS_ALLOCATED
            ),
            samples_per_pixel=self._read_scalar(
                dataset, TAG_SAMPLES_PER_PIXEL, _to_int, DEFAULT_SAMPLES_PER_PIXEL
            ),
            photometric_interpretation=self._read_string(
                dataset,
                TAG_PHOTOMETRIC_INTERPRETATION,
                DEFAULT_PHOTOMETRIC_INTERPRETATION,
            ),
            window_center=self._read_scalar(
                dataset, TAG_WINDOW_CENTER, _to_float, DEFAULT_WINDOW_CENTER
            ),
            window_width=self._read_scalar(
                dataset, TAG_WINDOW_WIDTH, _to_float, DEFAULT_WINDOW_WIDTH
            ),
            rescale_intercept=self._read_scalar(
                dataset, TAG_RESCALE_INTERCEPT, _to_float, DEFAULT_RESCALE_INTERCEPT
            ),
            rescale_slope=self._read_scalar(
                dataset, TAG_RESCALE_SLOPE, _to_float, DEFAULT_RESCALE_SLOPE
            ),
            modality=self._read_string(dataset, TAG_MODALITY, ""),
            series_description=self._read_string(dataset, TAG_SERIES_DESCRIPTION, ""),
        )

    def read_series_id(self, data: bytes) -> str | None:
        """Extract only the Series Instance UID from ``data``.

        This is an independent decode; it can come back empty even when
        :meth:`decode` succeeds on the same buffer.

        Returns:
            The series identifier, or None when absent or undecodable

        """
        try:
            dataset = pydicom.dcmread(
                BytesIO(data),
                force=True,
                stop_before_pixels=True,
                specific_tags=[TAG_SERIES_INSTANCE_UID],
            )
            values = _element_values(dataset, TAG_SERIES_INSTANCE_UID)
        except Exception as e:
            logger.debug("series_id_decode_failed", error=str(e))
            return None

        if not values:
            return None
        series_id = str(values[0]).strip().rstrip("\x00")
        return series_id or None

    def _read_dataset(self, data: bytes, display_name: str) -> Dataset:
        try:
            # force=True accepts files without the preamble and DICM marker
            dataset = pydicom.dcmread(BytesIO(data), force=True)
        except Exception as e:
            raise DecodeError(
                f"Failed to decode DICOM object {display_name}: {e}",
                error_code="DECODE_FAILED",
                context={"display_name": display_name},
            ) from e

        if len(dataset) == 0:
            raise DecodeError(
                f"No data elements decoded from {display_name}",
                error_code="EMPTY_DATASET",
                context={"display_name": display_name},
            )
        return dataset

    def _read_scalar(
        self,
        dataset: Dataset,
        tag: BaseTag,
        convert: Callable[[Any], T],
        default: T,
    ) -> T:
        """Read the first value of ``tag``, falling back to ``default``."""
        try:
            values = _element_values(dataset, tag)
            if not values:
                return default
            return convert(values[0])
        except Exception as e:
            logger.debug("attribute_default_applied", tag=str(tag), reason=str(e))
            return default

    def _read_vector(
        self,
        dataset: Dataset,
        tag: BaseTag,
        count: int,
        default: tuple[float, ...],
    ) -> Any:
        """Read the first ``count`` components of ``tag``.

        Fewer than ``count`` components, or any component that is not a
        finite number, yields ``default`` for the whole attribute.
        """
        try:
            values = _element_values(dataset, tag)
            if len(values) < count:
                return default
            return tuple(_to_float(v) for v in values[:count])
        except Exception as e:
            logger.debug("attribute_default_applied", tag=str(tag), reason=str(e))
            return default

    def _read_string(self, dataset: Dataset, tag: BaseTag, default: str) -> str:
        try:
            values = _element_values(dataset, tag)
            if not values:
                return default
            text = str(values[0]).strip()
            return text or default
        except Exception as e:
            logger.debug("attribute_default_applied", tag=str(tag), reason=str(e))
            return default
