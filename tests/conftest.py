"""
Pytest configuration and shared fixtures for DICOM-Organizer tests.
"""

import zipfile
from collections.abc import Callable, Iterable
from io import BytesIO

import pydicom
import pytest
from pydicom.dataset import Dataset, FileMetaDataset
from pydicom.uid import CTImageStorage, ExplicitVRLittleEndian, generate_uid

AXIAL = (1.0, 0.0, 0.0, 0.0, 1.0, 0.0)


def build_dicom_bytes(
    series_uid: str | None = "1.2.826.0.1.3680043.8.498.1",
    position: Iterable[float] | None = (0.0, 0.0, 0.0),
    orientation: Iterable[float] | None = AXIAL,
    slice_location: float | None = None,
    instance_number: int | None = 1,
    part10: bool = True,
    pixel_bytes: int = 32,
    configure: Callable[[Dataset], None] | None = None,
) -> bytes:
    """Build a small CT image object and return its encoded bytes.

    Args:
        series_uid: SeriesInstanceUID, or None to omit the tag
        position: ImagePositionPatient, or None to omit
        orientation: ImageOrientationPatient, or None to omit
        slice_location: SliceLocation, or None to omit
        instance_number: InstanceNumber, or None to omit
        part10: Write preamble, DICM marker and file meta (False gives a
            headerless implicit VR little endian stream)
        pixel_bytes: Size of the PixelData element
        configure: Optional hook to modify the dataset before encoding

    """
    ds = Dataset()
    ds.SOPClassUID = CTImageStorage
    ds.SOPInstanceUID = generate_uid()
    ds.StudyInstanceUID = generate_uid()
    ds.Modality = "CT"
    ds.PatientName = "Test^Patient"
    ds.PatientID = "TEST123"
    if series_uid is not None:
        ds.SeriesInstanceUID = series_uid
    if instance_number is not None:
        ds.InstanceNumber = instance_number
    if position is not None:
        ds.ImagePositionPatient = [float(v) for v in position]
    if orientation is not None:
        ds.ImageOrientationPatient = [float(v) for v in orientation]
    if slice_location is not None:
        ds.SliceLocation = float(slice_location)
    ds.PixelSpacing = [0.5, 0.75]
    ds.Rows = 4
    ds.Columns = 4
    ds.BitsAllocated = 16
    ds.BitsStored = 12
    ds.HighBit = 11
    ds.PixelRepresentation = 0
    ds.SamplesPerPixel = 1
    ds.PhotometricInterpretation = "MONOCHROME2"
    ds.WindowCenter = 40
    ds.WindowWidth = 400
    ds.RescaleIntercept = -1024
    ds.RescaleSlope = 1
    ds.PixelData = b"\x00" * pixel_bytes

    if configure is not None:
        configure(ds)

    buffer = BytesIO()
    if part10:
        file_meta = FileMetaDataset()
        file_meta.MediaStorageSOPClassUID = ds.SOPClassUID
        file_meta.MediaStorageSOPInstanceUID = ds.SOPInstanceUID
        file_meta.TransferSyntaxUID = ExplicitVRLittleEndian
        ds.file_meta = file_meta
        pydicom.dcmwrite(buffer, ds, enforce_file_format=True)
    else:
        pydicom.dcmwrite(buffer, ds, implicit_vr=True, little_endian=True)
    return buffer.getvalue()


def build_zip_bytes(
    entries: dict[str, bytes], directories: Iterable[str] = ()
) -> bytes:
    """Pack ``entries`` (archive path to bytes) into an in-memory ZIP."""
    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for directory in directories:
            zf.writestr(directory.rstrip("/") + "/", b"")
        for name, data in entries.items():
            zf.writestr(name, data)
    return buffer.getvalue()


@pytest.fixture
def make_dicom() -> Callable[..., bytes]:
    """Factory fixture returning encoded DICOM bytes (see ``build_dicom_bytes``)."""
    return build_dicom_bytes


@pytest.fixture
def make_zip() -> Callable[..., bytes]:
    """Factory fixture returning an in-memory ZIP archive."""
    return build_zip_bytes


@pytest.fixture
def axial_series_zip(make_dicom, make_zip) -> bytes:
    """Three axial slices of one series at z = 20, 0, 10 in archive order."""
    entries = {}
    for z in (20.0, 0.0, 10.0):
        entries[f"study/series1/slice_{int(z):03d}.dcm"] = make_dicom(
            position=(0.0, 0.0, z), slice_location=z, instance_number=int(z // 10) + 1
        )
    entries["study/README.txt"] = b"Exported by a workstation.\n" * 4
    return make_zip(entries, directories=["study", "study/series1"])


@pytest.fixture
def reset_structlog():
    """Reset structlog configuration after each test."""
    import structlog

    yield

    structlog.reset_defaults()


@pytest.fixture
def capture_logs(reset_structlog):
    """Capture log output for testing.

    Returns:
        List that will contain captured log entries
    """
    import logging

    import structlog

    captured = []

    def capture_processor(logger, method_name, event_dict):
        """Capture event dict before rendering."""
        captured.append(event_dict.copy())
        return event_dict

    logging.basicConfig(level=logging.DEBUG)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            capture_processor,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    yield captured

    captured.clear()
