"""Archive Orchestration - ZIP archive to ordered DICOM series.

Drives one processing run over an in-memory ZIP archive:

    archive entries -> candidate filter -> attribute decoder
                    -> (series id, image record) -> series assembler

A run is a synchronous generator of ``ProgressEvent`` values. The series
list (or the batch-level error) is delivered separately as the run's
``BatchOutcome`` once every entry has been processed. Entries are handled
strictly in archive order, one at a time; a started run always runs to
completion.

Failure policy:
- Entry-level problems (rejected by the candidate filter, oversized, corrupt
  in the archive, undecodable, no series identifier) are logged and skipped.
- Batch-level problems (archive cannot be opened, zero series assembled)
  end the run with a single ``BatchProcessingError`` in the outcome.
"""

import zipfile
from collections.abc import Callable, Generator, Iterator
from io import BytesIO
from pathlib import PurePosixPath

from dicom_organizer.utils.logger import get_logger

from .byte_cache import ByteCache
from .candidate_filter import is_candidate
from .config import ProcessingConfig
from .constants import (
    PROGRESS_ARCHIVE_LOADING,
    PROGRESS_ASSEMBLING,
    PROGRESS_DONE,
    PROGRESS_ENTRIES_FOUND,
    PROGRESS_ENTRY_SPAN,
    PROGRESS_START,
)
from .decoder import AttributeDecoder
from .exceptions import ArchiveError, DecodeError, NoSeriesFoundError
from .series_assembler import SeriesAssembler
from .types import (
    BatchOutcome,
    BatchStatistics,
    ImageRecord,
    ProgressEvent,
    SeriesGroup,
)

logger = get_logger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]
RunSteps = Generator[ProgressEvent, None, BatchOutcome]


def entry_basename(filename: str) -> str:
    """Return the last path component of an archive member name."""
    return PurePosixPath(filename).name or filename


class ProcessingRun:
    """A single pass over one archive.

    Iterating yields progress events; :attr:`outcome` holds the terminal
    result. Reading the outcome before iteration finishes drives the rest
    of the run to completion first.

    Example:
        >>> run = orchestrator.start(archive_bytes)
        >>> for event in run:
        ...     print(f"{event.percent:5.1f}% {event.message}")
        >>> series = run.result()

    """

    def __init__(self, steps: RunSteps) -> None:
        self._steps = steps
        self._outcome: BatchOutcome | None = None
        self._failure: Exception | None = None

    def __iter__(self) -> Iterator[ProgressEvent]:
        return self

    def __next__(self) -> ProgressEvent:
        if self._outcome is not None:
            raise StopIteration
        if self._failure is not None:
            raise self._failure
        try:
            return next(self._steps)
        except StopIteration as stop:
            self._outcome = stop.value
            raise StopIteration from None
        except Exception as e:
            self._failure = e
            raise

    @property
    def outcome(self) -> BatchOutcome:
        """Terminal result of the run.

        Raises:
            RuntimeError: If the run was refused because another run on the
                same orchestrator was still in progress

        """
        if self._outcome is None:
            for _ in self:
                pass
        return self._outcome

    def result(self) -> list[SeriesGroup]:
        """Return the series list or raise the batch-level error.

        Raises:
            BatchProcessingError: If the archive could not be opened or no
                series were assembled
            RuntimeError: If the run was refused (see :attr:`outcome`)

        """
        return self.outcome.unwrap()


class ArchiveOrchestrator:
    """Turn a ZIP archive of candidate files into display-ready series.

    The orchestrator owns the byte cache shared with the rendering side and
    clears it at the start of every run.

    Attributes:
        cache: Byte store populated with every accepted entry
        decoder: Attribute decoder for accepted entries
        assembler: Series assembler run after the entry loop
        config: Processing limits

    """

    def __init__(
        self,
        cache: ByteCache | None = None,
        decoder: AttributeDecoder | None = None,
        assembler: SeriesAssembler | None = None,
        config: ProcessingConfig | None = None,
        candidate_filter: Callable[[bytes], bool] = is_candidate,
    ) -> None:
        self.cache = cache if cache is not None else ByteCache()
        self.decoder = decoder or AttributeDecoder()
        self.assembler = assembler or SeriesAssembler()
        self.config = config or ProcessingConfig()
        self.candidate_filter = candidate_filter
        self._running = False
        self._last_outcome: BatchOutcome | None = None

    @property
    def last_outcome(self) -> BatchOutcome | None:
        """Outcome of the most recently completed run."""
        return self._last_outcome

    def start(self, archive_bytes: bytes) -> ProcessingRun:
        """Create a run over ``archive_bytes``; nothing happens until it is iterated."""
        return ProcessingRun(self._execute(archive_bytes))

    def process(
        self, archive_bytes: bytes, on_progress: ProgressCallback | None = None
    ) -> list[SeriesGroup]:
        """Process an archive to completion.

        Args:
            archive_bytes: Raw bytes of a ZIP archive
            on_progress: Optional callback receiving every progress event

        Returns:
            Non-empty list of series, in order of first appearance

        Raises:
            ArchiveError: If the archive cannot be opened
            NoSeriesFoundError: If no series could be assembled

        """
        run = self.start(archive_bytes)
        for event in run:
            if on_progress is not None:
                on_progress(event)
        return run.result()

    def reset(self) -> None:
        """Discard the cached bytes and the last outcome."""
        self.cache.clear()
        self._last_outcome = None

    def _execute(self, archive_bytes: bytes) -> RunSteps:
        if self._running:
            raise RuntimeError(
                "Another archive run is still in progress; finish it with result() first"
            )
        self._running = True
        try:
            outcome = yield from self._run_steps(archive_bytes)
        finally:
            self._running = False
        self._last_outcome = outcome
        return outcome

    def _run_steps(self, archive_bytes: bytes) -> RunSteps:
        stats = BatchStatistics()
        self.cache.clear()
        self._last_outcome = None

        yield ProgressEvent(PROGRESS_START, "")
        logger.info("run_started", archive_size=len(archive_bytes))

        yield ProgressEvent(PROGRESS_ARCHIVE_LOADING, "Loading ZIP file...")
        try:
            archive = zipfile.ZipFile(BytesIO(archive_bytes))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, ValueError) as e:
            logger.error("archive_open_failed", error=str(e))
            error = ArchiveError(
                f"Failed to open ZIP archive: {e}",
                error_code="ARCHIVE_UNREADABLE",
                context={"archive_size": len(archive_bytes)},
            )
            return BatchOutcome(error=error, statistics=stats)

        members: list[tuple[str, ImageRecord]] = []
        with archive:
            entries = [info for info in archive.infolist() if not info.is_dir()]
            stats.entries_total = len(entries)
            yield ProgressEvent(
                PROGRESS_ENTRIES_FOUND, f"Found {len(entries)} files in ZIP"
            )

            for index, info in enumerate(entries):
                percent = PROGRESS_ENTRIES_FOUND + (
                    index / len(entries) * PROGRESS_ENTRY_SPAN
                )
                yield ProgressEvent(percent, f"Processing {info.filename}...")

                if index >= self.config.max_entries:
                    stats.skipped += 1
                    logger.warning(
                        "entry_skipped", entry=info.filename, reason="max_entries"
                    )
                    continue

                try:
                    member = self._process_entry(archive, info, stats)
                except Exception as e:
                    stats.skipped += 1
                    logger.warning(
                        "entry_skipped", entry=info.filename, reason=str(e)
                    )
                    continue
                if member is not None:
                    members.append(member)

        yield ProgressEvent(
            PROGRESS_ASSEMBLING, f"Organizing series... ({stats.decoded} DICOM files)"
        )
        series = self.assembler.assemble(members)

        yield ProgressEvent(
            PROGRESS_DONE, f"Successfully processed {len(series)} series"
        )
        logger.info("run_finished", series=len(series), **stats.to_dict())

        if not series:
            error = NoSeriesFoundError(
                "No valid DICOM files found in the ZIP archive",
                error_code="NO_SERIES",
                context=stats.to_dict(),
            )
            logger.error("no_series_found", **stats.to_dict())
            return BatchOutcome(error=error, statistics=stats)

        return BatchOutcome(series=tuple(series), statistics=stats)

    def _process_entry(
        self, archive: zipfile.ZipFile, info: zipfile.ZipInfo, stats: BatchStatistics
    ) -> tuple[str, ImageRecord] | None:
        """Filter, cache and decode one archive entry.

        Returns:
            ``(series_id, record)`` for images attributable to a series,
            otherwise None

        """
        if info.file_size > self.config.max_entry_size_bytes:
            stats.skipped += 1
            logger.warning(
                "entry_skipped",
                entry=info.filename,
                reason="too_large",
                size_bytes=info.file_size,
            )
            return None

        data = archive.read(info)
        if not self.candidate_filter(data):
            stats.skipped += 1
            logger.debug("entry_rejected", entry=info.filename)
            return None
        stats.candidates += 1

        display_name = entry_basename(info.filename)
        self.cache.store(info.filename, data)
        if display_name != info.filename:
            self.cache.store(display_name, data)

        try:
            record = self.decoder.decode(data, display_name)
        except DecodeError as e:
            stats.skipped += 1
            logger.warning(
                "entry_skipped",
                entry=info.filename,
                reason=e.message,
                error_code=e.error_code,
            )
            return None
        stats.decoded += 1

        series_id = self.decoder.read_series_id(data)
        if series_id is None:
            stats.unattributed += 1
            logger.warning("image_without_series", entry=info.filename)
            return None

        return series_id, record
