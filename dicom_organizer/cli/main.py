"""DICOM Organizer - Command Line Interface

Reads a ZIP archive of DICOM files, organizes it into series and per-plane
slice stacks, and prints a summary of the result.
"""

import argparse
import json
import sys
from pathlib import Path

from tqdm import tqdm

from dicom_organizer import __version__
from dicom_organizer.core.config import get_settings
from dicom_organizer.core.exceptions import BatchProcessingError
from dicom_organizer.core.orchestrator import ArchiveOrchestrator
from dicom_organizer.core.types import BatchOutcome, Plane, SeriesGroup
from dicom_organizer.utils.logger import configure_logging

EXIT_OK = 0
EXIT_BATCH_FAILED = 1
EXIT_BAD_INPUT = 2


def format_file_size(size: int) -> str:
    """Format file size for CLI output.

    Args:
        size: Size in bytes

    Returns:
        Formatted string (e.g., "1.0 MB")

    """
    kb = 1024
    mb = kb * 1024
    gb = mb * 1024

    if size < kb:
        return f"{size} B"
    elif size < mb:
        return f"{size / kb:.1f} KB"
    elif size < gb:
        return f"{size / mb:.1f} MB"
    else:
        return f"{size / gb:.1f} GB"


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="dicom-organizer",
        description="DICOM Organizer - group a ZIP archive of DICOM files into series",
        epilog="Example: %(prog)s study.zip --json",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("archive", help="Path to the ZIP archive to organize")
    parser.add_argument(
        "--json", action="store_true", help="Print the result as JSON"
    )
    parser.add_argument(
        "--images",
        action="store_true",
        help="Include every image record in JSON output",
    )
    parser.add_argument(
        "--no-progress", action="store_true", help="Disable the progress bar"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging output"
    )
    parser.add_argument(
        "--log-file", type=Path, metavar="PATH", help="Also write logs to PATH"
    )
    parser.add_argument(
        "--version", action="version", version=f"DICOM Organizer v{__version__}"
    )
    return parser


def print_summary(series: list[SeriesGroup], outcome: BatchOutcome) -> None:
    """Print a human-readable summary of the organized series."""
    stats = outcome.statistics
    print("\n" + "=" * 70)
    print(f"  {len(series)} series from {stats.entries_total} archive entries")
    print(
        f"  decoded: {stats.decoded}  skipped: {stats.skipped}  "
        f"without series: {stats.unattributed}"
    )
    print("=" * 70)
    for group in series:
        planes = "  ".join(
            f"{plane.value}={len(group.plane(plane))}" for plane in Plane
        )
        print(f"  [+] {group.series_id}")
        print(f"      {group.modality} / {group.series_description}")
        print(f"      slices: {group.slice_count}  {planes}")
    print("=" * 70 + "\n")


def main(argv: list[str] | None = None) -> int:
    """Organize a DICOM ZIP archive and report the resulting series."""
    args = create_parser().parse_args(argv)
    settings = get_settings()

    log_level = "DEBUG" if args.verbose else settings.logging.log_level.value
    configure_logging(
        log_level=log_level,
        json_format=settings.logging.log_format == "json",
        log_file=args.log_file or settings.logging.log_file,
    )

    archive_path = Path(args.archive)
    if not archive_path.is_file():
        print(f"Error: Archive '{archive_path}' not found", file=sys.stderr)
        return EXIT_BAD_INPUT
    try:
        archive_bytes = archive_path.read_bytes()
    except OSError as e:
        print(f"Error: Cannot read '{archive_path}': {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    if not args.json:
        print(f"Organizing {archive_path.name} ({format_file_size(len(archive_bytes))})")

    orchestrator = ArchiveOrchestrator(config=settings.processing)
    run = orchestrator.start(archive_bytes)
    with tqdm(
        total=100,
        unit="%",
        disable=args.no_progress or args.json,
        file=sys.stderr,
    ) as bar:
        for event in run:
            bar.set_description_str(event.message[:60])
            bar.update(event.percent - bar.n)

    outcome = run.outcome
    try:
        series = outcome.unwrap()
    except BatchProcessingError as e:
        if args.json:
            print(
                json.dumps(
                    {
                        "error": e.message,
                        "error_code": e.error_code,
                        "statistics": outcome.statistics.to_dict(),
                    },
                    indent=2,
                )
            )
        else:
            print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_BATCH_FAILED

    if args.json:
        payload = {
            "series": [group.to_dict(include_images=args.images) for group in series],
            "statistics": outcome.statistics.to_dict(),
        }
        print(json.dumps(payload, indent=2))
    else:
        print_summary(series, outcome)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
