"""Dataset import script for AppleVerse.

Replaces the apple catalogue with the contents of one dataset file.

Usage:
    appleverse-import                       # find the dataset in the data directory
    appleverse-import data/final_dataset.xlsx
    appleverse-import FILE --batch-size 100 --no-images
    appleverse-import FILE --dry-run        # read and match only, no database writes
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from appleverse.config import settings
from appleverse.database import close_db, init_db
from appleverse.models import Apple, DatasetGeneration
from appleverse.services.import_service import (
    BulkImporter,
    DatasetImportError,
    ImportReport,
    find_dataset_file,
)
from appleverse.services.import_service.constants import MAX_REPORTED_ERRORS

logger = logging.getLogger(__name__)


def _print_progress(done: int, total: int) -> None:
    print(f"  Inserted {done}/{total} records", flush=True)


def resolve_dataset_path(path: Path | None, data_dir: Path) -> Path | None:
    """Return the dataset file to import, searching the data directory if needed."""
    if path is not None:
        return path
    return find_dataset_file(data_dir, settings.dataset_file_names)


def _print_missing_dataset(data_dir: Path) -> None:
    print(f"Error: No dataset file found in {data_dir}")
    print("Expected a file named like FINAL_DATASET_APPLEVERSE.xlsx")
    if data_dir.is_dir():
        files = sorted(p.name for p in data_dir.iterdir() if p.is_file())
        if files:
            print("Files in data directory:")
            for name in files:
                print(f"  - {name}")


async def print_summary(report: ImportReport) -> None:
    """Print the result of an import run."""
    print()
    print("Import Summary")
    print("=" * 50)
    print(f"Source file:   {report.source_file}")
    print(f"Generation:    {report.generation}")
    print(f"Imported:      {report.imported}")
    print(f"Skipped:       {report.skipped} (no cultivar name)")
    print(f"Errors:        {report.failed}")
    print(f"With images:   {report.records_with_images}")

    if report.errors:
        print()
        print(f"First {min(len(report.errors), MAX_REPORTED_ERRORS)} errors:")
        for error in report.errors[:MAX_REPORTED_ERRORS]:
            print(f"  {error}")

    active = await DatasetGeneration.get_active()
    total = await Apple.find(Apple.generation == active.generation).count() if active else 0
    print()
    print(f"Total in database: {total}")
    print(f"Time:              {report.elapsed_seconds:.2f}s")
    print(f"Average:           {report.records_per_second:.1f} records/s")

    if report.activated:
        sample = await Apple.find(Apple.generation == report.generation).sort("+source_row_index").first_or_none()
        if sample is not None:
            print()
            print("Sample record:")
            print(f"  Row:       {sample.source_row_index}")
            print(f"  Accession: {sample.accession_code}")
            print(f"  Cultivar:  {sample.cultivar_name}")
            print(f"  Name:      {sample.full_name}")
            print(f"  Origin:    {', '.join(p for p in (sample.city, sample.province, sample.country) if p)}")
            print(f"  Images:    {len(sample.images)}")
            print(f"  Metadata:  {len(sample.metadata)} columns")


async def import_dataset(
    path: Path | None = None,
    data_dir: Path | None = None,
    batch_size: int | None = None,
    use_images: bool = True,
    dry_run: bool = False,
    skip_db_init: bool = False,
) -> int:
    """Run a full dataset replacement.

    Args:
        path: Dataset file. Searched for in the data directory when omitted.
        data_dir: Data directory (defaults to settings).
        batch_size: Records inserted concurrently per batch (defaults to settings).
        use_images: Match images from the image directories.
        dry_run: Read, normalize and match without writing to the database.
        skip_db_init: Use an already initialized database (for tests).

    Returns:
        Exit code (0 for success, 1 for errors).
    """
    data_dir = Path(data_dir) if data_dir is not None else settings.data_dir
    dataset_path = resolve_dataset_path(Path(path) if path is not None else None, data_dir)
    if dataset_path is None:
        _print_missing_dataset(data_dir)
        return 1
    if not dataset_path.is_file():
        print(f"Error: Dataset file not found: {dataset_path}")
        return 1

    image_sources = []
    if use_images:
        image_sources = [(settings.images_dir, "/images"), (data_dir, "/data")]

    importer = BulkImporter(
        batch_size=batch_size or settings.import_batch_size,
        image_sources=image_sources,
        priority_sheets=settings.priority_sheets,
        progress=_print_progress,
    )

    print("\nAppleVerse Dataset Import")
    print("=" * 50)
    print(f"File:       {dataset_path}")
    print(f"Batch size: {importer.batch_size}")
    print(f"Images:     {'enabled' if use_images else 'disabled'}")
    print()

    if dry_run:
        try:
            records, total_rows, summary = importer.prepare(dataset_path)
        except DatasetImportError as e:
            print(f"Error: {e}")
            return 1
        print("[DRY RUN] Would import:")
        print(f"  - {len(records)} records ({total_rows - len(records)} skipped)")
        print(f"  - {summary.records_with_images} records with images")
        return 0

    if not skip_db_init:
        await init_db()

    try:
        report = await importer.run(dataset_path)
        await print_summary(report)
    except DatasetImportError as e:
        print(f"Error: {e}")
        return 1
    finally:
        if not skip_db_init:
            await close_db()

    if report.imported == 0:
        print("\nError: No records were imported; the previous dataset is still active")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the dataset import script.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(
        description="Replace the AppleVerse catalogue with a dataset file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "file",
        nargs="?",
        type=Path,
        help="Dataset file (.xlsx, .xls, .csv or .json). Searched for in the data directory if omitted.",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help=f"Data directory (default: {settings.data_dir})",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help=f"Records inserted concurrently per batch (default: {settings.import_batch_size})",
    )
    parser.add_argument(
        "--no-images",
        action="store_true",
        help="Skip image matching",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Read and match only, without database writes",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    if args.batch_size is not None and args.batch_size < 1:
        parser.error("--batch-size must be at least 1")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        return asyncio.run(
            import_dataset(
                args.file,
                data_dir=args.data_dir,
                batch_size=args.batch_size,
                use_images=not args.no_images,
                dry_run=args.dry_run,
            )
        )
    except KeyboardInterrupt:
        print("\nImport interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
