"""Bulk replacement of the apple catalogue from a dataset file."""

import asyncio
import logging
import time
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from pydantic import BaseModel, Field

from appleverse.models import Apple, DatasetGeneration, GenerationStatus

from .constants import DEFAULT_BATCH_SIZE
from .errors import NoUsableRowsError
from .image_matcher import MatchSummary, match_images, scan_image_directories
from .normalizer import FieldNormalizer
from .reader import read_dataset_file, read_directory
from .records import NormalizedRecord

logger = logging.getLogger(__name__)

# Called after each batch with (records done, records total)
ProgressCallback = Callable[[int, int], None]


class ImportRowError(BaseModel):
    """A record that could not be inserted."""

    row: int | None = None
    name: str = ""
    error: str

    def __str__(self) -> str:
        return f"Row {self.row}: {self.name or '(unnamed)'} - {self.error}"


class ImportReport(BaseModel):
    """Summary of one bulk import run."""

    source_file: str
    total_rows: int = 0
    imported: int = 0
    skipped: int = 0
    failed: int = 0
    errors: list[ImportRowError] = Field(default_factory=list)
    elapsed_seconds: float = 0.0
    generation: int | None = None
    activated: bool = False
    replaced_records: int = 0
    images_found: int = 0
    images_matched: int = 0
    records_with_images: int = 0

    @property
    def records_per_second(self) -> float:
        if self.elapsed_seconds <= 0:
            return 0.0
        return self.imported / self.elapsed_seconds


class LocalPreview(BaseModel):
    """Records read from the data directory without touching the database."""

    records: list[NormalizedRecord] = Field(default_factory=list)
    total_rows: int = 0
    skipped: int = 0
    images_found: int = 0
    images_matched: int = 0


class BulkImporter:
    """Replace the catalogue with the contents of one dataset file.

    Records are written under a new staging generation in batches; batches
    run one after the other and the inserts inside a batch run concurrently.
    The generation is activated only when at least one record was stored.
    """

    def __init__(
        self,
        normalizer: FieldNormalizer | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        image_sources: Iterable[tuple[Path, str]] | None = None,
        priority_sheets: Sequence[str] | None = None,
        progress: ProgressCallback | None = None,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.normalizer = normalizer or FieldNormalizer()
        self.batch_size = batch_size
        self.image_sources = list(image_sources or [])
        self.priority_sheets = priority_sheets
        self.progress = progress

    def prepare(self, path: Path) -> tuple[list[NormalizedRecord], int, MatchSummary]:
        """Read, normalize and image-match a dataset file.

        Returns:
            Usable records, total row count and the image match summary.

        Raises:
            DatasetImportError: If the file cannot be read or has no usable rows.
        """
        raw_rows = read_dataset_file(path, priority_sheets=self.priority_sheets)
        records = self.normalizer.normalize_rows(raw_rows)
        usable = [record for record in records if record.is_usable]
        if not usable:
            raise NoUsableRowsError(f"No rows with a cultivar name found in {Path(path).name}")

        images = scan_image_directories(self.image_sources)
        summary = match_images(images, usable)
        return usable, len(raw_rows), summary

    async def _insert(
        self,
        record: NormalizedRecord,
        generation: int,
        report: ImportReport,
    ) -> None:
        try:
            await Apple.from_record(record, generation).insert()
            report.imported += 1
        except Exception as e:
            report.failed += 1
            report.errors.append(
                ImportRowError(row=record.source_row_index, name=record.cultivar_name, error=str(e))
            )
            logger.warning(
                "Import error on row %s (%s): %s", record.source_row_index, record.cultivar_name, e
            )

    async def run(self, path: Path) -> ImportReport:
        """Import a dataset file as the new active catalogue.

        Args:
            path: Dataset file (CSV, JSON, XLSX or XLS).

        Returns:
            The import report.

        Raises:
            DatasetImportError: If the file is missing, unsupported, unreadable
                or holds no usable rows. The active catalogue is untouched.
        """
        started = time.perf_counter()
        path = Path(path)
        records, total_rows, summary = self.prepare(path)

        report = ImportReport(
            source_file=path.name,
            total_rows=total_rows,
            skipped=total_rows - len(records),
            images_found=summary.images_scanned,
            images_matched=summary.images_matched,
            records_with_images=summary.records_with_images,
        )

        staged = await DatasetGeneration.start(source_file=path.name, total_rows=total_rows)
        report.generation = staged.generation
        logger.info(
            "Importing %d records from %s as generation %d",
            len(records), path.name, staged.generation,
        )

        try:
            for offset in range(0, len(records), self.batch_size):
                batch = records[offset:offset + self.batch_size]
                await asyncio.gather(*(self._insert(r, staged.generation, report) for r in batch))
                if self.progress is not None:
                    self.progress(offset + len(batch), len(records))

            report.elapsed_seconds = time.perf_counter() - started
            staged.imported = report.imported
            staged.skipped = report.skipped
            staged.failed = report.failed
            staged.records_with_images = report.records_with_images
            staged.elapsed_seconds = report.elapsed_seconds

            if report.imported > 0:
                report.replaced_records = await staged.activate()
                report.activated = True
            else:
                logger.error("No records imported from %s; keeping the current dataset", path.name)
                await staged.discard()
        except BaseException:
            # Once the status flip is saved the new generation is live; keep it
            if staged.status == GenerationStatus.STAGING:
                logger.error("Import of %s aborted; discarding generation %d", path.name, staged.generation)
                await staged.discard()
            raise

        return report


async def run_bulk_import(
    path: Path,
    batch_size: int = DEFAULT_BATCH_SIZE,
    image_sources: Iterable[tuple[Path, str]] | None = None,
    priority_sheets: Sequence[str] | None = None,
    progress: ProgressCallback | None = None,
) -> ImportReport:
    """Convenience wrapper around :class:`BulkImporter`."""
    importer = BulkImporter(
        batch_size=batch_size,
        image_sources=image_sources,
        priority_sheets=priority_sheets,
        progress=progress,
    )
    return await importer.run(path)


def collect_local_data(
    data_dir: Path,
    image_sources: Iterable[tuple[Path, str]],
    priority_sheets: Sequence[str] | None = None,
    normalizer: FieldNormalizer | None = None,
) -> LocalPreview:
    """Read every dataset file in the data directory and match images.

    Nothing is written to the database. Rows without a cultivar name are
    counted as skipped.
    """
    normalizer = normalizer or FieldNormalizer()
    raw_rows = read_directory(data_dir, priority_sheets=priority_sheets)
    records = [r for r in normalizer.normalize_rows(raw_rows) if r.is_usable]
    images = scan_image_directories(image_sources)
    summary = match_images(images, records)
    return LocalPreview(
        records=records,
        total_rows=len(raw_rows),
        skipped=len(raw_rows) - len(records),
        images_found=summary.images_scanned,
        images_matched=summary.images_matched,
    )
