"""Attach images to records already in the active catalogue."""

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel

from appleverse.models import Apple, DatasetGeneration

from .image_matcher import match_images, scan_image_directories
from .records import NormalizedRecord

logger = logging.getLogger(__name__)


class LinkReport(BaseModel):
    """Summary of one image relink run."""

    generation: int | None = None
    records_scanned: int = 0
    images_found: int = 0
    images_matched: int = 0
    records_updated: int = 0
    records_with_images: int = 0


def _as_record(apple: Apple) -> NormalizedRecord:
    return NormalizedRecord(**apple.model_dump(include=set(NormalizedRecord.model_fields)))


async def link_active_images(
    image_sources: Iterable[tuple[Path, str]],
    dry_run: bool = False,
) -> LinkReport:
    """Match image files against the active generation and save new links.

    Images already attached to a record are kept; matching only appends
    images whose dedup key is new. Records are saved only when their image
    list changed.

    Args:
        image_sources: ``(directory, url_prefix)`` pairs to scan.
        dry_run: Count the changes without saving them.

    Returns:
        The link report. ``generation`` is None when no dataset is active.
    """
    active = await DatasetGeneration.get_active()
    if active is None:
        logger.warning("No active dataset; nothing to link")
        return LinkReport()

    apples = await Apple.find(Apple.generation == active.generation).sort("+source_row_index").to_list()
    records = [_as_record(apple) for apple in apples]
    images = scan_image_directories(image_sources)
    summary = match_images(images, records)

    report = LinkReport(
        generation=active.generation,
        records_scanned=len(apples),
        images_found=summary.images_scanned,
        images_matched=summary.images_matched,
        records_with_images=summary.records_with_images,
    )

    for apple, record in zip(apples, records):
        if record.images == apple.images:
            continue
        report.records_updated += 1
        logger.debug("Linked %d image(s) to %s", len(record.images) - len(apple.images), apple.cultivar_name)
        if not dry_run:
            apple.images = record.images
            apple.updated_at = datetime.now(timezone.utc)
            await apple.save()

    if not dry_run and active.records_with_images != report.records_with_images:
        active.records_with_images = report.records_with_images
        await active.save()

    logger.info(
        "Linked images for generation %d: %d of %d records updated",
        active.generation, report.records_updated, report.records_scanned,
    )
    return report
