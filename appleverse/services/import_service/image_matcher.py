"""Attach image files to apple records by file name heuristics."""

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .constants import IMAGE_EXTENSIONS
from .records import NormalizedRecord

logger = logging.getLogger(__name__)

_IMAGE_EXTENSION_RE = re.compile(r"\.(jpe?g|png|webp|gif)$", re.IGNORECASE)
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")

# Names this short match too many files to be useful
MIN_NAME_LENGTH = 3


@dataclass(frozen=True)
class ImageFile:
    """An image found on disk and the path it is served under."""

    name: str
    path: str


@dataclass
class MatchSummary:
    """Outcome of matching a set of images against records."""

    images_scanned: int = 0
    images_matched: int = 0
    records_with_images: int = 0


def scan_image_directory(directory: Path, url_prefix: str) -> list[ImageFile]:
    """List image files in a directory, sorted by name.

    Args:
        directory: Directory to scan (missing directories yield nothing).
        url_prefix: Serving prefix, e.g. ``/images``.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return []
    prefix = url_prefix.rstrip("/")
    return [
        ImageFile(name=path.name, path=f"{prefix}/{path.name}")
        for path in sorted(directory.iterdir(), key=lambda p: p.name)
        if path.is_file() and not path.name.startswith(".") and path.suffix.lower() in IMAGE_EXTENSIONS
    ]


def scan_image_directories(sources: Iterable[tuple[Path, str]]) -> list[ImageFile]:
    """Scan several ``(directory, url_prefix)`` pairs, in the given order."""
    images: list[ImageFile] = []
    for directory, url_prefix in sources:
        found = scan_image_directory(directory, url_prefix)
        logger.debug("Found %d images in %s", len(found), directory)
        images.extend(found)
    return images


def image_stem(name: str) -> str:
    """Lowercase file name without its image extension."""
    return _IMAGE_EXTENSION_RE.sub("", name.lower())


def strip_name(text: str) -> str:
    """Lowercase text reduced to ASCII letters and digits."""
    return _NON_ALNUM_RE.sub("", text.lower())


def _name_matches(name: str, stem: str) -> bool:
    if len(name) < MIN_NAME_LENGTH:
        return False
    stripped = strip_name(name)
    return bool(stripped) and stripped in strip_name(stem)


def record_match_rule(stem: str, record: NormalizedRecord) -> str | None:
    """Return the first rule under which the image stem matches the record.

    Rules in priority order: accession code contained in the stem, stripped
    cultivar name contained in the stripped stem, accession number contained
    in the stem, stripped label name contained in the stripped stem.
    """
    accession = record.accession_code.lower()
    if accession and accession in stem:
        return "accession_code"
    if _name_matches(record.cultivar_name, stem):
        return "cultivar_name"
    number = record.accession_number.lower()
    if number and number in stem:
        return "accession_number"
    if _name_matches(record.label_name, stem):
        return "label_name"
    return None


def match_image(image: ImageFile, records: Sequence[NormalizedRecord]) -> bool:
    """Attach an image to every record it matches.

    Returns:
        True if at least one record gained the image.
    """
    stem = image_stem(image.name)
    attached = False
    for record in records:
        rule = record_match_rule(stem, record)
        if rule is not None and record.add_image(image.path):
            logger.debug("Matched %s to %s by %s", image.name, record.cultivar_name, rule)
            attached = True
    return attached


def match_images(images: Sequence[ImageFile], records: Sequence[NormalizedRecord]) -> MatchSummary:
    """Match every image against every record."""
    summary = MatchSummary(images_scanned=len(images))
    for image in images:
        if match_image(image, records):
            summary.images_matched += 1
    summary.records_with_images = sum(1 for record in records if record.images)
    return summary


def find_images_for_accession(sources: Iterable[tuple[Path, str]], accession: str) -> list[ImageFile]:
    """Images whose file name contains the accession code, case-insensitively."""
    needle = accession.strip().lower()
    if not needle:
        return []
    return [image for image in scan_image_directories(sources) if needle in image.name.lower()]


def find_images_for_accessions(
    sources: Iterable[tuple[Path, str]],
    accessions: Sequence[str],
) -> dict[str, list[ImageFile]]:
    """Look up images for several accession codes with a single directory scan.

    Returns:
        Accession code to matching images, only for codes with at least one image.
    """
    images = scan_image_directories(sources)
    results: dict[str, list[ImageFile]] = {}
    for accession in accessions:
        needle = accession.strip().lower()
        if not needle:
            continue
        found = [image for image in images if needle in image.name.lower()]
        if found:
            results[accession] = found
    return results
