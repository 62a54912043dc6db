"""Dataset file and data directory readers."""

import logging
from collections.abc import Sequence
from pathlib import Path

from .constants import (
    DATASET_EXTENSIONS,
    DATASET_FILE_NAMES,
    DATASET_SEARCH_EXTENSIONS,
    IMAGE_EXTENSIONS,
    PRESENTATION_EXTENSIONS,
)
from .errors import DatasetNotFoundError, DatasetReadError, UnsupportedFileTypeError
from .parsers import RawRow, parse_csv, parse_json, parse_xls, parse_xlsx

logger = logging.getLogger(__name__)


def _parse_file(path: Path, priority_sheets: Sequence[str] | None) -> list[RawRow]:
    content = path.read_bytes()
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return parse_csv(content, source_file=path.name).rows
    if suffix == ".json":
        return parse_json(content, source_file=path.name).rows
    if suffix == ".xlsx":
        sheets = parse_xlsx(content, source_file=path.name, priority_sheets=priority_sheets)
    else:
        sheets = parse_xls(content, source_file=path.name, priority_sheets=priority_sheets)
    return [row for sheet in sheets for row in sheet.rows]


def read_dataset_file(path: Path, priority_sheets: Sequence[str] | None = None) -> list[RawRow]:
    """Read one dataset file into raw rows.

    Args:
        path: CSV, JSON, XLSX or XLS file.
        priority_sheets: Workbook sheets to read first.

    Returns:
        Raw rows in source order (sheet priority order for workbooks).

    Raises:
        DatasetNotFoundError: If the file does not exist.
        UnsupportedFileTypeError: If the extension is not supported.
        DatasetReadError: If the content cannot be parsed.
    """
    path = Path(path)
    if not path.is_file():
        raise DatasetNotFoundError(f"Dataset file not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in DATASET_EXTENSIONS:
        raise UnsupportedFileTypeError(
            f"Unsupported file type '{suffix or path.name}'. "
            f"Use one of: {', '.join(sorted(DATASET_EXTENSIONS))}"
        )

    try:
        rows = _parse_file(path, priority_sheets)
    except Exception as e:
        raise DatasetReadError(f"Could not read {path.name}: {e}") from e

    logger.info("Read %d rows from %s", len(rows), path.name)
    return rows


def read_directory(directory: Path, priority_sheets: Sequence[str] | None = None) -> list[RawRow]:
    """Read every dataset file in a directory.

    The directory is created when missing. Files are read in sorted name
    order; hidden files, subdirectories, presentations and images are
    skipped. A file that fails to parse is logged and skipped.

    Returns:
        Raw rows of all readable files, file by file.
    """
    directory = Path(directory)
    if not directory.exists():
        directory.mkdir(parents=True, exist_ok=True)
        logger.info("Created data directory %s", directory)
        return []

    rows: list[RawRow] = []
    for path in sorted(directory.iterdir()):
        if path.name.startswith(".") or not path.is_file():
            continue
        suffix = path.suffix.lower()
        if suffix in PRESENTATION_EXTENSIONS or suffix in IMAGE_EXTENSIONS:
            continue
        if suffix not in DATASET_EXTENSIONS:
            logger.debug("Skipping unsupported file %s", path.name)
            continue
        try:
            rows.extend(_parse_file(path, priority_sheets))
        except Exception as e:
            logger.warning("Skipping unreadable file %s: %s", path.name, e)
    return rows


def find_dataset_file(data_dir: Path, known_names: Sequence[str] | None = None) -> Path | None:
    """Locate the dataset file in the data directory.

    Known file names are tried first; otherwise the first file (sorted by
    name) whose lowercase name contains both ``final`` and ``dataset`` and
    ends in ``.xlsx``, ``.xls`` or ``.csv`` is used.

    Returns:
        Path of the dataset file, or None if nothing matches.
    """
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        return None

    for name in known_names or DATASET_FILE_NAMES:
        candidate = data_dir / name
        if candidate.is_file():
            return candidate

    for path in sorted(data_dir.iterdir()):
        lower = path.name.lower()
        if (
            path.is_file()
            and "final" in lower
            and "dataset" in lower
            and lower.endswith(DATASET_SEARCH_EXTENSIONS)
        ):
            return path
    return None
