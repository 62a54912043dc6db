"""File parsing functions for CSV, JSON, XLSX and XLS datasets."""

import csv
import io
import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any

import xlrd
from openpyxl import load_workbook

from .constants import HEADER_SENTINEL, PRIORITY_SHEETS


@dataclass
class RawRow:
    """One data row keyed by the column labels as they appear in the source."""

    values: dict[str, str]
    # Spreadsheet row number; the header is row 1
    row_number: int
    sheet: str | None = None
    source_file: str | None = None


@dataclass
class ParsedSheet:
    """Headers and data rows of one CSV/JSON document or workbook sheet."""

    name: str | None
    headers: list[str] = field(default_factory=list)
    rows: list[RawRow] = field(default_factory=list)


def cell_to_text(value: Any) -> str:
    """Convert a cell value into a trimmed string.

    Integral floats lose their ``.0`` so numeric codes read from Excel
    (``1234.0``) come out as ``"1234"``; dates use ISO format.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value).strip()


def make_headers(raw_headers: Sequence[Any]) -> list[str]:
    """Build unique column labels from a header row.

    Blank header cells become ``Column_<n>`` (1-based position) and repeated
    labels get a ``_2``, ``_3``... suffix so no column is lost.
    """
    headers: list[str] = []
    seen: dict[str, int] = {}
    for index, raw in enumerate(raw_headers, start=1):
        label = cell_to_text(raw) or f"Column_{index}"
        if label in seen:
            seen[label] += 1
            label = f"{label}_{seen[label]}"
        seen.setdefault(label, 1)
        headers.append(label)
    return headers


def is_embedded_header(values: dict[str, str]) -> bool:
    """Detect a copy of the header row appearing inside the data.

    A row is a header copy when a sentinel column (one whose label contains
    ``SYNCHRONIZATION``) repeats the sentinel text, or when every non-empty
    cell equals its own column label.
    """
    non_empty = {label: value for label, value in values.items() if value}
    if not non_empty:
        return False
    for label, value in non_empty.items():
        if HEADER_SENTINEL in label.upper() and HEADER_SENTINEL in value.upper():
            return True
    return all(value.casefold() == label.casefold() for label, value in non_empty.items())


def build_sheet(
    records: Iterable[tuple[int, Sequence[Any]]],
    name: str | None = None,
    source_file: str | None = None,
) -> ParsedSheet:
    """Turn numbered raw records into a ParsedSheet.

    The first non-blank record is the header. Blank records and header
    copies are dropped; short records are padded with empty strings.

    Args:
        records: ``(row_number, cells)`` pairs in source order.
        name: Sheet name, if any.
        source_file: File name recorded on every row.
    """
    sheet = ParsedSheet(name=name)
    header_seen = False
    for row_number, cells in records:
        texts = [cell_to_text(c) for c in cells]
        if not any(texts):
            continue
        if not header_seen:
            sheet.headers = make_headers(cells)
            header_seen = True
            continue
        values = {
            label: texts[i] if i < len(texts) else ""
            for i, label in enumerate(sheet.headers)
        }
        if not any(values.values()) or is_embedded_header(values):
            continue
        sheet.rows.append(RawRow(values=values, row_number=row_number, sheet=name, source_file=source_file))
    return sheet


def ordered_sheet_names(sheet_names: Sequence[str], priority: Sequence[str] | None = None) -> list[str]:
    """Order workbook sheets: priority sheets first, then the rest in workbook order."""
    if priority is None:
        priority = PRIORITY_SHEETS
    first = [name for name in priority if name in sheet_names]
    return first + [name for name in sheet_names if name not in first]


def _decode(file_content: bytes) -> str:
    # Tries UTF-8 (BOM tolerated) first, falls back to Latin-1
    try:
        return file_content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return file_content.decode("latin-1")


def parse_csv(file_content: bytes, source_file: str | None = None) -> ParsedSheet:
    """Parse CSV content.

    Handles quoted fields, embedded commas, doubled quotes, newlines inside
    quotes and mixed line endings. Row numbers count non-blank records so
    the first data row is row 2.

    Args:
        file_content: Raw CSV file bytes.
        source_file: File name recorded on every row.

    Returns:
        The parsed sheet (empty when the file has no header).
    """
    text = _decode(file_content)
    reader = csv.reader(io.StringIO(text, newline=""))
    non_blank = (cells for cells in reader if any(c.strip() for c in cells))
    return build_sheet(enumerate(non_blank, start=1), source_file=source_file)


def parse_json(file_content: bytes, source_file: str | None = None) -> ParsedSheet:
    """Parse a JSON object or array of objects.

    Non-object array items are ignored. Nested values are kept as their JSON
    text; ``null`` becomes an empty string.

    Raises:
        ValueError: If the content is not valid JSON.
    """
    data = json.loads(_decode(file_content))
    items = [data] if isinstance(data, dict) else data if isinstance(data, list) else []

    sheet = ParsedSheet(name=None)
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            continue
        values: dict[str, str] = {}
        for key, value in item.items():
            label = str(key).strip()
            if isinstance(value, (dict, list)):
                values[label] = json.dumps(value)
            else:
                values[label] = cell_to_text(value)
            if label not in sheet.headers:
                sheet.headers.append(label)
        sheet.rows.append(RawRow(values=values, row_number=index + 2, source_file=source_file))
    return sheet


def parse_xlsx(
    file_content: bytes,
    source_file: str | None = None,
    priority_sheets: Sequence[str] | None = None,
) -> list[ParsedSheet]:
    """Parse every sheet of an XLSX workbook in priority order.

    Uses openpyxl read_only mode and iterates rows lazily. Row numbers are
    the worksheet row numbers.
    """
    wb = load_workbook(filename=io.BytesIO(file_content), read_only=True, data_only=True)
    try:
        sheets = []
        for name in ordered_sheet_names(wb.sheetnames, priority_sheets):
            ws = wb[name]
            records = enumerate(ws.iter_rows(values_only=True), start=1)
            sheets.append(build_sheet(records, name=name, source_file=source_file))
        return sheets
    finally:
        wb.close()


def parse_xls(
    file_content: bytes,
    source_file: str | None = None,
    priority_sheets: Sequence[str] | None = None,
) -> list[ParsedSheet]:
    """Parse every sheet of a legacy XLS workbook in priority order."""
    book = xlrd.open_workbook(file_contents=file_content)
    try:
        sheets = []
        for name in ordered_sheet_names(book.sheet_names(), priority_sheets):
            ws = book.sheet_by_name(name)
            records = (
                (row_index + 1, [_xls_cell_value(cell, book.datemode) for cell in ws.row(row_index)])
                for row_index in range(ws.nrows)
            )
            sheets.append(build_sheet(records, name=name, source_file=source_file))
        return sheets
    finally:
        book.release_resources()


def _xls_cell_value(cell: xlrd.sheet.Cell, datemode: int) -> Any:
    if cell.ctype == xlrd.XL_CELL_DATE:
        return xlrd.xldate.xldate_as_datetime(cell.value, datemode)
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    return cell.value
