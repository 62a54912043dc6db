"""Export service for generating catalogue exports in various formats."""

import csv
import io
from datetime import datetime, timezone
from typing import Any

import yaml
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from appleverse.schemas.export import AppleFlatExport, ExportFormat, ExportMetadata

# Apple export headers; metadata columns follow in first-seen order,
# prefixed with "metadata." when they clash with one of these
APPLE_HEADERS = [
    "id",
    "accession_code",
    "cultivar_name",
    "accession_number",
    "label_name",
    "genus",
    "species",
    "country",
    "province",
    "city",
    "pedigree_description",
    "breeder",
    "collector",
    "images",
    "source_row_index",
]


def generate_filename(export_type: str, export_format: ExportFormat) -> str:
    """Generate a standardized filename for exports."""
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    return f"appleverse_{export_type}_{timestamp}.{export_format.value}"


def metadata_columns(apples: list[AppleFlatExport]) -> list[str]:
    """Metadata keys across all apples, in first-seen order."""
    columns: dict[str, None] = {}
    for apple in apples:
        for key in apple.metadata:
            columns.setdefault(key, None)
    return list(columns)


def metadata_header(key: str) -> str:
    """Column header for a metadata key.

    Keys that clash with a fixed header are prefixed with ``metadata.``.
    """
    return f"metadata.{key}" if key in APPLE_HEADERS else key


def _apple_to_row(apple: AppleFlatExport, extra_columns: list[str]) -> list[Any]:
    """Convert an apple export schema to a row for CSV/Excel."""
    row = [
        apple.id,
        apple.accession_code,
        apple.cultivar_name,
        apple.accession_number,
        apple.label_name,
        apple.genus,
        apple.species,
        apple.country,
        apple.province,
        apple.city,
        apple.pedigree_description,
        apple.breeder,
        apple.collector,
        apple.images,
        apple.source_row_index if apple.source_row_index is not None else "",
    ]
    row.extend(apple.metadata.get(column, "") for column in extra_columns)
    return row


def export_apples_to_csv(apples: list[AppleFlatExport]) -> bytes:
    """Export apples to CSV format.

    Args:
        apples: List of flat apple export schemas

    Returns:
        CSV content as bytes
    """
    extra = metadata_columns(apples)
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(APPLE_HEADERS + [metadata_header(key) for key in extra])
    for apple in apples:
        writer.writerow(_apple_to_row(apple, extra))

    return output.getvalue().encode("utf-8")


def export_apples_to_xlsx(apples: list[AppleFlatExport]) -> bytes:
    """Export apples to Excel (XLSX) format.

    Args:
        apples: List of flat apple export schemas

    Returns:
        XLSX content as bytes
    """
    extra = metadata_columns(apples)
    headers = APPLE_HEADERS + [metadata_header(key) for key in extra]

    wb = Workbook()
    ws = wb.active
    ws.title = "Apples"

    # Header styling
    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="B22222", end_color="B22222", fill_type="solid")
    header_alignment = Alignment(horizontal="center")

    for col_idx, header in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = header_alignment

    for row_idx, apple in enumerate(apples, 2):
        for col_idx, value in enumerate(_apple_to_row(apple, extra), 1):
            ws.cell(row=row_idx, column=col_idx, value=value)

    # Auto-adjust column widths
    for col_idx, header in enumerate(headers, 1):
        col_letter = get_column_letter(col_idx)
        max_length = len(header)
        for row_idx in range(2, len(apples) + 2):
            cell_value = ws.cell(row=row_idx, column=col_idx).value
            if cell_value:
                max_length = max(max_length, len(str(cell_value)))
        ws.column_dimensions[col_letter].width = min(max_length + 2, 50)

    ws.freeze_panes = "A2"

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


def _export_document(
    apples: list[dict[str, Any]],
    export_format: ExportFormat,
    generation: int | None,
    filters_applied: dict[str, Any],
) -> dict[str, Any]:
    return {
        "apples": apples,
        "export_info": ExportMetadata(
            total_count=len(apples),
            format=export_format.value,
            generation=generation,
            filters_applied=filters_applied,
        ).model_dump(mode="json"),
    }


def export_apples_to_yaml(
    apples: list[dict[str, Any]],
    generation: int | None,
    filters_applied: dict[str, Any],
) -> bytes:
    """Export apples to YAML format with metadata.

    Args:
        apples: List of apple dictionaries
        generation: Dataset generation exported
        filters_applied: Filters that were applied to the export

    Returns:
        YAML content as bytes
    """
    export_data = _export_document(apples, ExportFormat.YAML, generation, filters_applied)
    return yaml.dump(export_data, default_flow_style=False, allow_unicode=True, sort_keys=False).encode("utf-8")


def export_apples_to_json(
    apples: list[dict[str, Any]],
    generation: int | None,
    filters_applied: dict[str, Any],
) -> dict[str, Any]:
    """Export apples to JSON format with metadata.

    Returns:
        JSON-serializable dictionary
    """
    return _export_document(apples, ExportFormat.JSON, generation, filters_applied)


def get_content_type(export_format: ExportFormat) -> str:
    """Get the MIME type for an export format."""
    content_types = {
        ExportFormat.CSV: "text/csv",
        ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        ExportFormat.YAML: "application/x-yaml",
        ExportFormat.JSON: "application/json",
    }
    return content_types[export_format]
