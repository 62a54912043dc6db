"""Pydantic schemas for catalogue export."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ExportFormat(str, Enum):
    """Supported export formats."""

    CSV = "csv"
    XLSX = "xlsx"
    YAML = "yaml"
    JSON = "json"


class ExportMetadata(BaseModel):
    """Information about an export, included in JSON/YAML output."""

    exported_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    total_count: int
    format: str
    generation: int | None = None
    filters_applied: dict[str, Any] = Field(default_factory=dict)


class AppleFlatExport(BaseModel):
    """Flat apple schema for CSV/Excel export."""

    id: str
    accession_code: str = ""
    cultivar_name: str
    accession_number: str = ""
    label_name: str = ""
    genus: str = ""
    species: str = ""
    country: str = ""
    province: str = ""
    city: str = ""
    pedigree_description: str = ""
    breeder: str = ""
    collector: str = ""
    images: str = ""
    source_row_index: int | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

    @staticmethod
    def from_apple(apple: Any) -> "AppleFlatExport":
        """Create a flat export schema from an Apple model instance.

        Images are joined with ``;``. Metadata is kept as a mapping and
        expanded into one column per key by the exporter.
        """
        return AppleFlatExport(
            id=str(apple.id),
            accession_code=apple.accession_code,
            cultivar_name=apple.cultivar_name,
            accession_number=apple.accession_number,
            label_name=apple.label_name,
            genus=apple.genus,
            species=apple.species,
            country=apple.country,
            province=apple.province,
            city=apple.city,
            pedigree_description=apple.pedigree_description,
            breeder=apple.breeder,
            collector=apple.collector,
            images=";".join(apple.images),
            source_row_index=apple.source_row_index,
            metadata=dict(apple.metadata),
        )
