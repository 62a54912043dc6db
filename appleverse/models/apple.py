"""Apple document model for MongoDB."""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from beanie import Document, Indexed
from pydantic import Field

if TYPE_CHECKING:
    from appleverse.services.import_service.records import NormalizedRecord


class Apple(Document):
    """An apple cultivar record belonging to one dataset generation."""

    # Dataset generation this record was imported in
    generation: Indexed(int)

    # Identity
    cultivar_name: Indexed(str)
    accession_code: Indexed(str) = ""
    accession_number: str = ""
    label_name: str = ""

    # Taxonomy
    genus: str = "Malus"
    species: str = ""

    # Origin
    country: Indexed(str) = ""
    province: str = ""
    city: str = ""

    # Lineage
    pedigree_description: str = ""
    breeder: str = ""
    collector: str = ""

    images: list[str] = Field(default_factory=list)
    # Source columns not mapped to a field above, keyed by original label
    metadata: dict[str, str] = Field(default_factory=dict)

    # Provenance
    source_row_index: Optional[int] = None
    source_sheet: Optional[str] = None
    source_file: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "apples"
        indexes = [
            "generation",
            "cultivar_name",
            "accession_code",
            "country",
            [("generation", 1), ("source_row_index", 1)],  # Default listing order
        ]

    @classmethod
    def from_record(cls, record: "NormalizedRecord", generation: int) -> "Apple":
        """Build an unsaved document from a normalized record."""
        return cls(generation=generation, **record.model_dump())

    @property
    def full_name(self) -> str:
        """Botanical display name, e.g. ``Malus domestica 'Gala'``."""
        parts = [self.genus, self.species]
        name = " ".join(p for p in parts if p)
        return f"{name} '{self.cultivar_name}'" if name else self.cultivar_name

    @property
    def primary_image(self) -> Optional[str]:
        return self.images[0] if self.images else None

    def __repr__(self) -> str:
        return f"<Apple(id={self.id}, accession={self.accession_code}, cultivar={self.cultivar_name})>"
