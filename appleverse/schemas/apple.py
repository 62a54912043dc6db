"""Pydantic schemas for the apple catalogue API."""

from datetime import datetime
from typing import Any

from beanie import PydanticObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


class AppleResponse(BaseModel):
    """An apple record as returned by the API."""

    id: str
    accession_code: str = ""
    cultivar_name: str
    accession_number: str = ""
    label_name: str = ""
    genus: str = "Malus"
    species: str = ""
    country: str = ""
    province: str = ""
    city: str = ""
    pedigree_description: str = ""
    breeder: str = ""
    collector: str = ""
    images: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)
    source_row_index: int | None = None
    source_sheet: str | None = None
    source_file: str | None = None
    full_name: str = ""
    primary_image: str | None = None
    generation: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("id", mode="before")
    @classmethod
    def convert_objectid_to_str(cls, v: Any) -> str:
        """Convert ObjectId to string."""
        if isinstance(v, PydanticObjectId):
            return str(v)
        return v


class Pagination(BaseModel):
    """Paging information for list responses."""

    page: int
    limit: int
    total: int
    pages: int


class AppleListResponse(BaseModel):
    """A page of apple records."""

    apples: list[AppleResponse]
    pagination: Pagination


class ImageInfo(BaseModel):
    name: str
    path: str


class ImageLookupResponse(BaseModel):
    """Images whose file name contains an accession code."""

    accession: str
    images: list[ImageInfo]
    count: int


class ImageBatchRequest(BaseModel):
    """Accession codes to look up images for."""

    accessions: list[str] = Field(..., max_length=1000)


class ImageBatchResponse(BaseModel):
    """Image paths per accession; accessions without images are omitted."""

    results: dict[str, list[str]]
    found: int
    total: int


class PreviewRecord(BaseModel):
    """A record read from the data directory (not stored)."""

    accession_code: str = ""
    cultivar_name: str
    accession_number: str = ""
    label_name: str = ""
    genus: str = "Malus"
    species: str = ""
    country: str = ""
    province: str = ""
    city: str = ""
    pedigree_description: str = ""
    breeder: str = ""
    collector: str = ""
    images: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)
    source_row_index: int | None = None
    source_sheet: str | None = None
    source_file: str | None = None

    model_config = ConfigDict(from_attributes=True)


class LocalPreviewResponse(BaseModel):
    """Normalized records found in the local data directory."""

    records: list[PreviewRecord]
    total_rows: int
    skipped: int
    images_found: int
    images_matched: int


class DatasetStatusResponse(BaseModel):
    """Summary of the active dataset generation."""

    active: bool
    generation: int | None = None
    source_file: str | None = None
    record_count: int = 0
    total_rows: int = 0
    imported: int = 0
    skipped: int = 0
    failed: int = 0
    records_with_images: int = 0
    elapsed_seconds: float = 0.0
    activated_at: datetime | None = None
