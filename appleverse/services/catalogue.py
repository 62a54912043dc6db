"""Queries over the active apple catalogue."""

import re
from enum import Enum
from typing import Any

from appleverse.models import Apple, DatasetGeneration

# Fields matched by the free-text search, including the metadata columns
# most datasets carry
SEARCH_FIELDS = [
    "cultivar_name",
    "accession_code",
    "accession_number",
    "label_name",
    "country",
    "province",
    "metadata.ACCESSION",
    "metadata.CULTIVAR_NAME",
    "metadata.CULTIVAR NAME",
    "metadata.TAXON",
    "metadata.NARATIVEKEYWORD",
    "metadata.COUNTRY",
    "metadata.PROVINCE/STATE",
]


class SortField(str, Enum):
    """Sortable catalogue fields."""

    SOURCE_ROW_INDEX = "source_row_index"
    CULTIVAR_NAME = "cultivar_name"
    ACCESSION_CODE = "accession_code"
    COUNTRY = "country"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


def build_catalogue_query(
    generation: int,
    search: str | None = None,
    country: str | None = None,
    genus: str | None = None,
    has_images: bool | None = None,
) -> dict[str, Any]:
    """Build the MongoDB filter for a catalogue listing.

    Args:
        generation: Active dataset generation.
        search: Case-insensitive substring matched against SEARCH_FIELDS.
        country: Exact country, case-insensitive.
        genus: Exact genus, case-insensitive.
        has_images: Only records with (True) or without (False) images.

    Returns:
        A MongoDB query document.
    """
    conditions: dict[str, Any] = {"generation": generation}

    if search and search.strip():
        pattern = re.escape(search.strip())
        conditions["$or"] = [
            {field: {"$regex": pattern, "$options": "i"}} for field in SEARCH_FIELDS
        ]

    if country:
        conditions["country"] = {"$regex": f"^{re.escape(country.strip())}$", "$options": "i"}

    if genus:
        conditions["genus"] = {"$regex": f"^{re.escape(genus.strip())}$", "$options": "i"}

    if has_images is True:
        conditions["images"] = {"$ne": []}
    elif has_images is False:
        conditions["images"] = {"$size": 0}

    return conditions


def sort_expression(sort: SortField = SortField.SOURCE_ROW_INDEX, order: SortOrder = SortOrder.ASC) -> list[str]:
    """Beanie sort arguments; ties fall back to source row order."""
    prefix = "-" if order == SortOrder.DESC else "+"
    expression = [f"{prefix}{sort.value}"]
    if sort != SortField.SOURCE_ROW_INDEX:
        expression.append("+source_row_index")
    return expression


def filters_applied(**filters: Any) -> dict[str, Any]:
    """Drop unset filters, for export metadata."""
    return {key: value for key, value in filters.items() if value is not None and value != ""}


async def active_generation_number() -> int | None:
    active = await DatasetGeneration.get_active()
    return active.generation if active else None


async def get_active_apple(apple_id: Any) -> Apple | None:
    """Fetch an apple by ID, only if it belongs to the active generation."""
    apple = await Apple.get(apple_id)
    if apple is None:
        return None
    generation = await active_generation_number()
    if generation is None or apple.generation != generation:
        return None
    return apple
