"""Apple catalogue endpoints (list, get, image lookups, local preview)."""

import logging
import math

from beanie import PydanticObjectId
from bson.errors import InvalidId
from fastapi import APIRouter, HTTPException, Query, status
from pydantic import ValidationError

from appleverse.config import settings
from appleverse.models import Apple
from appleverse.schemas.apple import (
    AppleListResponse,
    AppleResponse,
    ImageBatchRequest,
    ImageBatchResponse,
    ImageInfo,
    ImageLookupResponse,
    LocalPreviewResponse,
    Pagination,
    PreviewRecord,
)
from appleverse.services.catalogue import (
    SortField,
    SortOrder,
    active_generation_number,
    build_catalogue_query,
    get_active_apple,
    sort_expression,
)
from appleverse.services.import_service import (
    collect_local_data,
    find_images_for_accession,
    find_images_for_accessions,
)

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_PAGE_SIZE = 500


@router.get("", response_model=AppleListResponse)
async def list_apples(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=MAX_PAGE_SIZE),
    search: str | None = Query(default=None, description="Case-insensitive text search"),
    country: str | None = Query(default=None),
    genus: str | None = Query(default=None),
    has_images: bool | None = Query(default=None),
    sort: SortField = Query(default=SortField.SOURCE_ROW_INDEX),
    order: SortOrder = Query(default=SortOrder.ASC),
) -> AppleListResponse:
    """List apples in the active dataset, in spreadsheet order by default."""
    generation = await active_generation_number()
    if generation is None:
        return AppleListResponse(
            apples=[],
            pagination=Pagination(page=page, limit=limit, total=0, pages=0),
        )

    conditions = build_catalogue_query(
        generation, search=search, country=country, genus=genus, has_images=has_images
    )
    total = await Apple.find(conditions).count()
    apples = (
        await Apple.find(conditions)
        .sort(*sort_expression(sort, order))
        .skip((page - 1) * limit)
        .limit(limit)
        .to_list()
    )
    return AppleListResponse(
        apples=[AppleResponse.model_validate(apple) for apple in apples],
        pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
    )


@router.get("/find-image/{accession}", response_model=ImageLookupResponse)
async def find_image(accession: str) -> ImageLookupResponse:
    """Find image files whose name contains the accession code."""
    images = find_images_for_accession(settings.image_sources, accession)
    return ImageLookupResponse(
        accession=accession,
        images=[ImageInfo(name=image.name, path=image.path) for image in images],
        count=len(images),
    )


@router.post("/find-images-batch", response_model=ImageBatchResponse)
async def find_images_batch(request: ImageBatchRequest) -> ImageBatchResponse:
    """Find images for several accession codes at once."""
    found = find_images_for_accessions(settings.image_sources, request.accessions)
    return ImageBatchResponse(
        results={accession: [image.path for image in images] for accession, images in found.items()},
        found=len(found),
        total=len(request.accessions),
    )


@router.get("/preview-local", response_model=LocalPreviewResponse)
def preview_local() -> LocalPreviewResponse:
    """Read the local data directory without touching the database."""
    preview = collect_local_data(
        settings.data_dir,
        settings.image_sources,
        priority_sheets=settings.priority_sheets,
    )
    return LocalPreviewResponse(
        records=[PreviewRecord.model_validate(record) for record in preview.records],
        total_rows=preview.total_rows,
        skipped=preview.skipped,
        images_found=preview.images_found,
        images_matched=preview.images_matched,
    )


@router.get("/{apple_id}", response_model=AppleResponse)
async def get_apple(apple_id: str) -> AppleResponse:
    """Get one apple from the active dataset."""
    try:
        apple = await get_active_apple(PydanticObjectId(apple_id))
    except (InvalidId, ValidationError) as e:
        logger.debug("Invalid apple ID format: %s - %s", apple_id, e)
        apple = None

    if not apple:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Apple with ID {apple_id} not found",
        )
    return AppleResponse.model_validate(apple)
