"""Dataset status endpoint."""

from fastapi import APIRouter

from appleverse.models import Apple, DatasetGeneration
from appleverse.schemas.apple import DatasetStatusResponse

router = APIRouter()


@router.get("/status", response_model=DatasetStatusResponse)
async def dataset_status() -> DatasetStatusResponse:
    """Summary of the active dataset generation."""
    active = await DatasetGeneration.get_active()
    if active is None:
        return DatasetStatusResponse(active=False)

    record_count = await Apple.find(Apple.generation == active.generation).count()
    return DatasetStatusResponse(
        active=True,
        generation=active.generation,
        source_file=active.source_file,
        record_count=record_count,
        total_rows=active.total_rows,
        imported=active.imported,
        skipped=active.skipped,
        failed=active.failed,
        records_with_images=active.records_with_images,
        elapsed_seconds=active.elapsed_seconds,
        activated_at=active.activated_at,
    )
