"""Export endpoints for downloading the apple catalogue."""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse, Response

from appleverse.models import Apple
from appleverse.schemas.export import AppleFlatExport, ExportFormat
from appleverse.services import export_service
from appleverse.services.catalogue import (
    SortField,
    SortOrder,
    active_generation_number,
    build_catalogue_query,
    filters_applied,
    sort_expression,
)

router = APIRouter()


@router.get("/apples")
async def export_apples(
    format: ExportFormat = Query(default=ExportFormat.JSON, description="Export format"),
    search: str | None = Query(default=None),
    country: str | None = Query(default=None),
    genus: str | None = Query(default=None),
    has_images: bool | None = Query(default=None),
    sort: SortField = Query(default=SortField.SOURCE_ROW_INDEX),
    order: SortOrder = Query(default=SortOrder.ASC),
) -> Response:
    """Export the active catalogue.

    Returns apple data in the specified format (CSV, XLSX, YAML, or JSON).
    """
    generation = await active_generation_number()
    apples: list[Apple] = []
    if generation is not None:
        conditions = build_catalogue_query(
            generation, search=search, country=country, genus=genus, has_images=has_images
        )
        apples = await Apple.find(conditions).sort(*sort_expression(sort, order)).to_list()

    applied = filters_applied(search=search, country=country, genus=genus, has_images=has_images)
    headers = {
        "Content-Disposition": f"attachment; filename={export_service.generate_filename('apples', format)}"
    }

    if format in (ExportFormat.CSV, ExportFormat.XLSX):
        flat_apples = [AppleFlatExport.from_apple(apple) for apple in apples]
        if format == ExportFormat.CSV:
            content = export_service.export_apples_to_csv(flat_apples)
        else:
            content = export_service.export_apples_to_xlsx(flat_apples)
        return Response(content=content, media_type=export_service.get_content_type(format), headers=headers)

    apple_dicts = []
    for apple in apples:
        apple_dict = apple.model_dump(mode="json", exclude={"id", "revision_id"})
        apple_dict = {"id": str(apple.id), **apple_dict}
        apple_dicts.append(apple_dict)

    if format == ExportFormat.YAML:
        content = export_service.export_apples_to_yaml(apple_dicts, generation, applied)
        return Response(content=content, media_type=export_service.get_content_type(format), headers=headers)

    export_data = export_service.export_apples_to_json(apple_dicts, generation, applied)
    return JSONResponse(content=export_data, headers=headers)
