"""Pydantic schemas for API request/response validation."""

from appleverse.schemas.apple import (
    AppleListResponse,
    AppleResponse,
    DatasetStatusResponse,
    ImageBatchRequest,
    ImageBatchResponse,
    ImageInfo,
    ImageLookupResponse,
    LocalPreviewResponse,
    Pagination,
    PreviewRecord,
)
from appleverse.schemas.export import AppleFlatExport, ExportFormat, ExportMetadata

__all__ = [
    "AppleListResponse",
    "AppleResponse",
    "DatasetStatusResponse",
    "ImageBatchRequest",
    "ImageBatchResponse",
    "ImageInfo",
    "ImageLookupResponse",
    "LocalPreviewResponse",
    "Pagination",
    "PreviewRecord",
    "AppleFlatExport",
    "ExportFormat",
    "ExportMetadata",
]
