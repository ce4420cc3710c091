"""Pydantic schemas for the REST API."""

from gangsheets.web.schemas.common import PackingSettingsSchema, StatusEnum
from gangsheets.web.schemas.requests import (
    CreateGangsheetRequest,
    UpdateSettingsRequest,
)
from gangsheets.web.schemas.responses import (
    CreateGangsheetResponse,
    DownloadResponse,
    ErrorResponseSchema,
    GangsheetListResponse,
    GangsheetResponse,
    GangsheetSummarySchema,
    InvalidItemSchema,
    PlacementFailureSchema,
    PlacementSchema,
    PreviewResponse,
    RollDownloadSchema,
    RollSchema,
    StatusResponse,
)

__all__ = [
    # Common
    "PackingSettingsSchema",
    "StatusEnum",
    # Requests
    "CreateGangsheetRequest",
    "UpdateSettingsRequest",
    # Responses
    "CreateGangsheetResponse",
    "DownloadResponse",
    "ErrorResponseSchema",
    "GangsheetListResponse",
    "GangsheetResponse",
    "GangsheetSummarySchema",
    "InvalidItemSchema",
    "PlacementFailureSchema",
    "PlacementSchema",
    "PreviewResponse",
    "RollDownloadSchema",
    "RollSchema",
    "StatusResponse",
]
