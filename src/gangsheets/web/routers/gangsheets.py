"""Gangsheet endpoints."""

from fastapi import APIRouter, Query, Response, status

from gangsheets.contracts.dtos import GangsheetFilters, SortField, SortOrder
from gangsheets.domain.value_objects import GangsheetStatus
from gangsheets.web.dependencies import AssemblerDep, TenantDep
from gangsheets.web.schemas.common import PackingSettingsSchema, StatusEnum
from gangsheets.web.schemas.requests import (
    CreateGangsheetRequest,
    UpdateSettingsRequest,
)
from gangsheets.web.schemas.responses import (
    CreateGangsheetResponse,
    DownloadResponse,
    GangsheetListResponse,
    GangsheetResponse,
    PreviewResponse,
    StatusResponse,
)

router = APIRouter(prefix="/gangsheets", tags=["gangsheets"])


@router.get("", response_model=GangsheetListResponse)
async def list_gangsheets(
    tenant_id: TenantDep,
    assembler: AssemblerDep,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    status_filter: StatusEnum | None = Query(default=None, alias="status"),
    search: str | None = Query(default=None, max_length=255),
    sort_by: SortField = Query(default="created_at"),
    sort_order: SortOrder = Query(default="desc"),
) -> GangsheetListResponse:
    """List the tenant's gangsheets, newest first by default."""
    filters = GangsheetFilters(
        page=page,
        limit=limit,
        status=GangsheetStatus(status_filter.value) if status_filter else None,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    result = await assembler.list_gangsheets(tenant_id, filters)
    return GangsheetListResponse.from_page(result)


@router.post(
    "",
    response_model=CreateGangsheetResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_gangsheet(
    request: CreateGangsheetRequest,
    tenant_id: TenantDep,
    assembler: AssemblerDep,
) -> CreateGangsheetResponse:
    """Pack the orders' designs and start rendering the rolls."""
    outcome = await assembler.create_gangsheet(tenant_id, request.to_input())
    return CreateGangsheetResponse(
        gangsheet=GangsheetResponse.from_domain(outcome.gangsheet),
        message=outcome.message,
        warnings=outcome.placement.warnings,
    )


@router.post("/preview", response_model=PreviewResponse)
async def preview_gangsheet(
    request: CreateGangsheetRequest,
    tenant_id: TenantDep,
    assembler: AssemblerDep,
) -> PreviewResponse:
    """Compute the layout without saving or rendering anything."""
    outcome = await assembler.preview(tenant_id, request.to_input())
    return PreviewResponse.from_outcome(outcome)


@router.get("/settings", response_model=PackingSettingsSchema)
async def get_settings(
    tenant_id: TenantDep, assembler: AssemblerDep
) -> PackingSettingsSchema:
    """Effective default packing settings of the tenant."""
    settings = await assembler.get_default_settings(tenant_id)
    return PackingSettingsSchema.from_domain(settings)


@router.put("/settings", response_model=PackingSettingsSchema)
async def update_settings(
    request: UpdateSettingsRequest,
    tenant_id: TenantDep,
    assembler: AssemblerDep,
) -> PackingSettingsSchema:
    """Replace the tenant's default packing settings."""
    settings = await assembler.update_default_settings(tenant_id, request.to_domain())
    return PackingSettingsSchema.from_domain(settings)


@router.get("/{gangsheet_id}", response_model=GangsheetResponse)
async def get_gangsheet(
    gangsheet_id: int, tenant_id: TenantDep, assembler: AssemblerDep
) -> GangsheetResponse:
    gangsheet = await assembler.get_gangsheet(tenant_id, gangsheet_id)
    return GangsheetResponse.from_domain(gangsheet)


@router.get("/{gangsheet_id}/status", response_model=StatusResponse)
async def get_gangsheet_status(
    gangsheet_id: int, tenant_id: TenantDep, assembler: AssemblerDep
) -> StatusResponse:
    output = await assembler.get_gangsheet_status(tenant_id, gangsheet_id)
    return StatusResponse.from_output(output)


@router.get("/{gangsheet_id}/download", response_model=DownloadResponse)
async def download_gangsheet(
    gangsheet_id: int, tenant_id: TenantDep, assembler: AssemblerDep
) -> DownloadResponse:
    """Links to the rendered rolls. Only available once completed."""
    output = await assembler.download_gangsheet(tenant_id, gangsheet_id)
    return DownloadResponse.from_output(output)


@router.delete("/{gangsheet_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_gangsheet(
    gangsheet_id: int, tenant_id: TenantDep, assembler: AssemblerDep
) -> Response:
    """Delete the gangsheet, its rolls and its rendered files."""
    await assembler.delete_gangsheet(tenant_id, gangsheet_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
