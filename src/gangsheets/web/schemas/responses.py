"""Pydantic response schemas for the REST API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from gangsheets.application.dtos import (
    DownloadOutput,
    GangsheetStatusOutput,
    PlacementOutcome,
)
from gangsheets.contracts.dtos import GangsheetPage
from gangsheets.domain.entities import Gangsheet
from gangsheets.domain.units import to_inches
from gangsheets.domain.value_objects import (
    InvalidItem,
    Placement,
    PlacementFailure,
    Roll,
)
from gangsheets.web.schemas.common import PackingSettingsSchema, StatusEnum


class PlacementSchema(BaseModel):
    """A design placed on a roll; lengths in inches from the roll's top-left."""

    design_item_id: str = Field(..., description="Placed design copy")
    order_id: int = Field(..., description="Order the design belongs to")
    x: float = Field(..., description="Left edge in inches")
    y: float = Field(..., description="Top edge in inches")
    width: float = Field(..., description="Printed width in inches")
    height: float = Field(..., description="Printed height in inches")
    group_key: str | None = Field(default=None, description="Print location")
    image_url: str | None = Field(default=None, description="Artwork URL")

    @classmethod
    def from_domain(cls, placement: Placement) -> "PlacementSchema":
        return cls(
            design_item_id=placement.design_item_id,
            order_id=placement.order_id,
            x=to_inches(placement.x),
            y=to_inches(placement.y),
            width=to_inches(placement.width),
            height=to_inches(placement.height),
            group_key=placement.group_key,
            image_url=placement.image_url,
        )


class RollSchema(BaseModel):
    """One packed roll."""

    roll_number: int = Field(..., description="1-based roll number")
    length_used: float = Field(..., description="Consumed length in inches")
    design_count: int = Field(..., description="Designs on this roll")
    order_ids: list[int] = Field(..., description="Orders present on this roll")
    placements: list[PlacementSchema] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, roll: Roll) -> "RollSchema":
        return cls(
            roll_number=roll.roll_number,
            length_used=to_inches(roll.max_height_used),
            design_count=roll.design_count,
            order_ids=list(roll.order_ids),
            placements=[PlacementSchema.from_domain(p) for p in roll.placements],
        )


class PlacementFailureSchema(BaseModel):
    """A design that could not be placed."""

    design_item_id: str
    order_id: int
    reason: str
    message: str

    @classmethod
    def from_domain(cls, failure: PlacementFailure) -> "PlacementFailureSchema":
        return cls(
            design_item_id=failure.design_item_id,
            order_id=failure.order_id,
            reason=failure.reason,
            message=failure.message,
        )


class InvalidItemSchema(BaseModel):
    """A design record excluded before placement."""

    design_item_id: str
    order_id: int
    reason: str

    @classmethod
    def from_domain(cls, item: InvalidItem) -> "InvalidItemSchema":
        return cls(
            design_item_id=item.design_item_id,
            order_id=item.order_id,
            reason=item.reason,
        )


class PreviewResponse(BaseModel):
    """Response for a layout preview."""

    settings: PackingSettingsSchema
    total_designs: int
    total_rolls: int
    rolls: list[RollSchema] = Field(default_factory=list)
    failures: list[PlacementFailureSchema] = Field(default_factory=list)
    invalid_items: list[InvalidItemSchema] = Field(default_factory=list)
    unresolved_order_ids: list[int] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def from_outcome(cls, outcome: PlacementOutcome) -> "PreviewResponse":
        return cls(
            settings=PackingSettingsSchema.from_domain(outcome.settings),
            total_designs=outcome.result.total_designs,
            total_rolls=outcome.result.total_rolls,
            rolls=[RollSchema.from_domain(r) for r in outcome.result.rolls],
            failures=[
                PlacementFailureSchema.from_domain(f) for f in outcome.result.failures
            ],
            invalid_items=[
                InvalidItemSchema.from_domain(i) for i in outcome.invalid_items
            ],
            unresolved_order_ids=list(outcome.unresolved_order_ids),
            warnings=outcome.warnings,
        )


class GangsheetResponse(BaseModel):
    """A persisted gangsheet."""

    id: int
    name: str
    status: StatusEnum
    progress: int = Field(..., ge=0, le=100, description="Completion percentage")
    order_ids: list[int]
    skipped_order_ids: list[int] = Field(default_factory=list)
    settings: PackingSettingsSchema
    total_designs: int
    total_rolls: int
    rolls: list[RollSchema] = Field(default_factory=list)
    failures: list[PlacementFailureSchema] = Field(default_factory=list)
    download_url: str | None = None
    file_urls: list[str] = Field(default_factory=list)
    error_message: str | None = None
    created_at: datetime | None = None
    completed_at: datetime | None = None

    @classmethod
    def from_domain(cls, gangsheet: Gangsheet) -> "GangsheetResponse":
        assert gangsheet.id is not None
        return cls(
            id=gangsheet.id,
            name=gangsheet.name,
            status=StatusEnum(gangsheet.status.value),
            progress=gangsheet.progress,
            order_ids=list(gangsheet.order_ids),
            skipped_order_ids=list(gangsheet.skipped_order_ids),
            settings=PackingSettingsSchema.from_domain(gangsheet.settings),
            total_designs=gangsheet.total_designs,
            total_rolls=gangsheet.total_rolls,
            rolls=[RollSchema.from_domain(r) for r in gangsheet.result.rolls],
            failures=[
                PlacementFailureSchema.from_domain(f)
                for f in gangsheet.result.failures
            ],
            download_url=gangsheet.download_url,
            file_urls=list(gangsheet.file_urls),
            error_message=gangsheet.error_message,
            created_at=gangsheet.created_at,
            completed_at=gangsheet.completed_at,
        )


class CreateGangsheetResponse(BaseModel):
    """Response for gangsheet creation."""

    gangsheet: GangsheetResponse
    message: str
    warnings: list[str] = Field(default_factory=list)


class StatusResponse(BaseModel):
    """Gangsheet status for polling."""

    id: int
    status: StatusEnum
    progress: int
    total_designs: int
    processed_designs: int
    total_rolls: int
    error_message: str | None = None
    download_url: str | None = None

    @classmethod
    def from_output(cls, output: GangsheetStatusOutput) -> "StatusResponse":
        return cls(
            id=output.id,
            status=StatusEnum(output.status.value),
            progress=output.progress,
            total_designs=output.total_designs,
            processed_designs=output.processed_designs,
            total_rolls=output.total_rolls,
            error_message=output.error_message,
            download_url=output.download_url,
        )


class RollDownloadSchema(BaseModel):
    """Download link of one rendered roll."""

    roll_number: int
    download_url: str
    width_px: int
    height_px: int
    design_count: int


class DownloadResponse(BaseModel):
    """Download links of a completed gangsheet."""

    download_url: str = Field(..., description="ZIP archive of all rolls")
    rolls: list[RollDownloadSchema] = Field(default_factory=list)
    expires_in: int = Field(..., description="Seconds the links stay valid")

    @classmethod
    def from_output(cls, output: DownloadOutput) -> "DownloadResponse":
        return cls(
            download_url=output.download_url,
            rolls=[
                RollDownloadSchema(
                    roll_number=r.roll_number,
                    download_url=r.download_url,
                    width_px=r.width_px,
                    height_px=r.height_px,
                    design_count=r.design_count,
                )
                for r in output.rolls
            ],
            expires_in=output.expires_in,
        )


class GangsheetSummarySchema(BaseModel):
    """Listing row."""

    id: int
    name: str
    status: StatusEnum
    total_designs: int
    total_rolls: int
    download_url: str | None = None
    created_at: datetime


class GangsheetListResponse(BaseModel):
    """One page of gangsheets."""

    items: list[GangsheetSummarySchema] = Field(default_factory=list)
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def from_page(cls, page: GangsheetPage) -> "GangsheetListResponse":
        return cls(
            items=[
                GangsheetSummarySchema(
                    id=s.id,
                    name=s.name,
                    status=StatusEnum(s.status.value),
                    total_designs=s.total_designs,
                    total_rolls=s.total_rolls,
                    download_url=s.download_url,
                    created_at=s.created_at,
                )
                for s in page.items
            ],
            total=page.total,
            page=page.page,
            limit=page.limit,
            total_pages=page.total_pages,
        )


class ErrorResponseSchema(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
    error_type: str = Field(..., description="Error category")
    details: list[dict[str, Any]] | dict[str, Any] | None = Field(
        default=None, description="Additional details"
    )
