"""Pydantic request schemas for the REST API."""

from typing import Annotated

from pydantic import BaseModel, Field

from gangsheets.application.dtos import MAX_LINE_QUANTITY, CreateGangsheetInput
from gangsheets.web.schemas.common import PackingSettingsSchema

LineQuantity = Annotated[int, Field(ge=0, le=MAX_LINE_QUANTITY)]


class CreateGangsheetRequest(BaseModel):
    """Request for creating or previewing a gangsheet."""

    order_ids: list[int] = Field(
        ..., min_length=1, max_length=1000, description="Orders to pack"
    )
    name: str | None = Field(
        default=None, min_length=1, max_length=255, description="Display name"
    )
    settings: PackingSettingsSchema | None = Field(
        default=None,
        description="Settings for this run; replaces the tenant defaults entirely",
    )
    group_by_modification: bool = Field(
        default=False, description="Cluster designs sharing a print location"
    )
    product_ids: list[int] | None = Field(
        default=None, description="Only pack order lines of these products"
    )
    quantity_overrides: dict[int, LineQuantity] = Field(
        default_factory=dict,
        description="Replacement copy counts keyed by order line id",
    )

    def to_input(self) -> CreateGangsheetInput:
        return CreateGangsheetInput(
            order_ids=list(self.order_ids),
            name=self.name,
            settings=self.settings.to_domain() if self.settings else None,
            group_by_modification=self.group_by_modification,
            product_filter=(
                frozenset(self.product_ids) if self.product_ids is not None else None
            ),
            quantity_overrides=dict(self.quantity_overrides),
        )


class UpdateSettingsRequest(PackingSettingsSchema):
    """Request for replacing the tenant's default packing settings."""
