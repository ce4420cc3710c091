"""Pydantic schema for gangsheet job files.

A job file describes one packing run for the CLI: the packing settings, the
design records of the orders to pack, and which of those orders to include.
Lengths are given in inches.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from gangsheets.application.dtos import MAX_LINE_QUANTITY
from gangsheets.contracts.dtos import DesignRecord
from gangsheets.domain.value_objects import PackingSettings


class PackingSettingsConfig(BaseModel):
    """Packing settings in inches."""

    model_config = ConfigDict(extra="forbid")

    roll_width: float = Field(..., gt=0, description="Roll width in inches")
    roll_length: float | None = Field(
        default=None, gt=0, description="Maximum roll length in inches (null: unbounded)"
    )
    dpi: int = Field(default=300, gt=0, le=2400)
    gap: float = Field(default=0.0, ge=0)
    margin_top: float = Field(default=0.0, ge=0)
    margin_left: float = Field(default=0.0, ge=0)
    border: bool = False
    border_size: float = Field(default=0.0, ge=0)
    border_color: str = Field(default="red", min_length=1, max_length=32)

    @model_validator(mode="after")
    def check_margin_fits_roll(self) -> "PackingSettingsConfig":
        if self.margin_left >= self.roll_width:
            raise ValueError("margin_left must be smaller than roll_width")
        return self

    def to_domain(self) -> PackingSettings:
        return PackingSettings.from_inches(**self.model_dump())


class DesignConfig(BaseModel):
    """One order line's design artwork."""

    model_config = ConfigDict(extra="forbid")

    order_id: int = Field(..., gt=0)
    design_item_id: str = Field(..., min_length=1)
    width_px: int
    height_px: int
    image_url: str | None = None
    line_item_id: int | None = None
    product_id: int | None = None
    position: int = 0
    quantity: int = Field(default=1, ge=0, le=MAX_LINE_QUANTITY)
    group_key: str | None = None

    def to_record(self) -> DesignRecord:
        return DesignRecord(**self.model_dump())


class PackJobConfig(BaseModel):
    """Root model of a job file."""

    model_config = ConfigDict(extra="forbid")

    schema_version: Literal["1.0"] = "1.0"
    tenant_id: int = Field(default=1, gt=0)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    order_ids: list[int] | None = Field(
        default=None, description="Orders to pack (default: every order in designs)"
    )
    settings: PackingSettingsConfig | None = None
    group_by_modification: bool = False
    product_filter: list[int] | None = None
    quantity_overrides: dict[
        int, Annotated[int, Field(ge=0, le=MAX_LINE_QUANTITY)]
    ] = Field(default_factory=dict)
    designs: list[DesignConfig] = Field(..., min_length=1)

    def resolved_order_ids(self) -> list[int]:
        if self.order_ids is not None:
            return self.order_ids
        return sorted({design.order_id for design in self.designs})
