"""Shared Data Transfer Objects for cross-layer communication.

These DTOs travel between the application layer and the infrastructure
adapters (design catalogs, repositories, renderers) without either side
importing the other.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from gangsheets.domain.value_objects import GangsheetStatus


@dataclass(frozen=True)
class DesignRecord:
    """One order line's design artwork, as reported by the design lookup.

    Attributes:
        order_id: Order the line belongs to.
        design_item_id: Stable identifier of the order line's design binding.
        width_px: Artwork width in pixels.
        height_px: Artwork height in pixels.
        image_url: Where the artwork can be fetched.
        line_item_id: Order line identifier, used for quantity overrides.
        product_id: Product of the order line, used by product filters.
        position: Order of the line within its order.
        quantity: Number of printed copies.
        group_key: Print location / modification name.
    """

    order_id: int
    design_item_id: str
    width_px: int
    height_px: int
    image_url: str | None = None
    line_item_id: int | None = None
    product_id: int | None = None
    position: int = 0
    quantity: int = 1
    group_key: str | None = None


@dataclass(frozen=True)
class RenderedRoll:
    """Rendered output for a single roll, before it is stored."""

    roll_number: int
    content: bytes
    media_type: str
    extension: str
    width_px: int
    height_px: int


SortField = Literal["created_at", "name", "status"]
SortOrder = Literal["asc", "desc"]


@dataclass(frozen=True)
class GangsheetFilters:
    """Listing filters and pagination for gangsheets."""

    page: int = 1
    limit: int = 20
    status: GangsheetStatus | None = None
    search: str | None = None
    sort_by: SortField = "created_at"
    sort_order: SortOrder = "desc"

    def validate(self) -> list[str]:
        """Return a list of validation error messages."""
        errors: list[str] = []
        if self.page < 1:
            errors.append("Page must be 1 or greater")
        if not 1 <= self.limit <= 100:
            errors.append("Limit must be between 1 and 100")
        if self.sort_by not in ("created_at", "name", "status"):
            errors.append(f"Cannot sort by '{self.sort_by}'")
        if self.sort_order not in ("asc", "desc"):
            errors.append("Sort order must be 'asc' or 'desc'")
        return errors

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class GangsheetSummary:
    """Lightweight listing row."""

    id: int
    name: str
    status: GangsheetStatus
    total_designs: int
    total_rolls: int
    download_url: str | None
    created_at: datetime


@dataclass
class GangsheetPage:
    """A page of gangsheet summaries."""

    items: list[GangsheetSummary] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit
