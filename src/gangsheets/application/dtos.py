"""Data Transfer Objects for the application layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from gangsheets.domain import (
    DesignItem,
    Gangsheet,
    GangsheetStatus,
    InvalidItem,
    PackingSettings,
    PlacementResult,
)

MAX_LINE_QUANTITY = 1000
MAX_DESIGN_ITEMS = 10_000


@dataclass
class CreateGangsheetInput:
    """Input DTO for gangsheet creation and preview.

    Attributes:
        order_ids: Orders whose designs should be packed.
        name: Optional display name; generated from the clock when omitted.
        settings: Optional full settings override. Replaces tenant defaults
            as a whole, never field by field.
        group_by_modification: Cluster designs sharing a print location.
        product_filter: Optional product ids to restrict the packed lines.
        quantity_overrides: Replacement copy counts keyed by order line id.
    """

    order_ids: list[int]
    name: str | None = None
    settings: PackingSettings | None = None
    group_by_modification: bool = False
    product_filter: frozenset[int] | None = None
    quantity_overrides: Mapping[int, int] = field(default_factory=dict)

    def validate(self) -> list[str]:
        """Validate input and return list of error messages."""
        errors: list[str] = []
        if not self.order_ids:
            errors.append("At least one order ID is required")
        if any(order_id <= 0 for order_id in self.order_ids):
            errors.append("Order IDs must be positive")
        if self.name is not None and not self.name.strip():
            errors.append("Name must not be blank")
        if self.name is not None and len(self.name) > 255:
            errors.append("Name must be at most 255 characters")
        if any(quantity < 0 for quantity in self.quantity_overrides.values()):
            errors.append("Quantity overrides must be non-negative")
        if any(q > MAX_LINE_QUANTITY for q in self.quantity_overrides.values()):
            errors.append(f"Quantity overrides must be at most {MAX_LINE_QUANTITY}")
        return errors


@dataclass
class ExtractionResult:
    """Design items extracted for a set of orders.

    Attributes:
        items: Placeable items in deterministic order.
        unresolved_order_ids: Requested orders that yielded no items.
        invalid_items: Records excluded because they cannot be sized.
    """

    items: list[DesignItem] = field(default_factory=list)
    unresolved_order_ids: list[int] = field(default_factory=list)
    invalid_items: list[InvalidItem] = field(default_factory=list)


@dataclass
class PlacementOutcome:
    """Computed layout plus everything the client needs to judge it.

    Returned by preview directly and embedded in creation results.
    """

    settings: PackingSettings
    result: PlacementResult
    unresolved_order_ids: list[int] = field(default_factory=list)
    invalid_items: list[InvalidItem] = field(default_factory=list)

    @property
    def warnings(self) -> list[str]:
        """Human-readable partial-failure messages."""
        messages = [
            f"Order {order_id} has no resolvable design items"
            for order_id in self.unresolved_order_ids
        ]
        messages.extend(
            f"Design '{item.design_item_id}' (order {item.order_id}) was skipped: "
            f"{item.reason}"
            for item in self.invalid_items
        )
        messages.extend(
            f"Design '{failure.design_item_id}' (order {failure.order_id}) "
            f"could not be placed: {failure.message}"
            for failure in self.result.failures
        )
        return messages


@dataclass
class GangsheetOutcome:
    """Result of creating a gangsheet."""

    gangsheet: Gangsheet
    placement: PlacementOutcome
    message: str = "Gangsheet creation started"


@dataclass
class GangsheetStatusOutput:
    """Status snapshot used for polling."""

    id: int
    status: GangsheetStatus
    progress: int
    total_designs: int
    processed_designs: int
    total_rolls: int
    error_message: str | None = None
    download_url: str | None = None

    @classmethod
    def from_gangsheet(cls, gangsheet: Gangsheet) -> GangsheetStatusOutput:
        assert gangsheet.id is not None
        return cls(
            id=gangsheet.id,
            status=gangsheet.status,
            progress=gangsheet.progress,
            total_designs=gangsheet.total_designs,
            processed_designs=gangsheet.processed_designs,
            total_rolls=gangsheet.total_rolls,
            error_message=gangsheet.error_message,
            download_url=gangsheet.download_url,
        )


@dataclass(frozen=True)
class RollDownload:
    """Download link for one rendered roll."""

    roll_number: int
    download_url: str
    width_px: int
    height_px: int
    design_count: int


@dataclass
class DownloadOutput:
    """Links to a completed gangsheet's archive and individual rolls."""

    download_url: str
    rolls: list[RollDownload] = field(default_factory=list)
    expires_in: int = 3600
