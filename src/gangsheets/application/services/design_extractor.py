"""Design item extractor service.

Turns requested order ids into the ordered list of placeable design items.
Each order line may ask for several printed copies; every copy becomes its own
design item so the placement engine never has to know about quantities.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Mapping

from gangsheets.application.dtos import MAX_DESIGN_ITEMS, ExtractionResult
from gangsheets.domain.exceptions import ValidationError
from gangsheets.domain.value_objects import DesignItem, InvalidItem

if TYPE_CHECKING:
    from gangsheets.contracts.dtos import DesignRecord
    from gangsheets.contracts.protocols import DesignLookupProtocol

logger = logging.getLogger(__name__)


def copy_id(design_item_id: str, copy_number: int, quantity: int) -> str:
    """Identifier of one printed copy of an order line's design."""
    if quantity == 1:
        return design_item_id
    return f"{design_item_id}#{copy_number}"


class DesignItemExtractor:
    """Resolves orders to design items in a deterministic order.

    Items are ordered by ascending order id, then by line position inside the
    order (ties keep the order the lookup reported them in), then by copy
    number. The same orders therefore always produce the same item sequence.
    """

    def __init__(self, lookup: "DesignLookupProtocol") -> None:
        self._lookup = lookup

    async def extract(
        self,
        tenant_id: int,
        order_ids: Iterable[int],
        product_filter: frozenset[int] | None = None,
        quantity_overrides: Mapping[int, int] | None = None,
    ) -> ExtractionResult:
        """Load and expand the design items of ``order_ids``.

        Args:
            tenant_id: Tenant owning the orders.
            order_ids: Orders to extract. Duplicates are collapsed.
            product_filter: Only keep lines whose product id is in the set.
            quantity_overrides: Replacement copy counts keyed by line item id.
                A count of 0 removes the line.

        Returns:
            ExtractionResult with the items, the orders that yielded none, and
            the records excluded for invalid dimensions.

        Raises:
            ValidationError: If no order ids are given, or the copies to print
                exceed MAX_DESIGN_ITEMS.
        """
        requested = sorted(set(order_ids))
        if not requested:
            raise ValidationError("At least one order ID is required")

        overrides = quantity_overrides or {}
        records = await self._lookup.get_design_items_for_orders(
            tenant_id, requested, product_filter
        )

        wanted = set(requested)
        ordered = sorted(
            (
                (record.order_id, record.position, arrival, record)
                for arrival, record in enumerate(records)
                if record.order_id in wanted
            ),
            key=lambda entry: entry[:3],
        )

        result = ExtractionResult()
        resolved: set[int] = set()
        for _, _, _, record in ordered:
            if product_filter is not None and record.product_id not in product_filter:
                continue
            if record.width_px <= 0 or record.height_px <= 0:
                result.invalid_items.append(
                    InvalidItem(
                        design_item_id=record.design_item_id,
                        order_id=record.order_id,
                        reason=(
                            f"invalid dimensions {record.width_px}x{record.height_px}px"
                        ),
                    )
                )
                continue

            quantity = self._quantity(record, overrides)
            if len(result.items) + quantity > MAX_DESIGN_ITEMS:
                raise ValidationError(
                    f"Orders expand to more than {MAX_DESIGN_ITEMS} design items"
                )
            items = self._expand(record, quantity)
            if items:
                resolved.add(record.order_id)
                result.items.extend(items)

        result.unresolved_order_ids = [o for o in requested if o not in resolved]

        if result.unresolved_order_ids:
            logger.warning(
                "Orders without design items for tenant %d: %s",
                tenant_id,
                result.unresolved_order_ids,
            )
        if result.invalid_items:
            logger.warning(
                "%d design records skipped for invalid dimensions",
                len(result.invalid_items),
            )
        logger.debug(
            "Extracted %d design items from %d orders",
            len(result.items),
            len(requested),
        )
        return result

    @staticmethod
    def _quantity(record: "DesignRecord", overrides: Mapping[int, int]) -> int:
        if record.line_item_id is not None and record.line_item_id in overrides:
            return overrides[record.line_item_id]
        return record.quantity

    @staticmethod
    def _expand(record: "DesignRecord", quantity: int) -> list[DesignItem]:
        return [
            DesignItem(
                id=copy_id(record.design_item_id, copy_number, quantity),
                order_id=record.order_id,
                group_key=record.group_key,
                width_px=record.width_px,
                height_px=record.height_px,
                image_url=record.image_url,
                line_item_id=record.line_item_id,
            )
            for copy_number in range(1, quantity + 1)
        ]
