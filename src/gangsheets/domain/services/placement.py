"""Shelf placement of design artwork onto fixed-width rolls.

The engine lays designs left-to-right in horizontal rows (shelves). A row is
as tall as its tallest design plus the gap; when a design would overflow the
roll width a new row starts below, and when a row would overflow the roll
length a new roll starts. Designs are never rotated and are placed in the
order given, so the same input always produces the same layout. The engine
performs no I/O and keeps no state between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from gangsheets.domain.exceptions import NoPlaceableItemsError
from gangsheets.domain.units import to_inches
from gangsheets.domain.value_objects import (
    DesignItem,
    PackingSettings,
    Placement,
    PlacementFailure,
    PlacementResult,
    Roll,
)

logger = logging.getLogger(__name__)

OVERSIZED = "oversized"


def group_items(items: Sequence[DesignItem]) -> list[DesignItem]:
    """Cluster items sharing a group key, keeping first-seen group order.

    The partition is stable: items keep their relative order inside each
    group. Items without a group key form one group of their own.
    """
    groups: dict[str | None, list[DesignItem]] = {}
    for item in items:
        groups.setdefault(item.group_key, []).append(item)
    return [item for group in groups.values() for item in group]


@dataclass
class _RollState:
    """Cursor state for the roll currently being filled."""

    number: int
    x: int
    y: int
    row_height: int = 0
    placements: list[Placement] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.placements

    @property
    def used_height(self) -> int:
        return self.y + self.row_height

    def to_roll(self) -> Roll:
        return Roll(
            roll_number=self.number,
            max_height_used=self.used_height,
            placements=tuple(self.placements),
        )


class ShelfPlacementEngine:
    """Greedy, deterministic shelf packer for gangsheet rolls.

    Example:
        >>> engine = ShelfPlacementEngine()
        >>> result = engine.place(items, PackingSettings.default())
        >>> result.total_rolls
        1
    """

    def place(
        self,
        items: Sequence[DesignItem],
        settings: PackingSettings,
        group_by_modification: bool = False,
    ) -> PlacementResult:
        """Pack design items onto as many rolls as needed.

        Args:
            items: Design items in deterministic extraction order.
            settings: Roll dimensions, DPI, gap and margins.
            group_by_modification: Cluster items by group key before packing.

        Returns:
            PlacementResult with the non-empty rolls in order and one failure
            per item that cannot fit even on an empty roll.

        Raises:
            NoPlaceableItemsError: If ``items`` is empty.
        """
        if not items:
            raise NoPlaceableItemsError("No design items to place")

        sequence = group_items(items) if group_by_modification else list(items)

        logger.debug(
            "Placing %d items on %s\" rolls (length %s, %d dpi)",
            len(sequence),
            to_inches(settings.roll_width),
            "unbounded" if settings.is_unbounded else to_inches(settings.roll_length),
            settings.dpi,
        )

        rolls: list[Roll] = []
        failures: list[PlacementFailure] = []
        current = self._new_roll(1, settings)

        for item in sequence:
            width = item.width_physical(settings.dpi)
            height = item.height_physical(settings.dpi)

            if width > settings.usable_width:
                failures.append(
                    self._oversized(
                        item,
                        f"Design is {to_inches(width)}\" wide but the roll only "
                        f"fits {to_inches(settings.usable_width)}\"",
                    )
                )
                continue

            if (
                settings.roll_length is not None
                and settings.margin_top + height > settings.roll_length
            ):
                failures.append(
                    self._oversized(
                        item,
                        f"Design is {to_inches(height)}\" tall but the roll "
                        f"length is {to_inches(settings.roll_length)}\"",
                    )
                )
                continue

            effective_width = width + settings.gap
            effective_height = height + settings.gap

            if current.x + effective_width > settings.roll_width:
                current.y += current.row_height
                current.x = settings.margin_left
                current.row_height = 0

            if (
                settings.roll_length is not None
                and not current.is_empty
                and current.y + effective_height > settings.roll_length
            ):
                logger.debug(
                    "Roll %d full at %d units, starting roll %d",
                    current.number,
                    current.used_height,
                    current.number + 1,
                )
                rolls.append(current.to_roll())
                current = self._new_roll(current.number + 1, settings)

            current.placements.append(
                Placement(
                    design_item_id=item.id,
                    order_id=item.order_id,
                    x=current.x,
                    y=current.y,
                    width=width,
                    height=height,
                    group_key=item.group_key,
                    image_url=item.image_url,
                )
            )
            current.x += effective_width
            current.row_height = max(current.row_height, effective_height)

        if not current.is_empty:
            rolls.append(current.to_roll())

        if failures:
            logger.warning(
                "%d of %d design items could not be placed", len(failures), len(sequence)
            )

        return PlacementResult(rolls=tuple(rolls), failures=tuple(failures))

    def _new_roll(self, number: int, settings: PackingSettings) -> _RollState:
        return _RollState(number=number, x=settings.margin_left, y=settings.margin_top)

    def _oversized(self, item: DesignItem, message: str) -> PlacementFailure:
        logger.debug("Item '%s' is oversized: %s", item.id, message)
        return PlacementFailure(
            design_item_id=item.id,
            order_id=item.order_id,
            reason=OVERSIZED,
            message=message,
        )
