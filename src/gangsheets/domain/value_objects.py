"""Value objects for the gangsheet domain.

All physical lengths are integers in hundredths of an inch (see
:mod:`gangsheets.domain.units`). All dataclasses are frozen so placement
results can be shared between concurrent requests without copying.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .exceptions import InvalidStatusTransition, ValidationError
from .units import px_to_units, to_inches, to_units


class GangsheetStatus(str, Enum):
    """Lifecycle states of a persisted gangsheet."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def label(self) -> str:
        """Human-readable label."""
        return self.value.capitalize()

    @property
    def is_terminal(self) -> bool:
        return self in (GangsheetStatus.COMPLETED, GangsheetStatus.FAILED)

    def can_transition_to(self, target: GangsheetStatus) -> bool:
        return target in _ALLOWED_TRANSITIONS[self]

    def ensure_transition(self, target: GangsheetStatus) -> None:
        """Raise InvalidStatusTransition unless ``target`` may follow this state."""
        if not self.can_transition_to(target):
            raise InvalidStatusTransition(self.value, target.value)


_ALLOWED_TRANSITIONS: dict[GangsheetStatus, frozenset[GangsheetStatus]] = {
    GangsheetStatus.PENDING: frozenset(
        {GangsheetStatus.PROCESSING, GangsheetStatus.FAILED}
    ),
    GangsheetStatus.PROCESSING: frozenset(
        {GangsheetStatus.COMPLETED, GangsheetStatus.FAILED}
    ),
    GangsheetStatus.COMPLETED: frozenset(),
    GangsheetStatus.FAILED: frozenset(),
}


@dataclass(frozen=True)
class PackingSettings:
    """Roll and spacing configuration consumed by the placement engine.

    Attributes:
        roll_width: Roll width in hundredths of an inch.
        roll_length: Maximum length per roll, or None for an unbounded roll.
        dpi: Dots per inch used to convert artwork pixels to physical size.
        gap: Spacing added after every design, horizontally and vertically.
        margin_top: Unused band at the top of each roll.
        margin_left: Unused band at the left edge of each roll.
        border: Whether rendered rolls outline each design.
        border_size: Outline stroke width.
        border_color: Outline color (CSS color name or hex).
    """

    roll_width: int
    roll_length: int | None
    dpi: int
    gap: int = 0
    margin_top: int = 0
    margin_left: int = 0
    border: bool = False
    border_size: int = 0
    border_color: str = "red"

    def __post_init__(self) -> None:
        errors = self.validate()
        if errors:
            raise ValidationError(errors)

    def validate(self) -> list[str]:
        """Return a list of validation error messages (empty when valid)."""
        errors: list[str] = []
        if self.roll_width <= 0:
            errors.append("Roll width must be positive")
        if self.roll_length is not None and self.roll_length <= 0:
            errors.append("Roll length must be positive or unbounded")
        if self.dpi <= 0:
            errors.append("DPI must be positive")
        if self.gap < 0:
            errors.append("Gap must be non-negative")
        if self.margin_top < 0 or self.margin_left < 0:
            errors.append("Margins must be non-negative")
        if self.margin_left >= self.roll_width:
            errors.append("Left margin must be smaller than the roll width")
        if self.border_size < 0:
            errors.append("Border size must be non-negative")
        return errors

    @property
    def is_unbounded(self) -> bool:
        return self.roll_length is None

    @property
    def usable_width(self) -> int:
        """Width available to artwork after the left margin."""
        return self.roll_width - self.margin_left

    @classmethod
    def default(cls) -> PackingSettings:
        """System defaults used when a tenant has not customized settings.

        22" x 60" rolls at 300 DPI with a 0.3" gap and a 0.1" red border.
        """
        return cls(
            roll_width=2200,
            roll_length=6000,
            dpi=300,
            gap=30,
            margin_top=0,
            margin_left=0,
            border=True,
            border_size=10,
            border_color="red",
        )

    @classmethod
    def from_inches(
        cls,
        roll_width: float,
        roll_length: float | None,
        dpi: int,
        gap: float = 0.0,
        margin_top: float = 0.0,
        margin_left: float = 0.0,
        border: bool = False,
        border_size: float = 0.0,
        border_color: str = "red",
    ) -> PackingSettings:
        """Build settings from inch-based values, as used by the API."""
        return cls(
            roll_width=to_units(roll_width),
            roll_length=None if roll_length is None else to_units(roll_length),
            dpi=dpi,
            gap=to_units(gap),
            margin_top=to_units(margin_top),
            margin_left=to_units(margin_left),
            border=border,
            border_size=to_units(border_size),
            border_color=border_color,
        )

    def to_inches_dict(self) -> dict[str, Any]:
        """Inch-based representation, the inverse of :meth:`from_inches`."""
        return {
            "roll_width": to_inches(self.roll_width),
            "roll_length": (
                None if self.roll_length is None else to_inches(self.roll_length)
            ),
            "dpi": self.dpi,
            "gap": to_inches(self.gap),
            "margin_top": to_inches(self.margin_top),
            "margin_left": to_inches(self.margin_left),
            "border": self.border,
            "border_size": to_inches(self.border_size),
            "border_color": self.border_color,
        }


@dataclass(frozen=True)
class DesignItem:
    """One placeable copy of a design.

    Attributes:
        id: Stable reference, derived from the order line and copy number.
        order_id: Order the design belongs to.
        group_key: Print location / modification name, used for grouping.
        width_px: Source artwork width in pixels.
        height_px: Source artwork height in pixels.
        image_url: Where the renderer fetches the artwork from.
        line_item_id: Order line the item was expanded from.
    """

    id: str
    order_id: int
    group_key: str | None
    width_px: int
    height_px: int
    image_url: str | None = None
    line_item_id: int | None = None

    def __post_init__(self) -> None:
        if self.width_px <= 0 or self.height_px <= 0:
            raise ValidationError(
                f"Design item '{self.id}' must have positive pixel dimensions"
            )

    def width_physical(self, dpi: int) -> int:
        """Printed width at ``dpi`` in hundredths of an inch."""
        return px_to_units(self.width_px, dpi)

    def height_physical(self, dpi: int) -> int:
        """Printed height at ``dpi`` in hundredths of an inch."""
        return px_to_units(self.height_px, dpi)


@dataclass(frozen=True)
class InvalidItem:
    """A design record excluded before placement because it cannot be sized."""

    design_item_id: str
    order_id: int
    reason: str


@dataclass(frozen=True)
class Placement:
    """Computed position of one design item on a roll.

    Coordinates are the top-left corner measured from the top-left of the
    roll. ``width`` and ``height`` are the printed extents without the gap.
    """

    design_item_id: str
    order_id: int
    x: int
    y: int
    width: int
    height: int
    group_key: str | None = None
    image_url: str | None = None

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError("Placement coordinates must be non-negative")
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Placement dimensions must be positive")

    @property
    def right_edge(self) -> int:
        return self.x + self.width

    @property
    def bottom_edge(self) -> int:
        return self.y + self.height

    def overlaps(self, other: Placement, gap: int = 0) -> bool:
        """Whether the gap-inflated rectangles of two placements intersect."""
        return (
            self.x < other.x + other.width + gap
            and other.x < self.x + self.width + gap
            and self.y < other.y + other.height + gap
            and other.y < self.y + self.height + gap
        )


@dataclass(frozen=True)
class Roll:
    """One packed roll.

    Attributes:
        roll_number: 1-based position of the roll within its run.
        max_height_used: Length consumed, including the gap after the last row.
        placements: Placed designs in placement order.
    """

    roll_number: int
    max_height_used: int
    placements: tuple[Placement, ...]

    def __post_init__(self) -> None:
        if self.roll_number < 1:
            raise ValueError("Roll number must be 1 or greater")

    @property
    def order_ids(self) -> tuple[int, ...]:
        """Distinct order ids present on this roll, in first-seen order."""
        return tuple(dict.fromkeys(p.order_id for p in self.placements))

    @property
    def design_count(self) -> int:
        return len(self.placements)


@dataclass(frozen=True)
class PlacementFailure:
    """A design item the engine could not place."""

    design_item_id: str
    order_id: int
    reason: str
    message: str


@dataclass(frozen=True)
class PlacementResult:
    """Aggregate output of the placement engine."""

    rolls: tuple[Roll, ...]
    failures: tuple[PlacementFailure, ...] = field(default_factory=tuple)

    @property
    def total_designs(self) -> int:
        """Number of successfully placed designs."""
        return sum(roll.design_count for roll in self.rolls)

    @property
    def total_rolls(self) -> int:
        return len(self.rolls)

    @property
    def order_ids(self) -> tuple[int, ...]:
        """Distinct order ids placed anywhere in the result."""
        return tuple(
            dict.fromkeys(order_id for roll in self.rolls for order_id in roll.order_ids)
        )
