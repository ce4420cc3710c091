"""Plain-text formatters for CLI output."""

from __future__ import annotations

from gangsheets.application.dtos import PlacementOutcome
from gangsheets.domain.units import to_inches
from gangsheets.domain.value_objects import PackingSettings


class PlacementReportFormatter:
    """Formats a computed layout as a roll-by-roll table."""

    def __init__(self, show_placements: bool = False) -> None:
        """Initialize formatter.

        Args:
            show_placements: List every placed design below its roll.
        """
        self._show_placements = show_placements

    def format(self, outcome: PlacementOutcome) -> str:
        result = outcome.result
        settings = outcome.settings
        length = (
            "unbounded"
            if settings.roll_length is None
            else f'{to_inches(settings.roll_length):g}"'
        )
        lines = [
            "GANGSHEET LAYOUT",
            "=" * 60,
            f'Roll: {to_inches(settings.roll_width):g}" x {length} at {settings.dpi} DPI, '
            f'gap {to_inches(settings.gap):g}"',
            "-" * 60,
            f"{'Roll':<6} {'Designs':<9} {'Length used':<14} {'Orders'}",
            "-" * 60,
        ]

        for roll in result.rolls:
            orders = ", ".join(str(o) for o in roll.order_ids)
            lines.append(
                f"{roll.roll_number:<6} {roll.design_count:<9} "
                f"{to_inches(roll.max_height_used):<14.2f} {orders}"
            )
            if self._show_placements:
                for p in roll.placements:
                    lines.append(
                        f"    {p.design_item_id:<20} "
                        f'@ ({to_inches(p.x):.2f}", {to_inches(p.y):.2f}") '
                        f'{to_inches(p.width):.2f}" x {to_inches(p.height):.2f}"'
                    )

        lines.append("-" * 60)
        lines.append(
            f"Total: {result.total_designs} designs on {result.total_rolls} rolls"
        )

        warnings = outcome.warnings
        if warnings:
            lines.append("")
            lines.append("WARNINGS")
            lines.extend(f"  - {w}" for w in warnings)

        return "\n".join(lines)


class SettingsFormatter:
    """Formats packing settings as a key/value listing."""

    def format(self, settings: PackingSettings, title: str = "PACKING SETTINGS") -> str:
        values = settings.to_inches_dict()
        lines = [title, "=" * 40]
        for key, value in values.items():
            if value is None:
                value = "unbounded"
            lines.append(f"{key:<14} {value}")
        return "\n".join(lines)
