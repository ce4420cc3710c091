"""SVG rendering of packed rolls.

Each roll becomes one SVG document sized in physical inches. The viewBox is
expressed in hundredths of an inch, the unit placements are computed in, so
coordinates are written out exactly as the engine produced them.
"""

from __future__ import annotations

from xml.sax.saxutils import escape, quoteattr

from gangsheets.contracts.dtos import RenderedRoll
from gangsheets.domain.units import to_inches, units_to_px
from gangsheets.domain.value_objects import PackingSettings, Placement, Roll

SVG_MEDIA_TYPE = "image/svg+xml"


class SvgRollRenderer:
    """Renders one packed roll as an SVG print file.

    Designs with an artwork URL are embedded as ``<image>`` references;
    designs without one are drawn as placeholder boxes labelled with their
    design id. When the settings enable a border, every design is outlined
    with the configured color and stroke width. A footer band below the last
    row carries the gangsheet name and roll number for the press operator.

    Attributes:
        footer_height: Footer band height in hundredths of an inch.
        placeholder_fill: Fill color for designs without artwork.
        text_color: Color for footer and placeholder labels.
    """

    def __init__(
        self,
        footer_height: int = 50,
        placeholder_fill: str = "#EEEEEE",
        text_color: str = "#000000",
    ) -> None:
        self.footer_height = footer_height
        self.placeholder_fill = placeholder_fill
        self.text_color = text_color

    def render_roll(
        self,
        roll: Roll,
        settings: PackingSettings,
        *,
        gangsheet_name: str,
        total_rolls: int,
    ) -> RenderedRoll:
        """Render ``roll`` to SVG bytes.

        Args:
            roll: Packed roll.
            settings: Settings the roll was packed with.
            gangsheet_name: Name printed in the footer.
            total_rolls: Number of rolls in the gangsheet, for the footer.

        Returns:
            RenderedRoll with the document and its pixel size at the
            settings' DPI.
        """
        width = settings.roll_width
        height = roll.max_height_used + self.footer_height

        parts: list[str] = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<svg xmlns="http://www.w3.org/2000/svg" '
            f'xmlns:xlink="http://www.w3.org/1999/xlink" '
            f'width="{to_inches(width)}in" height="{to_inches(height)}in" '
            f'viewBox="0 0 {width} {height}">',
        ]

        parts.append("  <!-- Designs -->")
        for placement in roll.placements:
            parts.append(self._render_placement(placement, settings))

        parts.append(self._render_footer(roll, width, gangsheet_name, total_rolls))
        parts.append("</svg>")

        return RenderedRoll(
            roll_number=roll.roll_number,
            content="\n".join(parts).encode("utf-8"),
            media_type=SVG_MEDIA_TYPE,
            extension="svg",
            width_px=units_to_px(width, settings.dpi),
            height_px=units_to_px(height, settings.dpi),
        )

    def _render_placement(self, placement: Placement, settings: PackingSettings) -> str:
        x, y = placement.x, placement.y
        w, h = placement.width, placement.height

        svg_parts = [f"  <g id={quoteattr(placement.design_item_id)}>"]
        if placement.image_url:
            svg_parts.append(
                f'    <image x="{x}" y="{y}" width="{w}" height="{h}" '
                f'preserveAspectRatio="none" '
                f"href={quoteattr(placement.image_url)} "
                f"xlink:href={quoteattr(placement.image_url)}/>"
            )
        else:
            font_size = max(1, min(w, h) // 8)
            svg_parts.append(
                f'    <rect x="{x}" y="{y}" width="{w}" height="{h}" '
                f'fill="{self.placeholder_fill}"/>'
            )
            svg_parts.append(
                f'    <text x="{x + w / 2}" y="{y + h / 2}" text-anchor="middle" '
                f'font-family="Arial, sans-serif" font-size="{font_size}" '
                f'fill="{self.text_color}">{escape(placement.design_item_id)}</text>'
            )

        if settings.border and settings.border_size > 0:
            # Stroke is centered on the path, so inset it to stay inside the design.
            inset = settings.border_size / 2
            svg_parts.append(
                f'    <rect x="{x + inset}" y="{y + inset}" '
                f'width="{max(w - settings.border_size, 0)}" '
                f'height="{max(h - settings.border_size, 0)}" fill="none" '
                f"stroke={quoteattr(settings.border_color)} "
                f'stroke-width="{settings.border_size}"/>'
            )

        svg_parts.append("  </g>")
        return "\n".join(svg_parts)

    def _render_footer(
        self, roll: Roll, width: int, gangsheet_name: str, total_rolls: int
    ) -> str:
        top = roll.max_height_used
        font_size = max(1, self.footer_height * 3 // 5)
        label = (
            f"{gangsheet_name} - Roll {roll.roll_number} of {total_rolls} - "
            f"{roll.design_count} designs"
        )
        return (
            f"  <!-- Footer -->\n"
            f'  <rect x="0" y="{top}" width="{width}" height="{self.footer_height}" '
            f'fill="#FFFFFF"/>\n'
            f'  <text x="10" y="{top + self.footer_height - font_size // 3}" '
            f'font-family="Arial, sans-serif" font-size="{font_size}" '
            f'fill="{self.text_color}">{escape(label)}</text>'
        )
