"""Unit tests for the SVG roll renderer."""

import xml.etree.ElementTree as ET

import pytest

from gangsheets.domain import PackingSettings, Placement, Roll
from gangsheets.infrastructure import SvgRollRenderer

SVG_NS = "{http://www.w3.org/2000/svg}"


@pytest.fixture
def roll() -> Roll:
    return Roll(
        roll_number=2,
        max_height_used=1030,
        placements=(
            Placement(
                design_item_id="100-1",
                order_id=100,
                x=0,
                y=0,
                width=1000,
                height=1000,
                image_url="http://cdn/art.png?size=full&v=2",
            ),
            Placement(
                design_item_id="<odd> & id",
                order_id=101,
                x=1030,
                y=0,
                width=600,
                height=400,
            ),
        ),
    )


def _parse(content: bytes) -> ET.Element:
    return ET.fromstring(content)


class TestSvgRollRenderer:
    """Tests for SvgRollRenderer.render_roll."""

    def test_document_size(self, roll: Roll, roll_22x60: PackingSettings) -> None:
        rendered = SvgRollRenderer().render_roll(
            roll, roll_22x60, gangsheet_name="GS", total_rolls=3
        )
        svg = _parse(rendered.content)

        assert svg.get("width") == "22.0in"
        assert svg.get("height") == "10.8in"
        assert svg.get("viewBox") == "0 0 2200 1080"

    def test_metadata(self, roll: Roll, roll_22x60: PackingSettings) -> None:
        rendered = SvgRollRenderer().render_roll(
            roll, roll_22x60, gangsheet_name="GS", total_rolls=3
        )

        assert rendered.roll_number == 2
        assert rendered.media_type == "image/svg+xml"
        assert rendered.extension == "svg"
        assert rendered.width_px == 6600
        assert rendered.height_px == 3240

    def test_designs_with_artwork_are_images(
        self, roll: Roll, roll_22x60: PackingSettings
    ) -> None:
        rendered = SvgRollRenderer().render_roll(
            roll, roll_22x60, gangsheet_name="GS", total_rolls=1
        )
        svg = _parse(rendered.content)

        images = svg.findall(f".//{SVG_NS}image")
        assert len(images) == 1
        image = images[0]
        assert image.get("href") == "http://cdn/art.png?size=full&v=2"
        assert (image.get("x"), image.get("y")) == ("0", "0")
        assert (image.get("width"), image.get("height")) == ("1000", "1000")

    def test_designs_without_artwork_are_placeholders(
        self, roll: Roll, roll_22x60: PackingSettings
    ) -> None:
        rendered = SvgRollRenderer().render_roll(
            roll, roll_22x60, gangsheet_name="GS", total_rolls=1
        )
        svg = _parse(rendered.content)

        groups = {g.get("id"): g for g in svg.findall(f"{SVG_NS}g")}
        placeholder = groups["<odd> & id"]
        rect = placeholder.find(f"{SVG_NS}rect")
        assert rect is not None
        assert rect.get("x") == "1030"
        assert rect.get("fill") == "#EEEEEE"
        assert placeholder.find(f"{SVG_NS}text").text == "<odd> & id"

    def test_footer_label(self, roll: Roll, roll_22x60: PackingSettings) -> None:
        rendered = SvgRollRenderer().render_roll(
            roll, roll_22x60, gangsheet_name="Friday run", total_rolls=3
        )

        assert b"Friday run - Roll 2 of 3 - 2 designs" in rendered.content

    def test_no_border_by_default(
        self, roll: Roll, roll_22x60: PackingSettings
    ) -> None:
        rendered = SvgRollRenderer().render_roll(
            roll, roll_22x60, gangsheet_name="GS", total_rolls=1
        )
        assert b"stroke=" not in rendered.content

    def test_border_outlines_each_design(self, roll: Roll) -> None:
        settings = PackingSettings(
            roll_width=2200,
            roll_length=6000,
            dpi=300,
            border=True,
            border_size=10,
            border_color="blue",
        )

        rendered = SvgRollRenderer().render_roll(
            roll, settings, gangsheet_name="GS", total_rolls=1
        )
        svg = _parse(rendered.content)

        outlines = [
            r for r in svg.findall(f".//{SVG_NS}rect") if r.get("stroke") == "blue"
        ]
        assert len(outlines) == 2
        assert outlines[0].get("x") == "5.0"
        assert outlines[0].get("width") == "990"
        assert outlines[0].get("stroke-width") == "10"

    def test_footer_height_is_configurable(
        self, roll: Roll, roll_22x60: PackingSettings
    ) -> None:
        rendered = SvgRollRenderer(footer_height=0).render_roll(
            roll, roll_22x60, gangsheet_name="GS", total_rolls=1
        )
        assert _parse(rendered.content).get("viewBox") == "0 0 2200 1030"
