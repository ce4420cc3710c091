"""Unit tests for CLI text formatters."""

from gangsheets.application import PlacementOutcome
from gangsheets.domain import (
    InvalidItem,
    PackingSettings,
    Placement,
    PlacementFailure,
    PlacementResult,
    Roll,
)
from gangsheets.infrastructure import PlacementReportFormatter, SettingsFormatter


def _outcome(failures: tuple = (), **kwargs) -> PlacementOutcome:
    placements = (
        Placement(design_item_id="100-1", order_id=100, x=0, y=0, width=1000, height=1000),
        Placement(design_item_id="101-1", order_id=101, x=1030, y=0, width=500, height=250),
    )
    return PlacementOutcome(
        settings=PackingSettings(roll_width=2200, roll_length=6000, dpi=300, gap=30),
        result=PlacementResult(
            rolls=(Roll(1, 1030, placements),),
            failures=failures,
        ),
        **kwargs,
    )


class TestPlacementReportFormatter:
    """Tests for PlacementReportFormatter."""

    def test_header_and_totals(self) -> None:
        text = PlacementReportFormatter().format(_outcome())

        assert text.startswith("GANGSHEET LAYOUT")
        assert 'Roll: 22" x 60" at 300 DPI, gap 0.3"' in text
        assert "Total: 2 designs on 1 rolls" in text
        assert "WARNINGS" not in text

    def test_roll_rows(self) -> None:
        text = PlacementReportFormatter().format(_outcome())
        row = next(line for line in text.splitlines() if line.startswith("1 "))
        assert "10.30" in row
        assert row.endswith("100, 101")

    def test_placements_hidden_by_default(self) -> None:
        assert "@ (" not in PlacementReportFormatter().format(_outcome())

    def test_show_placements(self) -> None:
        text = PlacementReportFormatter(show_placements=True).format(_outcome())
        assert '101-1' in text
        assert '@ (10.30", 0.00") 5.00" x 2.50"' in text

    def test_unbounded_roll(self) -> None:
        outcome = _outcome()
        outcome.settings = PackingSettings(roll_width=2200, roll_length=None, dpi=300)
        assert 'x unbounded at 300 DPI' in PlacementReportFormatter().format(outcome)

    def test_warnings(self) -> None:
        outcome = _outcome(
            unresolved_order_ids=[7],
            invalid_items=[InvalidItem("bad", 8, "invalid dimensions 0x10px")],
            failures=(PlacementFailure("wide", 9, "oversized", "too wide"),),
        )

        text = PlacementReportFormatter().format(outcome)

        assert "WARNINGS" in text
        assert "  - Order 7 has no resolvable design items" in text
        assert "Design 'bad' (order 8) was skipped: invalid dimensions 0x10px" in text
        assert "Design 'wide' (order 9) could not be placed: too wide" in text


class TestSettingsFormatter:
    """Tests for SettingsFormatter."""

    def test_lists_settings_in_inches(self) -> None:
        text = SettingsFormatter().format(PackingSettings.default())

        lines = text.splitlines()
        assert lines[0] == "PACKING SETTINGS"
        assert any(line.split() == ["roll_width", "22.0"] for line in lines)
        assert any(line.split() == ["gap", "0.3"] for line in lines)

    def test_unbounded_length(self) -> None:
        settings = PackingSettings(roll_width=2200, roll_length=None, dpi=300)
        text = SettingsFormatter().format(settings, title="SYSTEM DEFAULTS")
        assert text.startswith("SYSTEM DEFAULTS")
        assert any(line.split() == ["roll_length", "unbounded"] for line in text.splitlines())
