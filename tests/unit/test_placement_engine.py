"""Tests for the shelf placement engine.

Tests cover:
- Row and roll overflow rules
- Oversized items reported as failures
- Margins, gap and unbounded rolls
- Stable grouping by modification
- Layout invariants: determinism, no overlap, width/length bounds, conservation
"""

from __future__ import annotations

import itertools
import random
from typing import Callable

import pytest

from gangsheets.domain import (
    DesignItem,
    NoPlaceableItemsError,
    PackingSettings,
    PlacementResult,
    ShelfPlacementEngine,
    group_items,
)
from gangsheets.domain.services.placement import OVERSIZED


@pytest.fixture
def engine() -> ShelfPlacementEngine:
    return ShelfPlacementEngine()


def _all_placements(result: PlacementResult):
    return [p for roll in result.rolls for p in roll.placements]


def _placed_ids(result: PlacementResult) -> list[str]:
    return [p.design_item_id for p in _all_placements(result)]


# =============================================================================
# Reference scenarios
# =============================================================================


class TestScenarios:
    """Reference layouts that pin down the shelf rules."""

    def test_three_small_items_share_one_row(
        self, engine: ShelfPlacementEngine, make_item: Callable[..., DesignItem]
    ) -> None:
        """Three 10" squares on a 22" x 144" roll: two fit per row, one roll."""
        settings = PackingSettings(roll_width=2200, roll_length=14400, dpi=300)
        items = [make_item(f"d{i}", 10, 10) for i in range(3)]

        result = engine.place(items, settings)

        assert result.total_rolls == 1
        assert result.total_designs == 3
        assert result.failures == ()
        positions = [(p.x, p.y) for p in result.rolls[0].placements]
        assert positions == [(0, 0), (1000, 0), (0, 1000)]

    def test_all_items_fit_on_one_row_when_narrow_enough(
        self, engine: ShelfPlacementEngine, make_item: Callable[..., DesignItem]
    ) -> None:
        settings = PackingSettings(roll_width=3000, roll_length=14400, dpi=300)
        items = [make_item(f"d{i}", 10, 10) for i in range(3)]

        result = engine.place(items, settings)

        assert result.total_rolls == 1
        assert {p.y for p in result.rolls[0].placements} == {0}
        assert result.rolls[0].max_height_used == 1000

    def test_wide_items_stack_and_overflow_to_new_rolls(
        self, engine: ShelfPlacementEngine, make_item: Callable[..., DesignItem]
    ) -> None:
        """Five 12" items on a 22" x 30" roll: one per row, two rows per roll."""
        settings = PackingSettings(roll_width=2200, roll_length=3000, dpi=300)
        items = [make_item(f"d{i}", 12, 12) for i in range(5)]

        result = engine.place(items, settings)

        assert [roll.design_count for roll in result.rolls] == [2, 2, 1]
        assert [roll.roll_number for roll in result.rolls] == [1, 2, 3]
        assert [p.y for p in result.rolls[0].placements] == [0, 1200]
        assert result.rolls[2].placements[0].design_item_id == "d4"
        assert result.rolls[2].placements[0].y == 0
        assert result.rolls[0].max_height_used == 2400

    def test_item_wider_than_roll_is_a_failure(
        self, engine: ShelfPlacementEngine, make_item: Callable[..., DesignItem]
    ) -> None:
        settings = PackingSettings(roll_width=2200, roll_length=6000, dpi=300)
        items = [make_item("small", 5, 5), make_item("wide", 30, 5)]

        result = engine.place(items, settings)

        assert result.total_designs == 1
        assert _placed_ids(result) == ["small"]
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert failure.design_item_id == "wide"
        assert failure.reason == OVERSIZED
        assert "wide" not in _placed_ids(result)

    def test_empty_items_raise(
        self, engine: ShelfPlacementEngine, roll_22x60: PackingSettings
    ) -> None:
        with pytest.raises(NoPlaceableItemsError):
            engine.place([], roll_22x60)

    def test_grouping_clusters_items_by_group_key(
        self, engine: ShelfPlacementEngine, make_item: Callable[..., DesignItem]
    ) -> None:
        settings = PackingSettings(roll_width=2200, roll_length=6000, dpi=300)
        items = [
            make_item("A1", 4, 4, group_key="g1"),
            make_item("B1", 4, 4, group_key="g2"),
            make_item("A2", 4, 4, group_key="g1"),
        ]

        result = engine.place(items, settings, group_by_modification=True)

        assert _placed_ids(result) == ["A1", "A2", "B1"]

    def test_without_grouping_input_order_is_kept(
        self, engine: ShelfPlacementEngine, make_item: Callable[..., DesignItem]
    ) -> None:
        settings = PackingSettings(roll_width=2200, roll_length=6000, dpi=300)
        items = [
            make_item("A1", 4, 4, group_key="g1"),
            make_item("B1", 4, 4, group_key="g2"),
            make_item("A2", 4, 4, group_key="g1"),
        ]

        result = engine.place(items, settings)

        assert _placed_ids(result) == ["A1", "B1", "A2"]


# =============================================================================
# Shelf rules
# =============================================================================


class TestShelfRules:
    """Tests for gap, margins, roll length and physical sizing."""

    def test_gap_is_added_after_each_item(
        self, engine: ShelfPlacementEngine, make_item: Callable[..., DesignItem]
    ) -> None:
        settings = PackingSettings(roll_width=2200, roll_length=6000, dpi=300, gap=30)
        items = [make_item(f"d{i}", 5, 5) for i in range(3)]

        result = engine.place(items, settings)

        assert [p.x for p in result.rolls[0].placements] == [0, 530, 1060]
        assert result.rolls[0].max_height_used == 530

    def test_trailing_gap_may_overhang_on_a_new_row(
        self, engine: ShelfPlacementEngine, make_item: Callable[..., DesignItem]
    ) -> None:
        """An item exactly as wide as the roll is placed even with a gap."""
        settings = PackingSettings(roll_width=2200, roll_length=6000, dpi=300, gap=30)

        result = engine.place([make_item("full", 22, 5)], settings)

        assert result.failures == ()
        placement = result.rolls[0].placements[0]
        assert placement.x == 0
        assert placement.right_edge == 2200

    def test_margins_offset_every_roll(
        self, engine: ShelfPlacementEngine, make_item: Callable[..., DesignItem]
    ) -> None:
        settings = PackingSettings(
            roll_width=2200, roll_length=1500, dpi=300, margin_top=50, margin_left=100
        )
        items = [make_item(f"d{i}", 10, 10) for i in range(4)]

        result = engine.place(items, settings)

        assert result.total_rolls == 2
        for roll in result.rolls:
            first = roll.placements[0]
            assert (first.x, first.y) == (100, 50)
        assert [p.x for p in result.rolls[0].placements] == [100, 1100]

    def test_left_margin_reduces_usable_width(
        self, engine: ShelfPlacementEngine, make_item: Callable[..., DesignItem]
    ) -> None:
        settings = PackingSettings(
            roll_width=2200, roll_length=6000, dpi=300, margin_left=300
        )

        result = engine.place([make_item("d", 20, 5)], settings)

        assert result.total_designs == 0
        assert result.failures[0].reason == OVERSIZED

    def test_item_taller_than_roll_is_a_failure(
        self, engine: ShelfPlacementEngine, make_item: Callable[..., DesignItem]
    ) -> None:
        settings = PackingSettings(roll_width=2200, roll_length=1000, dpi=300)
        items = [make_item("tall", 5, 12), make_item("ok", 5, 5)]

        result = engine.place(items, settings)

        assert _placed_ids(result) == ["ok"]
        assert result.failures[0].design_item_id == "tall"
        assert "length" in result.failures[0].message

    def test_oversized_item_does_not_open_a_roll(
        self, engine: ShelfPlacementEngine, make_item: Callable[..., DesignItem]
    ) -> None:
        settings = PackingSettings(roll_width=2200, roll_length=1000, dpi=300)
        items = [make_item("a", 10, 8), make_item("tall", 5, 12), make_item("b", 10, 2)]

        result = engine.place(items, settings)

        assert result.total_rolls == 1
        assert _placed_ids(result) == ["a", "b"]

    def test_item_exactly_as_tall_as_the_roll_fits(
        self, engine: ShelfPlacementEngine, make_item: Callable[..., DesignItem]
    ) -> None:
        settings = PackingSettings(roll_width=2200, roll_length=1000, dpi=300, gap=30)

        result = engine.place([make_item("d", 5, 10)], settings)

        assert result.total_designs == 1

    def test_unbounded_roll_never_overflows(
        self, engine: ShelfPlacementEngine, make_item: Callable[..., DesignItem]
    ) -> None:
        settings = PackingSettings(roll_width=2200, roll_length=None, dpi=300)
        items = [make_item(f"d{i}", 12, 12) for i in range(50)]

        result = engine.place(items, settings)

        assert result.total_rolls == 1
        assert result.rolls[0].max_height_used == 50 * 1200

    def test_physical_size_rounds_up(
        self, engine: ShelfPlacementEngine, roll_22x60: PackingSettings
    ) -> None:
        """1001px at 300 DPI is 3.3367" and must occupy 334 hundredths."""
        design = DesignItem(
            id="odd", order_id=1, group_key=None, width_px=1001, height_px=1001
        )

        result = engine.place([design], roll_22x60)

        placement = result.rolls[0].placements[0]
        assert placement.width == 334
        assert placement.height == 334

    def test_roll_records_distinct_orders(
        self, engine: ShelfPlacementEngine, make_item: Callable[..., DesignItem]
    ) -> None:
        settings = PackingSettings(roll_width=2200, roll_length=6000, dpi=300)
        items = [
            make_item("a", 4, 4, order_id=7),
            make_item("b", 4, 4, order_id=3),
            make_item("c", 4, 4, order_id=7),
        ]

        result = engine.place(items, settings)

        assert result.rolls[0].order_ids == (7, 3)
        assert result.order_ids == (7, 3)

    def test_all_items_oversized_gives_no_rolls(
        self, engine: ShelfPlacementEngine, make_item: Callable[..., DesignItem]
    ) -> None:
        settings = PackingSettings(roll_width=2200, roll_length=6000, dpi=300)

        result = engine.place([make_item("wide", 30, 5)], settings)

        assert result.rolls == ()
        assert result.total_designs == 0
        assert len(result.failures) == 1


# =============================================================================
# group_items
# =============================================================================


class TestGroupItems:
    """Tests for the stable group-by-key partition."""

    def test_groups_in_first_seen_order(
        self, make_item: Callable[..., DesignItem]
    ) -> None:
        items = [
            make_item("b1", 1, 1, group_key="back"),
            make_item("n1", 1, 1),
            make_item("f1", 1, 1, group_key="front"),
            make_item("b2", 1, 1, group_key="back"),
            make_item("n2", 1, 1),
        ]

        grouped = group_items(items)

        assert [i.id for i in grouped] == ["b1", "b2", "n1", "n2", "f1"]

    def test_grouping_is_idempotent(self, make_item: Callable[..., DesignItem]) -> None:
        items = [
            make_item(f"d{i}", 1, 1, group_key=random.Random(i).choice("xyz"))
            for i in range(20)
        ]

        once = group_items(items)

        assert group_items(once) == once

    def test_grouping_keeps_every_item(
        self, make_item: Callable[..., DesignItem]
    ) -> None:
        items = [make_item(f"d{i}", 1, 1, group_key=str(i % 3)) for i in range(9)]

        assert sorted(i.id for i in group_items(items)) == sorted(i.id for i in items)


# =============================================================================
# Layout invariants
# =============================================================================


def _random_items(seed: int, count: int = 40) -> list[DesignItem]:
    rng = random.Random(seed)
    return [
        DesignItem(
            id=f"item-{n}",
            order_id=rng.randint(1, 5),
            group_key=rng.choice([None, "front", "back", "sleeve"]),
            width_px=rng.randint(150, 7500),
            height_px=rng.randint(150, 6000),
        )
        for n in range(count)
    ]


SETTINGS_CASES = [
    PackingSettings(roll_width=2200, roll_length=6000, dpi=300, gap=30),
    PackingSettings(roll_width=2200, roll_length=2000, dpi=300, gap=0),
    PackingSettings(
        roll_width=1300, roll_length=3600, dpi=150, gap=25, margin_top=40, margin_left=60
    ),
    PackingSettings(roll_width=2400, roll_length=None, dpi=300, gap=10),
]


@pytest.mark.parametrize(
    "seed,settings", list(itertools.product(range(5), SETTINGS_CASES))
)
class TestLayoutInvariants:
    """Properties that must hold for any input."""

    def test_deterministic(
        self, engine: ShelfPlacementEngine, seed: int, settings: PackingSettings
    ) -> None:
        items = _random_items(seed)
        assert engine.place(items, settings) == engine.place(list(items), settings)

    def test_no_overlap_including_gap(
        self, engine: ShelfPlacementEngine, seed: int, settings: PackingSettings
    ) -> None:
        result = engine.place(_random_items(seed), settings)
        for roll in result.rolls:
            for a, b in itertools.combinations(roll.placements, 2):
                assert not a.overlaps(b, gap=settings.gap), (a, b)

    def test_width_bound(
        self, engine: ShelfPlacementEngine, seed: int, settings: PackingSettings
    ) -> None:
        result = engine.place(_random_items(seed), settings)
        for placement in _all_placements(result):
            assert placement.x >= settings.margin_left
            assert placement.right_edge <= settings.roll_width

    def test_length_bound(
        self, engine: ShelfPlacementEngine, seed: int, settings: PackingSettings
    ) -> None:
        result = engine.place(_random_items(seed), settings)
        for placement in _all_placements(result):
            assert placement.y >= settings.margin_top
            if settings.roll_length is not None:
                assert placement.bottom_edge <= settings.roll_length

    def test_conservation(
        self, engine: ShelfPlacementEngine, seed: int, settings: PackingSettings
    ) -> None:
        items = _random_items(seed)
        result = engine.place(items, settings)
        assert result.total_designs + len(result.failures) == len(items)
        accounted = _placed_ids(result) + [f.design_item_id for f in result.failures]
        assert sorted(accounted) == sorted(i.id for i in items)

    def test_rolls_are_numbered_and_non_empty(
        self, engine: ShelfPlacementEngine, seed: int, settings: PackingSettings
    ) -> None:
        result = engine.place(_random_items(seed), settings)
        assert [r.roll_number for r in result.rolls] == list(
            range(1, result.total_rolls + 1)
        )
        assert all(r.design_count > 0 for r in result.rolls)

    def test_grouping_places_same_items(
        self, engine: ShelfPlacementEngine, seed: int, settings: PackingSettings
    ) -> None:
        items = _random_items(seed)
        grouped = engine.place(items, settings, group_by_modification=True)
        pregrouped = engine.place(group_items(items), settings)
        assert grouped == pregrouped

    def test_grouping_does_not_change_what_is_placed(
        self, engine: ShelfPlacementEngine, seed: int, settings: PackingSettings
    ) -> None:
        items = _random_items(seed)

        plain = engine.place(items, settings)
        grouped = engine.place(items, settings, group_by_modification=True)

        assert set(_placed_ids(grouped)) == set(_placed_ids(plain))
        assert {f.design_item_id for f in grouped.failures} == {
            f.design_item_id for f in plain.failures
        }
        assert grouped.total_designs == plain.total_designs
