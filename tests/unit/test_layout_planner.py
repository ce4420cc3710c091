"""Unit tests for the layout planner."""

import pytest

from gangsheets.application import CreateGangsheetInput
from gangsheets.application.dtos import MAX_LINE_QUANTITY
from gangsheets.application.services import (
    DesignItemExtractor,
    LayoutPlanner,
    SettingsResolver,
)
from gangsheets.domain import (
    NoPlaceableItemsError,
    PackingSettings,
    ShelfPlacementEngine,
    ValidationError,
)
from gangsheets.infrastructure import InMemoryDesignCatalog, InMemorySettingsStore


@pytest.fixture
def planner(catalog: InMemoryDesignCatalog) -> LayoutPlanner:
    return LayoutPlanner(
        SettingsResolver(InMemorySettingsStore()),
        DesignItemExtractor(catalog),
        ShelfPlacementEngine(),
    )


class TestCreateGangsheetInput:
    """Tests for request validation."""

    def test_valid(self) -> None:
        assert CreateGangsheetInput(order_ids=[1, 2], name="run").validate() == []

    @pytest.mark.parametrize(
        "kwargs,message",
        [
            ({"order_ids": []}, "At least one order ID is required"),
            ({"order_ids": [0]}, "Order IDs must be positive"),
            ({"order_ids": [1], "name": "  "}, "Name must not be blank"),
            ({"order_ids": [1], "name": "x" * 256}, "Name must be at most 255"),
            (
                {"order_ids": [1], "quantity_overrides": {5: -1}},
                "Quantity overrides must be non-negative",
            ),
            (
                {"order_ids": [1], "quantity_overrides": {5: MAX_LINE_QUANTITY + 1}},
                "Quantity overrides must be at most",
            ),
        ],
    )
    def test_invalid(self, kwargs: dict, message: str) -> None:
        errors = CreateGangsheetInput(**kwargs).validate()
        assert any(e.startswith(message) for e in errors)

    def test_override_at_limit_is_valid(self) -> None:
        data = CreateGangsheetInput(
            order_ids=[1], quantity_overrides={5: MAX_LINE_QUANTITY}
        )
        assert data.validate() == []


class TestLayoutPlanner:
    """Tests for LayoutPlanner.plan."""

    @pytest.mark.asyncio
    async def test_plans_with_system_defaults(self, planner: LayoutPlanner) -> None:
        outcome = await planner.plan(1, CreateGangsheetInput(order_ids=[100, 101]))

        assert outcome.settings == PackingSettings.default()
        assert outcome.result.total_designs == 4
        assert outcome.result.total_rolls == 1
        assert outcome.warnings == []

    @pytest.mark.asyncio
    async def test_override_settings_are_used(
        self, planner: LayoutPlanner, roll_22x60: PackingSettings
    ) -> None:
        outcome = await planner.plan(
            1, CreateGangsheetInput(order_ids=[100], settings=roll_22x60)
        )

        assert outcome.settings == roll_22x60
        first, second = outcome.result.rolls[0].placements
        assert (second.x, second.y) == (1000, 0)

    @pytest.mark.asyncio
    async def test_grouping_flag_is_forwarded(self, planner: LayoutPlanner) -> None:
        outcome = await planner.plan(
            1, CreateGangsheetInput(order_ids=[100, 101], group_by_modification=True)
        )

        ids = [p.design_item_id for p in outcome.result.rolls[0].placements]
        assert ids == ["100-1", "100-2", "101-1#1", "101-1#2"]

    @pytest.mark.asyncio
    async def test_unresolved_orders_become_warnings(
        self, planner: LayoutPlanner
    ) -> None:
        outcome = await planner.plan(1, CreateGangsheetInput(order_ids=[100, 555]))

        assert outcome.unresolved_order_ids == [555]
        assert outcome.warnings == ["Order 555 has no resolvable design items"]

    @pytest.mark.asyncio
    async def test_oversized_items_become_warnings(
        self, planner: LayoutPlanner
    ) -> None:
        narrow = PackingSettings(roll_width=900, roll_length=None, dpi=300)

        outcome = await planner.plan(
            1, CreateGangsheetInput(order_ids=[100], settings=narrow)
        )

        assert outcome.result.total_designs == 1
        assert len(outcome.result.failures) == 1
        assert "100-1" in outcome.warnings[0]

    @pytest.mark.asyncio
    async def test_no_items_raise(self, planner: LayoutPlanner) -> None:
        with pytest.raises(NoPlaceableItemsError, match="No design items found"):
            await planner.plan(1, CreateGangsheetInput(order_ids=[404]))

    @pytest.mark.asyncio
    async def test_invalid_request_raises(self, planner: LayoutPlanner) -> None:
        with pytest.raises(ValidationError):
            await planner.plan(1, CreateGangsheetInput(order_ids=[]))

    @pytest.mark.asyncio
    async def test_missing_tenant_raises(self, planner: LayoutPlanner) -> None:
        with pytest.raises(ValidationError, match="tenant"):
            await planner.plan(None, CreateGangsheetInput(order_ids=[100]))

    @pytest.mark.asyncio
    async def test_same_request_same_layout(self, planner: LayoutPlanner) -> None:
        request = CreateGangsheetInput(order_ids=[101, 100])
        first = await planner.plan(1, request)
        second = await planner.plan(1, request)
        assert first.result == second.result
