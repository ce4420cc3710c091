"""Layout planning: settings, extraction and placement in one step."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gangsheets.application.dtos import CreateGangsheetInput, PlacementOutcome
from gangsheets.application.services.settings_resolver import require_tenant
from gangsheets.domain.exceptions import NoPlaceableItemsError, ValidationError

if TYPE_CHECKING:
    from gangsheets.application.services.design_extractor import DesignItemExtractor
    from gangsheets.application.services.settings_resolver import SettingsResolver
    from gangsheets.domain.services import ShelfPlacementEngine

logger = logging.getLogger(__name__)


class LayoutPlanner:
    """Computes the layout of a gangsheet request without side effects.

    Shared by gangsheet creation, previews and the CLI so all three pack
    the same request into the same layout.
    """

    def __init__(
        self,
        resolver: "SettingsResolver",
        extractor: "DesignItemExtractor",
        engine: "ShelfPlacementEngine",
    ) -> None:
        self._resolver = resolver
        self._extractor = extractor
        self._engine = engine

    async def plan(
        self, tenant_id: int | None, request: CreateGangsheetInput
    ) -> PlacementOutcome:
        """Resolve settings, extract design items and place them.

        Raises:
            ValidationError: If the tenant is missing or the request is malformed.
            NoPlaceableItemsError: If the orders yield no design items.
        """
        tenant_id = require_tenant(tenant_id)
        errors = request.validate()
        if errors:
            raise ValidationError(errors)

        settings = await self._resolver.resolve(tenant_id, request.settings)
        extraction = await self._extractor.extract(
            tenant_id,
            request.order_ids,
            product_filter=request.product_filter,
            quantity_overrides=request.quantity_overrides,
        )
        if not extraction.items:
            raise NoPlaceableItemsError(
                "No design items found for the requested orders"
            )

        result = self._engine.place(
            extraction.items,
            settings,
            group_by_modification=request.group_by_modification,
        )
        logger.debug(
            "Planned %d designs on %d rolls for tenant %d",
            result.total_designs,
            result.total_rolls,
            tenant_id,
        )
        return PlacementOutcome(
            settings=settings,
            result=result,
            unresolved_order_ids=extraction.unresolved_order_ids,
            invalid_items=extraction.invalid_items,
        )
