"""Contracts module - protocols and shared DTOs for cross-layer communication.

Example:
    ```python
    from gangsheets.contracts import DesignLookupProtocol, DesignRecord

    class StaticLookup:
        async def get_design_items_for_orders(self, tenant_id, order_ids, product_filter=None):
            return [DesignRecord(order_id=1, design_item_id="1", width_px=300, height_px=300)]

    assert isinstance(StaticLookup(), DesignLookupProtocol)
    ```
"""

from .dtos import (
    DesignRecord as DesignRecord,
    GangsheetFilters as GangsheetFilters,
    GangsheetPage as GangsheetPage,
    GangsheetSummary as GangsheetSummary,
    RenderedRoll as RenderedRoll,
)
from .protocols import (
    ArtifactStorageProtocol as ArtifactStorageProtocol,
    DesignLookupProtocol as DesignLookupProtocol,
    GangsheetRepositoryProtocol as GangsheetRepositoryProtocol,
    RollRendererProtocol as RollRendererProtocol,
    SettingsStoreProtocol as SettingsStoreProtocol,
)
