"""Collaborator protocols for dependency injection.

The application layer depends on these protocols rather than on concrete
adapters, so the placement flow can be exercised with in-memory doubles and
the SQL / HTTP adapters can be swapped without touching the services.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from gangsheets.contracts.dtos import (
        DesignRecord,
        GangsheetFilters,
        GangsheetPage,
        RenderedRoll,
    )
    from gangsheets.domain.entities import Gangsheet, RollFile
    from gangsheets.domain.value_objects import (
        GangsheetStatus,
        PackingSettings,
        Roll,
    )


@runtime_checkable
class DesignLookupProtocol(Protocol):
    """Resolves orders to the design artwork bound to their line items.

    Design storage and order loading belong to the surrounding order system;
    this is the only contract the gangsheet engine needs from it.
    """

    async def get_design_items_for_orders(
        self,
        tenant_id: int,
        order_ids: Sequence[int],
        product_filter: frozenset[int] | None = None,
    ) -> list[DesignRecord]:
        """Return the design records of the given orders.

        Args:
            tenant_id: Tenant owning the orders.
            order_ids: Orders to resolve.
            product_filter: Optional product ids; other lines are skipped.

        Returns:
            Records for every resolvable line. Unknown orders yield nothing.
        """
        ...


@runtime_checkable
class SettingsStoreProtocol(Protocol):
    """Stores per-tenant default packing settings."""

    async def get_default_packing_settings(
        self, tenant_id: int
    ) -> PackingSettings | None:
        """Return the tenant's stored defaults, or None if never customized."""
        ...

    async def update_default_packing_settings(
        self, tenant_id: int, settings: PackingSettings
    ) -> PackingSettings:
        """Replace the tenant's defaults and return what was stored."""
        ...


@runtime_checkable
class GangsheetRepositoryProtocol(Protocol):
    """Persistence for the Gangsheet aggregate and the rolls it owns."""

    async def save_gangsheet(self, gangsheet: Gangsheet) -> int:
        """Insert a new gangsheet with its rolls and return its id."""
        ...

    async def load_gangsheet(self, gangsheet_id: int, tenant_id: int) -> Gangsheet | None:
        """Load a gangsheet with its rolls, scoped to the tenant."""
        ...

    async def update_gangsheet_status(
        self,
        gangsheet_id: int,
        tenant_id: int,
        status: GangsheetStatus,
        *,
        roll_files: Sequence[RollFile] | None = None,
        download_url: str | None = None,
        error_message: str | None = None,
    ) -> Gangsheet:
        """Move a gangsheet to ``status``, validating the lifecycle.

        Raises:
            GangsheetNotFoundError: If the gangsheet does not exist.
            InvalidStatusTransition: If the lifecycle forbids the change.
            ConcurrentUpdateError: If another writer changed the row.
        """
        ...

    async def update_progress(
        self, gangsheet_id: int, tenant_id: int, processed_designs: int
    ) -> None:
        """Record how many designs have been rendered."""
        ...

    async def delete_gangsheet(self, gangsheet_id: int, tenant_id: int) -> bool:
        """Delete a gangsheet and its rolls. Returns False if it did not exist."""
        ...

    async def list_gangsheets(
        self, tenant_id: int, filters: GangsheetFilters
    ) -> GangsheetPage:
        """Return one page of the tenant's gangsheets."""
        ...


@runtime_checkable
class RollRendererProtocol(Protocol):
    """Renders one packed roll to a printable file."""

    def render_roll(
        self,
        roll: Roll,
        settings: PackingSettings,
        *,
        gangsheet_name: str,
        total_rolls: int,
    ) -> RenderedRoll:
        """Render ``roll`` using ``settings`` for size and border styling."""
        ...


@runtime_checkable
class ArtifactStorageProtocol(Protocol):
    """Stores rendered files and hands back public URLs."""

    async def store(self, key: str, content: bytes, media_type: str) -> str:
        """Store ``content`` under ``key`` and return its URL."""
        ...

    async def store_archive(
        self, key: str, entries: Sequence[tuple[str, bytes]]
    ) -> str:
        """Store a ZIP archive of ``(filename, content)`` entries; return its URL."""
        ...

    async def delete_prefix(self, prefix: str) -> int:
        """Delete every artifact under ``prefix``; return how many were removed."""
        ...
