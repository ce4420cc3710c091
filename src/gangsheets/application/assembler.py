"""Gangsheet assembler.

Coordinates the whole gangsheet flow: resolve settings, extract design items,
run the placement engine, persist the result and render the rolls. Every
read and write is scoped to the requesting tenant.
"""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable

from gangsheets.application.dtos import (
    CreateGangsheetInput,
    DownloadOutput,
    GangsheetOutcome,
    GangsheetStatusOutput,
    PlacementOutcome,
    RollDownload,
)
from gangsheets.application.services.locks import GangsheetLockRegistry
from gangsheets.application.services.render_jobs import RenderJobRunner
from gangsheets.application.services.settings_resolver import require_tenant
from gangsheets.domain.entities import Gangsheet, RollFile
from gangsheets.domain.exceptions import (
    GangsheetError,
    GangsheetNotFoundError,
    GangsheetNotReadyError,
    InvalidStatusTransition,
    NoPlaceableItemsError,
    ValidationError,
)
from gangsheets.domain.value_objects import GangsheetStatus, PackingSettings

if TYPE_CHECKING:
    from gangsheets.application.services.layout_planner import LayoutPlanner
    from gangsheets.application.services.settings_resolver import SettingsResolver
    from gangsheets.contracts.dtos import GangsheetFilters, GangsheetPage
    from gangsheets.contracts.protocols import (
        ArtifactStorageProtocol,
        GangsheetRepositoryProtocol,
        RollRendererProtocol,
        SettingsStoreProtocol,
    )

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9_.-]+")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def artifact_prefix(tenant_id: int, gangsheet_id: int) -> str:
    """Storage prefix under which a gangsheet's rendered files live."""
    return f"tenant_{tenant_id}/gangsheet_{gangsheet_id}"


def safe_filename(name: str) -> str:
    return _UNSAFE_FILENAME.sub("_", name).strip("._") or "gangsheet"


class GangsheetAssembler:
    """Application service behind the HTTP API and the CLI.

    Args:
        planner: Computes layouts for requests.
        resolver: Settings resolver, for reading tenant defaults.
        repository: Gangsheet persistence.
        settings_store: Tenant default settings persistence.
        renderer: Roll renderer.
        storage: Rendered artifact storage.
        jobs: Render job runner.
        render_timeout: Seconds a render job may take before it fails.
        locks: Per-gangsheet lock registry.
        clock: Returns the current UTC time.
    """

    def __init__(
        self,
        planner: "LayoutPlanner",
        resolver: "SettingsResolver",
        repository: "GangsheetRepositoryProtocol",
        settings_store: "SettingsStoreProtocol",
        renderer: "RollRendererProtocol",
        storage: "ArtifactStorageProtocol",
        jobs: RenderJobRunner | None = None,
        render_timeout: float = 120.0,
        locks: GangsheetLockRegistry | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._planner = planner
        self._resolver = resolver
        self._repository = repository
        self._settings_store = settings_store
        self._renderer = renderer
        self._storage = storage
        self._jobs = jobs or RenderJobRunner()
        self._render_timeout = render_timeout
        self._locks = locks or GangsheetLockRegistry()
        self._clock = clock

    @property
    def jobs(self) -> RenderJobRunner:
        return self._jobs

    # =========================================================================
    # Placement
    # =========================================================================

    async def preview(
        self, tenant_id: int, request: CreateGangsheetInput
    ) -> PlacementOutcome:
        """Compute a layout without persisting anything.

        Raises:
            ValidationError: If the request is malformed.
            NoPlaceableItemsError: If the orders yield no design items.
        """
        return await self._planner.plan(tenant_id, request)

    async def create_gangsheet(
        self, tenant_id: int, request: CreateGangsheetInput
    ) -> GangsheetOutcome:
        """Compute, persist and schedule rendering of a new gangsheet.

        Raises:
            ValidationError: If the request is malformed.
            NoPlaceableItemsError: If no design item resolves or every item is
                oversized for the roll.
        """
        tenant_id = require_tenant(tenant_id)
        placement = await self._planner.plan(tenant_id, request)
        if placement.result.total_designs == 0:
            raise NoPlaceableItemsError(
                "None of the design items fit on the configured roll"
            )

        now = self._clock()
        gangsheet = Gangsheet(
            tenant_id=tenant_id,
            name=request.name.strip() if request.name else Gangsheet.generate_name(now),
            order_ids=tuple(sorted(set(request.order_ids))),
            settings=placement.settings,
            result=placement.result,
            skipped_order_ids=tuple(placement.unresolved_order_ids),
            created_at=now,
        )
        gangsheet.id = await self._repository.save_gangsheet(gangsheet)
        logger.info(
            "Created gangsheet %d '%s' for tenant %d: %d designs on %d rolls",
            gangsheet.id,
            gangsheet.name,
            tenant_id,
            gangsheet.total_designs,
            gangsheet.total_rolls,
        )

        await self._jobs.submit(
            gangsheet.id, self.render_gangsheet(tenant_id, gangsheet.id)
        )
        if self._jobs.mode == "inline":
            gangsheet = await self.get_gangsheet(tenant_id, gangsheet.id)
        return GangsheetOutcome(gangsheet=gangsheet, placement=placement)

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_gangsheet(self, tenant_id: int, gangsheet_id: int) -> Gangsheet:
        """Load a gangsheet owned by ``tenant_id``.

        Raises:
            GangsheetNotFoundError: If it does not exist for this tenant.
        """
        tenant_id = require_tenant(tenant_id)
        gangsheet = await self._repository.load_gangsheet(gangsheet_id, tenant_id)
        if gangsheet is None:
            raise GangsheetNotFoundError(gangsheet_id)
        return gangsheet

    async def get_gangsheet_status(
        self, tenant_id: int, gangsheet_id: int
    ) -> GangsheetStatusOutput:
        gangsheet = await self.get_gangsheet(tenant_id, gangsheet_id)
        return GangsheetStatusOutput.from_gangsheet(gangsheet)

    async def download_gangsheet(
        self, tenant_id: int, gangsheet_id: int
    ) -> DownloadOutput:
        """Return download links of a completed gangsheet.

        Raises:
            GangsheetNotFoundError: If it does not exist for this tenant.
            GangsheetNotReadyError: If rendering has not completed.
        """
        gangsheet = await self.get_gangsheet(tenant_id, gangsheet_id)
        if not gangsheet.is_downloadable:
            raise GangsheetNotReadyError(gangsheet_id, gangsheet.status.value)
        assert gangsheet.download_url is not None

        design_counts = {
            roll.roll_number: roll.design_count for roll in gangsheet.result.rolls
        }
        return DownloadOutput(
            download_url=gangsheet.download_url,
            rolls=[
                RollDownload(
                    roll_number=f.roll_number,
                    download_url=f.file_url,
                    width_px=f.width_px,
                    height_px=f.height_px,
                    design_count=design_counts.get(f.roll_number, 0),
                )
                for f in gangsheet.roll_files
            ],
        )

    async def list_gangsheets(
        self, tenant_id: int, filters: "GangsheetFilters"
    ) -> "GangsheetPage":
        tenant_id = require_tenant(tenant_id)
        errors = filters.validate()
        if errors:
            raise ValidationError(errors)
        return await self._repository.list_gangsheets(tenant_id, filters)

    async def delete_gangsheet(self, tenant_id: int, gangsheet_id: int) -> None:
        """Delete a gangsheet, its rolls and its rendered files.

        A render job still running for the gangsheet is cancelled first.

        Raises:
            GangsheetNotFoundError: If it does not exist for this tenant.
        """
        await self.get_gangsheet(tenant_id, gangsheet_id)
        await self._jobs.cancel(gangsheet_id)

        async with self._locks.hold(gangsheet_id):
            deleted = await self._repository.delete_gangsheet(gangsheet_id, tenant_id)
        if not deleted:
            raise GangsheetNotFoundError(gangsheet_id)

        removed = await self._storage.delete_prefix(
            artifact_prefix(tenant_id, gangsheet_id)
        )
        logger.info(
            "Deleted gangsheet %d for tenant %d (%d files removed)",
            gangsheet_id,
            tenant_id,
            removed,
        )

    # =========================================================================
    # Tenant settings
    # =========================================================================

    async def get_default_settings(self, tenant_id: int) -> PackingSettings:
        return await self._resolver.resolve(tenant_id)

    async def update_default_settings(
        self, tenant_id: int, settings: PackingSettings
    ) -> PackingSettings:
        tenant_id = require_tenant(tenant_id)
        stored = await self._settings_store.update_default_packing_settings(
            tenant_id, settings
        )
        logger.info("Updated default packing settings for tenant %d", tenant_id)
        return stored

    # =========================================================================
    # Rendering
    # =========================================================================

    async def render_gangsheet(self, tenant_id: int, gangsheet_id: int) -> None:
        """Render every roll of a pending gangsheet and mark it completed.

        Failures never propagate: an error, a timeout or a cancellation moves
        the gangsheet to ``failed`` with the reason kept in ``error_message``.
        The placement data is left untouched. Cancellation is re-raised after
        the gangsheet has been marked.
        """
        try:
            await asyncio.wait_for(
                self._render(tenant_id, gangsheet_id), timeout=self._render_timeout
            )
        except asyncio.TimeoutError:
            logger.error("Rendering gangsheet %d timed out", gangsheet_id)
            await self._mark_failed(
                tenant_id,
                gangsheet_id,
                f"Rendering timed out after {self._render_timeout:g} seconds",
            )
        except asyncio.CancelledError:
            await self._mark_failed(tenant_id, gangsheet_id, "Rendering was cancelled")
            raise
        except (GangsheetNotFoundError, InvalidStatusTransition) as exc:
            logger.warning("Skipping render of gangsheet %d: %s", gangsheet_id, exc)
        except Exception as exc:
            logger.exception("Rendering gangsheet %d failed", gangsheet_id)
            await self._mark_failed(
                tenant_id, gangsheet_id, str(exc) or type(exc).__name__
            )

    async def _render(self, tenant_id: int, gangsheet_id: int) -> None:
        async with self._locks.hold(gangsheet_id):
            gangsheet = await self._repository.update_gangsheet_status(
                gangsheet_id, tenant_id, GangsheetStatus.PROCESSING
            )
        logger.info(
            "Rendering gangsheet %d (%d rolls)", gangsheet_id, gangsheet.total_rolls
        )

        prefix = artifact_prefix(tenant_id, gangsheet_id)
        base_name = safe_filename(gangsheet.name)
        roll_files: list[RollFile] = []
        entries: list[tuple[str, bytes]] = []
        processed = 0

        for roll in gangsheet.result.rolls:
            rendered = await asyncio.to_thread(
                self._renderer.render_roll,
                roll,
                gangsheet.settings,
                gangsheet_name=gangsheet.name,
                total_rolls=gangsheet.total_rolls,
            )
            filename = f"{base_name}_roll_{roll.roll_number}.{rendered.extension}"
            url = await self._storage.store(
                f"{prefix}/{filename}", rendered.content, rendered.media_type
            )
            roll_files.append(
                RollFile(
                    roll_number=roll.roll_number,
                    file_url=url,
                    width_px=rendered.width_px,
                    height_px=rendered.height_px,
                )
            )
            entries.append((filename, rendered.content))

            processed += roll.design_count
            async with self._locks.hold(gangsheet_id):
                await self._repository.update_progress(
                    gangsheet_id, tenant_id, processed
                )

        archive_url = await self._storage.store_archive(
            f"{prefix}/{base_name}.zip", entries
        )

        async with self._locks.hold(gangsheet_id):
            await self._repository.update_gangsheet_status(
                gangsheet_id,
                tenant_id,
                GangsheetStatus.COMPLETED,
                roll_files=roll_files,
                download_url=archive_url,
            )
        logger.info("Gangsheet %d completed", gangsheet_id)

    async def _mark_failed(
        self, tenant_id: int, gangsheet_id: int, message: str
    ) -> None:
        try:
            async with self._locks.hold(gangsheet_id):
                await self._repository.update_gangsheet_status(
                    gangsheet_id,
                    tenant_id,
                    GangsheetStatus.FAILED,
                    error_message=message,
                )
        except GangsheetError:
            logger.exception("Could not mark gangsheet %d as failed", gangsheet_id)
            return
        logger.warning("Gangsheet %d failed: %s", gangsheet_id, message)

