"""Service factory for dependency injection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gangsheets.config import AppSettings, get_app_settings

if TYPE_CHECKING:
    from gangsheets.application.assembler import GangsheetAssembler
    from gangsheets.application.services import (
        DesignItemExtractor,
        LayoutPlanner,
        RenderJobRunner,
        SettingsResolver,
    )
    from gangsheets.contracts.protocols import (
        ArtifactStorageProtocol,
        DesignLookupProtocol,
        GangsheetRepositoryProtocol,
        RollRendererProtocol,
        SettingsStoreProtocol,
    )
    from gangsheets.domain.services import ShelfPlacementEngine
    from gangsheets.infrastructure.db import Database

logger = logging.getLogger(__name__)


@dataclass
class ServiceFactory:
    """Factory for creating service instances.

    Centralizes service wiring so the API, the CLI and tests build the
    gangsheet flow the same way. Collaborators are created lazily on first
    use and cached. Any of them can be supplied up front to replace the
    default adapter, e.g. an in-memory design catalog in tests.

    Example:
        ```python
        factory = ServiceFactory(settings=AppSettings(render_mode="inline"))
        await factory.startup()
        assembler = factory.get_assembler()
        ```
    """

    settings: AppSettings = field(default_factory=get_app_settings)
    design_lookup: "DesignLookupProtocol | None" = None
    renderer: "RollRendererProtocol | None" = None
    storage: "ArtifactStorageProtocol | None" = None

    _database: "Database | None" = field(default=None, init=False, repr=False)
    _repository: "GangsheetRepositoryProtocol | None" = field(
        default=None, init=False, repr=False
    )
    _settings_store: "SettingsStoreProtocol | None" = field(
        default=None, init=False, repr=False
    )
    _jobs: "RenderJobRunner | None" = field(default=None, init=False, repr=False)
    _assembler: "GangsheetAssembler | None" = field(
        default=None, init=False, repr=False
    )

    def get_database(self) -> "Database":
        """Get or create the database handle."""
        if self._database is None:
            from gangsheets.infrastructure.db import Database

            self._database = Database(self.settings.database_url)
        return self._database

    def get_repository(self) -> "GangsheetRepositoryProtocol":
        """Get or create the gangsheet repository."""
        if self._repository is None:
            from gangsheets.infrastructure.repositories import SqlGangsheetRepository

            self._repository = SqlGangsheetRepository(self.get_database())
        return self._repository

    def get_settings_store(self) -> "SettingsStoreProtocol":
        """Get or create the tenant settings store."""
        if self._settings_store is None:
            from gangsheets.infrastructure.repositories import SqlSettingsStore

            self._settings_store = SqlSettingsStore(self.get_database())
        return self._settings_store

    def get_design_lookup(self) -> "DesignLookupProtocol":
        """Get or create the design lookup.

        Uses the HTTP catalog when a design service URL is configured and an
        empty in-memory catalog otherwise.
        """
        if self.design_lookup is None:
            from gangsheets.infrastructure.design_catalog import (
                HttpDesignCatalog,
                InMemoryDesignCatalog,
            )

            if self.settings.design_service_url:
                self.design_lookup = HttpDesignCatalog(
                    self.settings.design_service_url,
                    timeout=self.settings.design_service_timeout,
                )
            else:
                logger.warning(
                    "No design service configured; using an empty in-memory catalog"
                )
                self.design_lookup = InMemoryDesignCatalog()
        return self.design_lookup

    def get_renderer(self) -> "RollRendererProtocol":
        if self.renderer is None:
            from gangsheets.infrastructure.roll_renderer import SvgRollRenderer

            self.renderer = SvgRollRenderer()
        return self.renderer

    def get_storage(self) -> "ArtifactStorageProtocol":
        if self.storage is None:
            from gangsheets.infrastructure.storage import LocalArtifactStorage

            self.storage = LocalArtifactStorage(
                self.settings.storage_dir, self.settings.public_base_url
            )
        return self.storage

    def get_job_runner(self) -> "RenderJobRunner":
        if self._jobs is None:
            from gangsheets.application.services import RenderJobRunner

            self._jobs = RenderJobRunner(mode=self.settings.render_mode)
        return self._jobs

    def get_placement_engine(self) -> "ShelfPlacementEngine":
        """Create placement engine instance."""
        from gangsheets.domain.services import ShelfPlacementEngine

        return ShelfPlacementEngine()

    def get_settings_resolver(self) -> "SettingsResolver":
        """Create settings resolver instance."""
        from gangsheets.application.services import SettingsResolver

        return SettingsResolver(
            self.get_settings_store(),
            system_defaults=self.settings.system_packing_settings(),
        )

    def get_design_extractor(self) -> "DesignItemExtractor":
        """Create design item extractor instance."""
        from gangsheets.application.services import DesignItemExtractor

        return DesignItemExtractor(self.get_design_lookup())

    def get_layout_planner(self) -> "LayoutPlanner":
        """Create layout planner instance."""
        from gangsheets.application.services import LayoutPlanner

        return LayoutPlanner(
            self.get_settings_resolver(),
            self.get_design_extractor(),
            self.get_placement_engine(),
        )

    def get_assembler(self) -> "GangsheetAssembler":
        """Get or create the gangsheet assembler."""
        if self._assembler is None:
            from gangsheets.application.assembler import GangsheetAssembler

            self._assembler = GangsheetAssembler(
                planner=self.get_layout_planner(),
                resolver=self.get_settings_resolver(),
                repository=self.get_repository(),
                settings_store=self.get_settings_store(),
                renderer=self.get_renderer(),
                storage=self.get_storage(),
                jobs=self.get_job_runner(),
                render_timeout=self.settings.render_timeout_seconds,
            )
        return self._assembler

    async def startup(self) -> None:
        """Create database tables."""
        await self.get_database().init()

    async def shutdown(self) -> None:
        """Wait for running render jobs, then release the database."""
        if self._jobs is not None:
            await self._jobs.wait_all()
        if self._database is not None:
            await self._database.dispose()
