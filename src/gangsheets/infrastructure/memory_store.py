"""In-memory tenant settings store."""

from __future__ import annotations

from gangsheets.domain.value_objects import PackingSettings


class InMemorySettingsStore:
    """Tenant default packing settings held in a dict.

    Used by the CLI, which packs job files without a database.
    """

    def __init__(self, settings: dict[int, PackingSettings] | None = None) -> None:
        self._settings: dict[int, PackingSettings] = dict(settings or {})

    async def get_default_packing_settings(
        self, tenant_id: int
    ) -> PackingSettings | None:
        return self._settings.get(tenant_id)

    async def update_default_packing_settings(
        self, tenant_id: int, settings: PackingSettings
    ) -> PackingSettings:
        self._settings[tenant_id] = settings
        return settings
