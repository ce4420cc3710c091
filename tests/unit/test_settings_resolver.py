"""Unit tests for the settings resolver."""

import pytest

from gangsheets.application.services import SettingsResolver, require_tenant
from gangsheets.domain import PackingSettings, ValidationError
from gangsheets.infrastructure import InMemorySettingsStore


@pytest.fixture
def tenant_settings() -> PackingSettings:
    return PackingSettings(roll_width=1300, roll_length=None, dpi=150, gap=20)


@pytest.fixture
def resolver(tenant_settings: PackingSettings) -> SettingsResolver:
    return SettingsResolver(InMemorySettingsStore({1: tenant_settings}))


class TestRequireTenant:
    """Tests for the tenant guard."""

    def test_returns_tenant(self) -> None:
        assert require_tenant(5) == 5

    @pytest.mark.parametrize("tenant_id", [None, 0, -3])
    def test_missing_tenant_raises(self, tenant_id: int | None) -> None:
        with pytest.raises(ValidationError, match="tenant id is required"):
            require_tenant(tenant_id)


class TestSettingsResolver:
    """Tests for override > tenant > system precedence."""

    @pytest.mark.asyncio
    async def test_override_wins(
        self, resolver: SettingsResolver, roll_22x60: PackingSettings
    ) -> None:
        assert await resolver.resolve(1, roll_22x60) == roll_22x60

    @pytest.mark.asyncio
    async def test_override_replaces_tenant_defaults_as_a_whole(
        self, resolver: SettingsResolver, tenant_settings: PackingSettings
    ) -> None:
        override = PackingSettings(roll_width=2400, roll_length=3600, dpi=300)
        resolved = await resolver.resolve(1, override)
        assert resolved.gap == 0
        assert resolved != tenant_settings

    @pytest.mark.asyncio
    async def test_stored_tenant_settings(
        self, resolver: SettingsResolver, tenant_settings: PackingSettings
    ) -> None:
        assert await resolver.resolve(1) == tenant_settings

    @pytest.mark.asyncio
    async def test_falls_back_to_system_defaults(
        self, resolver: SettingsResolver
    ) -> None:
        assert await resolver.resolve(2) == PackingSettings.default()

    @pytest.mark.asyncio
    async def test_custom_system_defaults(self, roll_22x60: PackingSettings) -> None:
        resolver = SettingsResolver(InMemorySettingsStore(), system_defaults=roll_22x60)
        assert resolver.system_defaults == roll_22x60
        assert await resolver.resolve(9) == roll_22x60

    @pytest.mark.asyncio
    async def test_missing_tenant_raises(self, resolver: SettingsResolver) -> None:
        with pytest.raises(ValidationError):
            await resolver.resolve(None)

    @pytest.mark.asyncio
    async def test_tenant_settings_are_isolated(
        self, resolver: SettingsResolver, tenant_settings: PackingSettings
    ) -> None:
        store = InMemorySettingsStore()
        await store.update_default_packing_settings(1, tenant_settings)
        isolated = SettingsResolver(store)
        assert await isolated.resolve(1) == tenant_settings
        assert await isolated.resolve(2) == PackingSettings.default()
