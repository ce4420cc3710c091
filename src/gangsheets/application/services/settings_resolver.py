"""Settings resolver service.

Determines which packing settings a request is placed with: an explicit
override replaces the tenant defaults as a whole, stored tenant defaults come
next, and the system defaults are the final fallback.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gangsheets.domain.exceptions import ValidationError
from gangsheets.domain.value_objects import PackingSettings

if TYPE_CHECKING:
    from gangsheets.contracts.protocols import SettingsStoreProtocol

logger = logging.getLogger(__name__)


def require_tenant(tenant_id: int | None) -> int:
    """Return ``tenant_id`` or raise ValidationError if it is missing."""
    if tenant_id is None or tenant_id <= 0:
        raise ValidationError("A tenant id is required")
    return tenant_id


class SettingsResolver:
    """Resolves effective packing settings for a tenant.

    Args:
        store: Per-tenant settings storage.
        system_defaults: Fallback used when the tenant never saved defaults.
            Defaults to :meth:`PackingSettings.default`.
    """

    def __init__(
        self,
        store: "SettingsStoreProtocol",
        system_defaults: PackingSettings | None = None,
    ) -> None:
        self._store = store
        self._system_defaults = system_defaults or PackingSettings.default()

    @property
    def system_defaults(self) -> PackingSettings:
        return self._system_defaults

    async def resolve(
        self,
        tenant_id: int | None,
        override: PackingSettings | None = None,
    ) -> PackingSettings:
        """Return the settings a request should be packed with.

        Args:
            tenant_id: Requesting tenant.
            override: Full settings supplied with the request, if any.

        Returns:
            ``override`` when given, else the tenant's stored defaults, else
            the system defaults.

        Raises:
            ValidationError: If ``tenant_id`` is missing.
        """
        tenant_id = require_tenant(tenant_id)
        if override is not None:
            return override

        stored = await self._store.get_default_packing_settings(tenant_id)
        if stored is not None:
            return stored

        logger.debug("Tenant %d has no stored settings, using system defaults", tenant_id)
        return self._system_defaults
