"""FastAPI dependency injection for gangsheet services."""

from typing import Annotated

from fastapi import Depends, Header, Request

from gangsheets.application.assembler import GangsheetAssembler
from gangsheets.application.factory import ServiceFactory
from gangsheets.web.exceptions import TenantRequiredError


def get_service_factory(request: Request) -> ServiceFactory:
    """ServiceFactory the application was created with."""
    return request.app.state.factory


def get_assembler(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> GangsheetAssembler:
    """Dependency for GangsheetAssembler."""
    return factory.get_assembler()


def get_tenant_id(
    x_tenant_id: Annotated[str | None, Header(description="Requesting tenant")] = None,
) -> int:
    """Tenant id from the ``X-Tenant-Id`` header."""
    if x_tenant_id is None or not x_tenant_id.strip():
        raise TenantRequiredError("X-Tenant-Id header is required")
    try:
        tenant_id = int(x_tenant_id)
    except ValueError:
        raise TenantRequiredError(
            f"Invalid X-Tenant-Id header: {x_tenant_id!r}"
        ) from None
    if tenant_id <= 0:
        raise TenantRequiredError(f"Invalid X-Tenant-Id header: {x_tenant_id!r}")
    return tenant_id


# Type aliases for cleaner endpoint signatures
ServiceFactoryDep = Annotated[ServiceFactory, Depends(get_service_factory)]
AssemblerDep = Annotated[GangsheetAssembler, Depends(get_assembler)]
TenantDep = Annotated[int, Depends(get_tenant_id)]
