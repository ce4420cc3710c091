"""Pytest configuration and shared fixtures for gangsheet tests."""

from __future__ import annotations

from pathlib import Path
from typing import AsyncIterator, Callable

import pytest
import pytest_asyncio

from gangsheets.application.factory import ServiceFactory
from gangsheets.config import AppSettings
from gangsheets.contracts.dtos import DesignRecord
from gangsheets.domain.value_objects import DesignItem, PackingSettings
from gangsheets.infrastructure.design_catalog import InMemoryDesignCatalog

DPI = 300


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


# =============================================================================
# Domain builders
# =============================================================================


def item(
    item_id: str,
    width_in: float,
    height_in: float,
    order_id: int = 1,
    group_key: str | None = None,
    dpi: int = DPI,
) -> DesignItem:
    """Design item whose artwork prints at exactly ``width_in`` x ``height_in``."""
    return DesignItem(
        id=item_id,
        order_id=order_id,
        group_key=group_key,
        width_px=round(width_in * dpi),
        height_px=round(height_in * dpi),
    )


def record(
    order_id: int,
    design_item_id: str,
    width_in: float = 4.0,
    height_in: float = 4.0,
    **kwargs: object,
) -> DesignRecord:
    """Design record sized in inches at 300 DPI."""
    return DesignRecord(
        order_id=order_id,
        design_item_id=design_item_id,
        width_px=round(width_in * DPI),
        height_px=round(height_in * DPI),
        **kwargs,  # type: ignore[arg-type]
    )


@pytest.fixture
def make_item() -> Callable[..., DesignItem]:
    return item


@pytest.fixture
def make_record() -> Callable[..., DesignRecord]:
    return record


@pytest.fixture
def roll_22x60() -> PackingSettings:
    """22" x 60" roll at 300 DPI, no gap or margins."""
    return PackingSettings(roll_width=2200, roll_length=6000, dpi=DPI)


# =============================================================================
# Service wiring
# =============================================================================


@pytest.fixture
def app_settings(tmp_path: Path) -> AppSettings:
    """Settings pointing at a throwaway sqlite file and storage directory."""
    return AppSettings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'gangsheets.db'}",
        storage_dir=tmp_path / "storage",
        public_base_url="http://testserver/files",
        design_service_url=None,
        render_mode="inline",
        render_timeout_seconds=30,
    )


@pytest.fixture
def catalog() -> InMemoryDesignCatalog:
    """Design catalog with two orders for tenant 1 and one for tenant 2."""
    catalog = InMemoryDesignCatalog()
    catalog.add(
        1,
        record(100, "100-1", 10, 10, line_item_id=1001, product_id=1, position=0),
        record(100, "100-2", 6, 4, line_item_id=1002, product_id=2, position=1),
        record(
            101, "101-1", 8, 8, line_item_id=1011, product_id=1, quantity=2,
            group_key="front",
        ),
    )
    catalog.add(2, record(200, "200-1", 5, 5, line_item_id=2001))
    return catalog


@pytest.fixture
def factory(
    app_settings: AppSettings, catalog: InMemoryDesignCatalog
) -> ServiceFactory:
    return ServiceFactory(settings=app_settings, design_lookup=catalog)


@pytest_asyncio.fixture
async def started_factory(factory: ServiceFactory) -> AsyncIterator[ServiceFactory]:
    """Factory with its database schema created."""
    await factory.startup()
    yield factory
    await factory.shutdown()
