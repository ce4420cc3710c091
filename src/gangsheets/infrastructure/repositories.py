"""SQLAlchemy implementations of the persistence protocols."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Callable, Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import noload
from sqlalchemy.orm.exc import StaleDataError

from gangsheets.contracts.dtos import GangsheetFilters, GangsheetPage, GangsheetSummary
from gangsheets.domain.entities import Gangsheet, RollFile
from gangsheets.domain.exceptions import (
    ConcurrentUpdateError,
    GangsheetNotFoundError,
    PersistenceError,
)
from gangsheets.domain.value_objects import (
    GangsheetStatus,
    PackingSettings,
    Placement,
    PlacementFailure,
    PlacementResult,
    Roll,
)
from gangsheets.infrastructure.db import Database
from gangsheets.infrastructure.models import (
    GangsheetModel,
    GangsheetRollModel,
    TenantPackingSettingsModel,
)

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    "created_at": GangsheetModel.created_at,
    "name": GangsheetModel.name,
    "status": GangsheetModel.status,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(value: datetime | None) -> datetime | None:
    """SQLite drops tzinfo; stored timestamps are always UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


# =============================================================================
# Mapping
# =============================================================================


def settings_to_dict(settings: PackingSettings) -> dict[str, Any]:
    return asdict(settings)


def settings_from_dict(data: dict[str, Any]) -> PackingSettings:
    return PackingSettings(**data)


def gangsheet_to_model(gangsheet: Gangsheet) -> GangsheetModel:
    """Build a new ORM row, with its roll rows, from the aggregate."""
    return GangsheetModel(
        tenant_id=gangsheet.tenant_id,
        name=gangsheet.name,
        status=gangsheet.status.value,
        order_ids=list(gangsheet.order_ids),
        skipped_order_ids=list(gangsheet.skipped_order_ids),
        settings=settings_to_dict(gangsheet.settings),
        failures=[asdict(f) for f in gangsheet.result.failures],
        total_designs=gangsheet.total_designs,
        total_rolls=gangsheet.total_rolls,
        processed_designs=gangsheet.processed_designs,
        error_message=gangsheet.error_message,
        download_url=gangsheet.download_url,
        created_at=gangsheet.created_at or _utcnow(),
        completed_at=gangsheet.completed_at,
        rolls=[
            GangsheetRollModel(
                roll_number=roll.roll_number,
                max_height_used=roll.max_height_used,
                design_count=roll.design_count,
                placements=[asdict(p) for p in roll.placements],
            )
            for roll in gangsheet.result.rolls
        ],
    )


def gangsheet_from_model(model: GangsheetModel) -> Gangsheet:
    """Rebuild the aggregate from an ORM row with its rolls loaded."""
    rolls = tuple(
        Roll(
            roll_number=row.roll_number,
            max_height_used=row.max_height_used,
            placements=tuple(Placement(**p) for p in row.placements),
        )
        for row in model.rolls
    )
    roll_files = tuple(
        RollFile(
            roll_number=row.roll_number,
            file_url=row.file_url,
            width_px=row.width_px or 0,
            height_px=row.height_px or 0,
        )
        for row in model.rolls
        if row.file_url is not None
    )
    return Gangsheet(
        id=model.id,
        tenant_id=model.tenant_id,
        name=model.name,
        status=GangsheetStatus(model.status),
        order_ids=tuple(model.order_ids),
        settings=settings_from_dict(model.settings),
        result=PlacementResult(
            rolls=rolls,
            failures=tuple(PlacementFailure(**f) for f in model.failures),
        ),
        skipped_order_ids=tuple(model.skipped_order_ids),
        error_message=model.error_message,
        processed_designs=model.processed_designs,
        download_url=model.download_url,
        roll_files=roll_files,
        created_at=_aware(model.created_at),
        completed_at=_aware(model.completed_at),
        version=model.version,
    )


def summary_from_model(model: GangsheetModel) -> GangsheetSummary:
    created_at = _aware(model.created_at)
    assert created_at is not None
    return GangsheetSummary(
        id=model.id,
        name=model.name,
        status=GangsheetStatus(model.status),
        total_designs=model.total_designs,
        total_rolls=model.total_rolls,
        download_url=model.download_url,
        created_at=created_at,
    )


# =============================================================================
# Gangsheets
# =============================================================================


class SqlGangsheetRepository:
    """Gangsheet persistence on an async SQLAlchemy database.

    Every write runs in its own transaction. The row's version column makes
    a write fail with ConcurrentUpdateError when another writer committed in
    between; datastore failures surface as PersistenceError.
    """

    def __init__(
        self, database: Database, clock: Callable[[], datetime] = _utcnow
    ) -> None:
        self._db = database
        self._clock = clock

    async def save_gangsheet(self, gangsheet: Gangsheet) -> int:
        model = gangsheet_to_model(gangsheet)
        try:
            async with self._db.session() as session:
                session.add(model)
                await session.flush()
                gangsheet_id = model.id
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not save gangsheet: {exc}") from exc
        logger.debug("Saved gangsheet %d with %d rolls", gangsheet_id, len(model.rolls))
        return gangsheet_id

    async def load_gangsheet(
        self, gangsheet_id: int, tenant_id: int
    ) -> Gangsheet | None:
        try:
            async with self._db.session() as session:
                model = await self._find(session, gangsheet_id, tenant_id)
                return gangsheet_from_model(model) if model is not None else None
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not load gangsheet: {exc}") from exc

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
        try:
            async with self._db.session() as session:
                model = await self._get(session, gangsheet_id, tenant_id)
                GangsheetStatus(model.status).ensure_transition(status)

                model.status = status.value
                if status.is_terminal:
                    model.completed_at = self._clock()
                if status == GangsheetStatus.COMPLETED:
                    model.processed_designs = model.total_designs
                if error_message is not None:
                    model.error_message = error_message
                if download_url is not None:
                    model.download_url = download_url
                if roll_files is not None:
                    files = {f.roll_number: f for f in roll_files}
                    for row in model.rolls:
                        rendered = files.get(row.roll_number)
                        if rendered is not None:
                            row.file_url = rendered.file_url
                            row.width_px = rendered.width_px
                            row.height_px = rendered.height_px

                await session.flush()
                gangsheet = gangsheet_from_model(model)
        except StaleDataError as exc:
            raise ConcurrentUpdateError(gangsheet_id) from exc
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not update gangsheet: {exc}") from exc

        logger.debug("Gangsheet %d is now %s", gangsheet_id, status.value)
        return gangsheet

    async def update_progress(
        self, gangsheet_id: int, tenant_id: int, processed_designs: int
    ) -> None:
        try:
            async with self._db.session() as session:
                model = await self._get(session, gangsheet_id, tenant_id)
                model.processed_designs = processed_designs
        except StaleDataError as exc:
            raise ConcurrentUpdateError(gangsheet_id) from exc
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not update progress: {exc}") from exc

    async def delete_gangsheet(self, gangsheet_id: int, tenant_id: int) -> bool:
        try:
            async with self._db.session() as session:
                model = await self._find(session, gangsheet_id, tenant_id)
                if model is None:
                    return False
                await session.delete(model)
        except StaleDataError as exc:
            raise ConcurrentUpdateError(gangsheet_id) from exc
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not delete gangsheet: {exc}") from exc
        return True

    async def list_gangsheets(
        self, tenant_id: int, filters: GangsheetFilters
    ) -> GangsheetPage:
        query = self._filtered(tenant_id, filters)
        column = _SORT_COLUMNS[filters.sort_by]
        if filters.sort_order == "asc":
            ordering = (column.asc(), GangsheetModel.id.asc())
        else:
            ordering = (column.desc(), GangsheetModel.id.desc())

        try:
            async with self._db.session() as session:
                total = await session.scalar(
                    select(func.count()).select_from(query.subquery())
                )
                rows = await session.scalars(
                    query.options(noload(GangsheetModel.rolls))
                    .order_by(*ordering)
                    .offset(filters.offset)
                    .limit(filters.limit)
                )
                items = [summary_from_model(row) for row in rows]
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not list gangsheets: {exc}") from exc

        return GangsheetPage(
            items=items, total=total or 0, page=filters.page, limit=filters.limit
        )

    @staticmethod
    def _filtered(tenant_id: int, filters: GangsheetFilters) -> Select:
        query = select(GangsheetModel).where(GangsheetModel.tenant_id == tenant_id)
        if filters.status is not None:
            query = query.where(GangsheetModel.status == filters.status.value)
        if filters.search:
            pattern = f"%{_escape_like(filters.search)}%"
            query = query.where(GangsheetModel.name.ilike(pattern, escape="\\"))
        return query

    @staticmethod
    async def _find(
        session: AsyncSession, gangsheet_id: int, tenant_id: int
    ) -> GangsheetModel | None:
        return await session.scalar(
            select(GangsheetModel).where(
                GangsheetModel.id == gangsheet_id,
                GangsheetModel.tenant_id == tenant_id,
            )
        )

    @classmethod
    async def _get(
        cls, session: AsyncSession, gangsheet_id: int, tenant_id: int
    ) -> GangsheetModel:
        model = await cls._find(session, gangsheet_id, tenant_id)
        if model is None:
            raise GangsheetNotFoundError(gangsheet_id)
        return model


# =============================================================================
# Tenant settings
# =============================================================================


class SqlSettingsStore:
    """Per-tenant default packing settings on an async SQLAlchemy database."""

    def __init__(
        self, database: Database, clock: Callable[[], datetime] = _utcnow
    ) -> None:
        self._db = database
        self._clock = clock

    async def get_default_packing_settings(
        self, tenant_id: int
    ) -> PackingSettings | None:
        try:
            async with self._db.session() as session:
                model = await session.get(TenantPackingSettingsModel, tenant_id)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not load packing settings: {exc}") from exc
        if model is None:
            return None
        return PackingSettings(
            roll_width=model.roll_width,
            roll_length=model.roll_length,
            dpi=model.dpi,
            gap=model.gap,
            margin_top=model.margin_top,
            margin_left=model.margin_left,
            border=model.border,
            border_size=model.border_size,
            border_color=model.border_color,
        )

    async def update_default_packing_settings(
        self, tenant_id: int, settings: PackingSettings
    ) -> PackingSettings:
        try:
            async with self._db.session() as session:
                model = await session.get(TenantPackingSettingsModel, tenant_id)
                if model is None:
                    model = TenantPackingSettingsModel(tenant_id=tenant_id)
                    session.add(model)
                for key, value in settings_to_dict(settings).items():
                    setattr(model, key, value)
                model.updated_at = self._clock()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not save packing settings: {exc}") from exc
        return settings
