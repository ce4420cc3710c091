"""ORM tables for gangsheets and tenant packing settings.

Physical lengths are stored in hundredths of an inch, exactly as the domain
uses them. Placements and placement failures are stored as JSON documents on
their roll and gangsheet rows since they are always read and written as a
whole.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gangsheets.infrastructure.db import Base


class TenantPackingSettingsModel(Base):
    __tablename__ = "tenant_packing_settings"

    tenant_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    roll_width: Mapped[int] = mapped_column(Integer)
    roll_length: Mapped[int | None] = mapped_column(Integer, nullable=True)
    dpi: Mapped[int] = mapped_column(Integer)
    gap: Mapped[int] = mapped_column(Integer, default=0)
    margin_top: Mapped[int] = mapped_column(Integer, default=0)
    margin_left: Mapped[int] = mapped_column(Integer, default=0)
    border: Mapped[bool] = mapped_column(Boolean, default=False)
    border_size: Mapped[int] = mapped_column(Integer, default=0)
    border_color: Mapped[str] = mapped_column(String(32), default="red")
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


class GangsheetModel(Base):
    __tablename__ = "gangsheets"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(Integer, index=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    status: Mapped[str] = mapped_column(String(16), index=True)
    order_ids: Mapped[list[int]] = mapped_column(JSON, default=list)
    skipped_order_ids: Mapped[list[int]] = mapped_column(JSON, default=list)
    settings: Mapped[dict[str, Any]] = mapped_column(JSON)
    failures: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    total_designs: Mapped[int] = mapped_column(Integer, default=0)
    total_rolls: Mapped[int] = mapped_column(Integer, default=0)
    processed_designs: Mapped[int] = mapped_column(Integer, default=0)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    download_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    rolls: Mapped[list[GangsheetRollModel]] = relationship(
        back_populates="gangsheet",
        cascade="all, delete-orphan",
        order_by="GangsheetRollModel.roll_number",
        lazy="selectin",
        passive_deletes=True,
    )

    __mapper_args__ = {"version_id_col": version}


class GangsheetRollModel(Base):
    __tablename__ = "gangsheet_rolls"
    __table_args__ = (UniqueConstraint("gangsheet_id", "roll_number"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    gangsheet_id: Mapped[int] = mapped_column(
        ForeignKey("gangsheets.id", ondelete="CASCADE"), index=True
    )
    roll_number: Mapped[int] = mapped_column(Integer)
    max_height_used: Mapped[int] = mapped_column(Integer)
    design_count: Mapped[int] = mapped_column(Integer, default=0)
    placements: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    file_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    width_px: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height_px: Mapped[int | None] = mapped_column(Integer, nullable=True)

    gangsheet: Mapped[GangsheetModel] = relationship(back_populates="rolls")
