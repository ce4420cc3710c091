"""Gangsheet aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .value_objects import GangsheetStatus, PackingSettings, PlacementResult


@dataclass(frozen=True)
class RollFile:
    """Rendered output for one roll, as stored."""

    roll_number: int
    file_url: str
    width_px: int
    height_px: int


@dataclass
class Gangsheet:
    """A tenant-owned packing run and its rendered output.

    The aggregate exclusively owns its rolls (``result.rolls``) and the
    rendered roll files. ``settings`` is a snapshot taken at creation time so
    later changes to tenant defaults never alter historical gangsheets.

    Attributes:
        id: Datastore identifier (None until saved).
        tenant_id: Owning tenant.
        name: Display name, e.g. ``GS_20240101_120000``.
        status: Current lifecycle state.
        order_ids: Orders requested for this run.
        settings: Packing settings snapshot.
        result: Computed placement result.
        skipped_order_ids: Requested orders that yielded no design items.
        error_message: Failure reason, kept for inspection.
        processed_designs: Designs rendered so far.
        download_url: Archive of all rolls, once completed.
        roll_files: One rendered file per roll, once completed.
        created_at: Creation timestamp (UTC).
        completed_at: When the gangsheet reached a terminal state.
        version: Optimistic concurrency counter maintained by the datastore.
    """

    tenant_id: int
    name: str
    order_ids: tuple[int, ...]
    settings: PackingSettings
    result: PlacementResult
    status: GangsheetStatus = GangsheetStatus.PENDING
    id: int | None = None
    skipped_order_ids: tuple[int, ...] = ()
    error_message: str | None = None
    processed_designs: int = 0
    download_url: str | None = None
    roll_files: tuple[RollFile, ...] = ()
    created_at: datetime | None = None
    completed_at: datetime | None = None
    version: int = field(default=1, compare=False)

    @property
    def total_designs(self) -> int:
        return self.result.total_designs

    @property
    def total_rolls(self) -> int:
        return self.result.total_rolls

    @property
    def file_urls(self) -> tuple[str, ...]:
        return tuple(f.file_url for f in self.roll_files)

    @property
    def progress(self) -> int:
        """Completion percentage (0-100) derived from status and render progress."""
        if self.status == GangsheetStatus.COMPLETED:
            return 100
        if self.status == GangsheetStatus.PROCESSING:
            if self.total_designs == 0:
                return 10
            done = min(self.processed_designs, self.total_designs)
            return 10 + (done * 80) // self.total_designs
        return 0

    @property
    def is_downloadable(self) -> bool:
        return self.status == GangsheetStatus.COMPLETED and self.download_url is not None

    @staticmethod
    def generate_name(now: datetime) -> str:
        """Default gangsheet name for a creation time."""
        return f"GS_{now:%Y%m%d_%H%M%S}"
