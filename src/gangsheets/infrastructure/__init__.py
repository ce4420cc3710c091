"""Infrastructure layer - persistence, design lookup, rendering and storage."""

from .db import Base, Database
from .design_catalog import HttpDesignCatalog, InMemoryDesignCatalog
from .formatters import PlacementReportFormatter, SettingsFormatter
from .memory_store import InMemorySettingsStore
from .repositories import SqlGangsheetRepository, SqlSettingsStore
from .roll_renderer import SvgRollRenderer
from .storage import LocalArtifactStorage, build_zip_archive

__all__ = [
    "Base",
    "Database",
    "HttpDesignCatalog",
    "InMemoryDesignCatalog",
    "InMemorySettingsStore",
    "LocalArtifactStorage",
    "PlacementReportFormatter",
    "SettingsFormatter",
    "SqlGangsheetRepository",
    "SqlSettingsStore",
    "SvgRollRenderer",
    "build_zip_archive",
]
