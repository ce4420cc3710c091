"""Application services used by the gangsheet assembler."""

from .design_extractor import DesignItemExtractor, copy_id
from .layout_planner import LayoutPlanner
from .locks import GangsheetLockRegistry
from .render_jobs import RenderJobRunner, RenderMode
from .settings_resolver import SettingsResolver, require_tenant

__all__ = [
    "DesignItemExtractor",
    "GangsheetLockRegistry",
    "LayoutPlanner",
    "RenderJobRunner",
    "RenderMode",
    "SettingsResolver",
    "copy_id",
    "require_tenant",
]
