"""Domain services."""

from .placement import OVERSIZED, ShelfPlacementEngine, group_items

__all__ = ["OVERSIZED", "ShelfPlacementEngine", "group_items"]
