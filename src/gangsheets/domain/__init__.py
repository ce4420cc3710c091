"""Domain layer - gangsheet value objects, aggregate and placement engine."""

from .entities import Gangsheet, RollFile
from .exceptions import (
    ConcurrentUpdateError,
    DesignLookupError,
    GangsheetError,
    GangsheetNotFoundError,
    GangsheetNotReadyError,
    InvalidStatusTransition,
    NoPlaceableItemsError,
    PersistenceError,
    RenderingError,
    ValidationError,
)
from .services import ShelfPlacementEngine, group_items
from .units import SCALE, px_to_units, to_inches, to_units, units_to_px
from .value_objects import (
    DesignItem,
    GangsheetStatus,
    InvalidItem,
    PackingSettings,
    Placement,
    PlacementFailure,
    PlacementResult,
    Roll,
)

__all__ = [
    # Entities
    "Gangsheet",
    "RollFile",
    # Value objects
    "DesignItem",
    "GangsheetStatus",
    "InvalidItem",
    "PackingSettings",
    "Placement",
    "PlacementFailure",
    "PlacementResult",
    "Roll",
    # Services
    "ShelfPlacementEngine",
    "group_items",
    # Units
    "SCALE",
    "px_to_units",
    "to_inches",
    "to_units",
    "units_to_px",
    # Exceptions
    "ConcurrentUpdateError",
    "DesignLookupError",
    "GangsheetError",
    "GangsheetNotFoundError",
    "GangsheetNotReadyError",
    "InvalidStatusTransition",
    "NoPlaceableItemsError",
    "PersistenceError",
    "RenderingError",
    "ValidationError",
]
