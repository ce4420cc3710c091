"""Exceptions raised by the gangsheet domain and its services.

Per-item problems (unresolved orders, invalid or oversized designs) are never
raised; they travel as data inside the placement and extraction results. The
exceptions below are reserved for structurally invalid input and for state
conflicts on persisted gangsheets.
"""

from __future__ import annotations


class GangsheetError(Exception):
    """Base class for all gangsheet errors."""


class ValidationError(GangsheetError, ValueError):
    """Raised when a request or settings object is malformed.

    Attributes:
        errors: Individual validation messages.
    """

    def __init__(self, errors: list[str] | str) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors = errors
        super().__init__("; ".join(errors))


class NoPlaceableItemsError(GangsheetError, ValueError):
    """Raised when nothing at all can be placed on a roll."""

    def __init__(self, message: str = "No placeable design items") -> None:
        self.message = message
        super().__init__(message)


class GangsheetNotFoundError(GangsheetError):
    """Raised when a gangsheet does not exist for the requesting tenant."""

    def __init__(self, gangsheet_id: int) -> None:
        self.gangsheet_id = gangsheet_id
        super().__init__(f"Gangsheet not found: {gangsheet_id}")


class GangsheetNotReadyError(GangsheetError):
    """Raised when a download is requested before rendering completed."""

    def __init__(self, gangsheet_id: int, status: str) -> None:
        self.gangsheet_id = gangsheet_id
        self.status = status
        super().__init__(
            f"Gangsheet {gangsheet_id} is not yet completed (status: {status})"
        )


class InvalidStatusTransition(GangsheetError):
    """Raised when a gangsheet status change violates the lifecycle."""

    def __init__(self, current: str, requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move gangsheet from {current} to {requested}")


class ConcurrentUpdateError(GangsheetError):
    """Raised when a gangsheet row was modified by another writer."""

    def __init__(self, gangsheet_id: int) -> None:
        self.gangsheet_id = gangsheet_id
        super().__init__(f"Gangsheet {gangsheet_id} was modified concurrently")


class PersistenceError(GangsheetError):
    """Raised when the datastore rejects a read or write.

    Re-submitting the same request is safe: placement is deterministic.
    """


class RenderingError(GangsheetError):
    """Raised by roll renderers and artifact storage during rendering."""


class DesignLookupError(GangsheetError):
    """Raised when the order/design service cannot be reached or answers badly."""
