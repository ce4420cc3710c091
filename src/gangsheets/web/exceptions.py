"""Custom exceptions and error handlers for the REST API."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from gangsheets.domain.exceptions import (
    ConcurrentUpdateError,
    DesignLookupError,
    GangsheetNotFoundError,
    GangsheetNotReadyError,
    InvalidStatusTransition,
    NoPlaceableItemsError,
    PersistenceError,
    ValidationError,
)


class TenantRequiredError(Exception):
    """Raised when a request carries no usable tenant id."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def _error(status_code: int, error: str, error_type: str, details=None) -> JSONResponse:  # noqa: ANN001
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "error_type": error_type, "details": details},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with the FastAPI app."""

    @app.exception_handler(TenantRequiredError)
    async def tenant_required_handler(
        request: Request, exc: TenantRequiredError
    ) -> JSONResponse:
        return _error(400, exc.message, "tenant_required")

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return _error(
            422,
            "Validation failed",
            "validation",
            [{"message": e} for e in exc.errors],
        )

    @app.exception_handler(NoPlaceableItemsError)
    async def no_placeable_items_handler(
        request: Request, exc: NoPlaceableItemsError
    ) -> JSONResponse:
        return _error(422, exc.message, "no_placeable_items")

    @app.exception_handler(GangsheetNotFoundError)
    async def not_found_handler(
        request: Request, exc: GangsheetNotFoundError
    ) -> JSONResponse:
        return _error(
            404, str(exc), "not_found", {"gangsheet_id": exc.gangsheet_id}
        )

    @app.exception_handler(GangsheetNotReadyError)
    async def not_ready_handler(
        request: Request, exc: GangsheetNotReadyError
    ) -> JSONResponse:
        return _error(
            409,
            str(exc),
            "not_ready",
            {"gangsheet_id": exc.gangsheet_id, "status": exc.status},
        )

    @app.exception_handler(InvalidStatusTransition)
    async def invalid_transition_handler(
        request: Request, exc: InvalidStatusTransition
    ) -> JSONResponse:
        return _error(
            409,
            str(exc),
            "invalid_status_transition",
            {"current": exc.current, "requested": exc.requested},
        )

    @app.exception_handler(ConcurrentUpdateError)
    async def concurrent_update_handler(
        request: Request, exc: ConcurrentUpdateError
    ) -> JSONResponse:
        return _error(
            409, str(exc), "concurrent_update", {"gangsheet_id": exc.gangsheet_id}
        )

    @app.exception_handler(DesignLookupError)
    async def design_lookup_handler(
        request: Request, exc: DesignLookupError
    ) -> JSONResponse:
        return _error(502, str(exc), "design_lookup")

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(
        request: Request, exc: PersistenceError
    ) -> JSONResponse:
        return _error(503, "Datastore unavailable, please retry", "persistence")
