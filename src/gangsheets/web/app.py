"""FastAPI application factory."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from gangsheets import __version__
from gangsheets.application.factory import ServiceFactory
from gangsheets.config import configure_logging
from gangsheets.web.exceptions import register_exception_handlers
from gangsheets.web.routers import gangsheets_router


def create_app(factory: ServiceFactory | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        factory: Service wiring to use. Defaults to one built from the
            environment.

    Returns:
        Configured FastAPI application instance.
    """
    factory = factory or ServiceFactory()
    settings = factory.settings
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        settings.storage_dir.mkdir(parents=True, exist_ok=True)
        await factory.startup()
        yield
        await factory.shutdown()

    app = FastAPI(
        title="PrintNest Gangsheet API",
        description="REST API for packing order designs onto gangsheet rolls",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.factory = factory

    # CORS middleware for browser access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(gangsheets_router, prefix="/api/v1")

    # Rendered rolls and archives
    app.mount(
        "/files",
        StaticFiles(directory=settings.storage_dir, check_dir=False),
        name="files",
    )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
