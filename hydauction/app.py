"""
HydAuction application factory.

Builds the FastAPI app: lifespan, routers, static mount and health check.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

# Common library imports
from common.database import MongoDB
from common.utils import NotFoundException, success_response

# App-specific imports
from hydauction import __version__
from hydauction.config import Settings, settings as default_settings
from hydauction.database import ensure_indexes
from hydauction.dependencies import Services, build_services, session_gate
from hydauction.routers import auth_router, items_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[Services] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use (environment-loaded by default)
        services: Prebuilt services; when given, no database connection
            is opened by the lifespan
    """
    settings = settings or default_settings
    settings.validate_required()

    main_db = MongoDB(server_selection_timeout_ms=settings.MONGODB_SERVER_TIMEOUT_MS)

    # =========================================================================
    # Application Lifespan
    # =========================================================================
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan context manager.

        Connects the database, builds services and runs the session
        sweeper for as long as the app is up.
        """
        # Startup
        logger.info("Starting HydAuction API...")

        app_services = services
        if app_services is None:
            await main_db.connect(
                uri=settings.MONGODB_URI,
                database_name=settings.MONGODB_DATABASE,
            )
            await ensure_indexes(main_db.db)
            app_services = build_services(main_db.db, settings)

        app_services.upload_storage.ensure_directories()
        app_services.session_sweeper.start()
        app.state.services = app_services
        logger.info("HydAuction API started successfully!")

        yield

        # Shutdown
        logger.info("Shutting down HydAuction API...")
        await app_services.session_sweeper.stop()
        app_services.session_store.clear()
        if main_db.is_connected:
            await main_db.disconnect()
        logger.info("HydAuction API shut down complete.")

    # =========================================================================
    # FastAPI Application
    # =========================================================================
    app = FastAPI(
        title="HydAuction API",
        description="Auction listings with cookie sessions",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development() else None,
        redoc_url="/redoc" if settings.is_development() else None,
        dependencies=[Depends(session_gate)],
    )

    # =========================================================================
    # CORS Middleware
    # =========================================================================
    if not settings.is_production():
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.get_cors_origins(),
            allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # =========================================================================
    # Routers
    # =========================================================================
    app.include_router(auth_router)
    app.include_router(items_router)

    # =========================================================================
    # Static files
    # =========================================================================
    os.makedirs(settings.PUBLIC_DIR, exist_ok=True)
    app.mount(
        settings.PUBLIC_URL_PREFIX,
        StaticFiles(directory=settings.PUBLIC_DIR),
        name="public",
    )

    @app.get("/", include_in_schema=False)
    async def index():
        """Serve the front-end root document."""
        index_path = os.path.join(settings.STATIC_DIR, "index.html")
        if not os.path.isfile(index_path):
            raise NotFoundException(message="Root document not found", code="INDEX_NOT_FOUND")
        return FileResponse(index_path)

    # =========================================================================
    # Health Check Endpoint
    # =========================================================================
    @app.get("/health", tags=["Health"])
    async def health(request: Request):
        """
        Health check endpoint.

        Returns the status of the API and database connection.
        """
        app_services = request.app.state.services
        return success_response({
            "status": "ok",
            "version": __version__,
            "database": await main_db.ping(),
            "sessions": len(app_services.session_store),
        })

    return app

