"""
FastAPI Application Entry Point.

This is the main application file for the FleetFlow backend.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from fleetflow.app.core.config import settings, DEFAULT_JWT_SECRET
from fleetflow.app.core.logging_config import setup_logging
from fleetflow.app.core.observability import ObservabilityMiddleware
from fleetflow.app.api.v1.router import router as api_v1_router
from fleetflow.app.db.session import engine, Base
from fleetflow.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    integrity_exception_handler,
    generic_exception_handler,
)

# Import models to ensure they are registered with Base
from fleetflow.app.models.user import User  # noqa: F401
from fleetflow.app.models.vehicle import Vehicle  # noqa: F401
from fleetflow.app.models.driver import Driver  # noqa: F401
from fleetflow.app.models.trip import Trip  # noqa: F401
from fleetflow.app.models.maintenance import MaintenanceRecord  # noqa: F401
from fleetflow.app.models.expense import Expense  # noqa: F401
from fleetflow.app.models.fleet_health_snapshot import FleetHealthSnapshot  # noqa: F401
from fleetflow.app.models.notification import Notification  # noqa: F401
from fleetflow.app.models.audit_log import AuditLog  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Configures logging.
    2. Refuses to start in production with the development JWT secret.
    3. Creates database tables on startup.
    4. Disposes the engine on shutdown.
    """
    setup_logging(settings.log_level)

    if not settings.debug and settings.jwt_secret == DEFAULT_JWT_SECRET:
        raise RuntimeError("JWT_SECRET must be set when DEBUG is false")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s %s started on port %s", settings.app_name, settings.app_version, settings.port)

    yield

    await engine.dispose()


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    description="Fleet management API: vehicles, drivers, trips, maintenance, expenses and role dashboards",
    lifespan=lifespan,
)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(IntegrityError, integrity_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.add_middleware(ObservabilityMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"success": True, "message": "Server is running"}


# Include API v1 router
app.include_router(api_v1_router, prefix=settings.api_prefix)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("fleetflow.app.main:app", host="0.0.0.0", port=settings.port, reload=settings.debug)
