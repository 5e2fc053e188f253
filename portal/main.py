"""FastAPI application entry point."""

from contextlib import asynccontextmanager

import litellm
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portal import __version__
from portal.config import Settings, get_settings
from portal.database import Database

# Registers the tables on Base.metadata
import portal.models  # noqa: F401
from portal.middleware import logging_middleware, register_exception_handlers
from portal.routers import admin, advisory, health, papers, users
from portal.utils.logger import configure_logging, get_logger

API_PREFIX = "/api/v1"
ROUTERS = (health, papers, users, advisory, admin)

settings = get_settings()

# Configure logging early
configure_logging(log_level=settings.log_level, debug=settings.debug)
log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database for the app's lifetime."""
    settings: Settings = app.state.settings
    log.info("starting application", debug=settings.debug, log_level=settings.log_level)

    db = Database.from_settings(settings)
    db.connect()
    await db.create_all()
    app.state.db = db
    log.info("database initialized")

    litellm.suppress_debug_info = True
    if not settings.firebase_project_id:
        log.warning("firebase project id not set, every token will be rejected")

    yield

    log.info("shutting down application")
    await db.dispose()
    log.info("database connections closed")


def create_app(app_settings: Settings) -> FastAPI:
    app = FastAPI(
        title="Paper Portal API",
        description="Academic paper submission, review and publication portal",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    register_exception_handlers(app)

    cors_origins = app_settings.get_cors_origins_list()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["*"],
        allow_credentials=bool(cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
        # Browsers need these to read the download name and correlate errors
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )
    app.middleware("http")(logging_middleware)

    for module in ROUTERS:
        app.include_router(module.router, prefix=API_PREFIX)

    @app.get("/")
    async def root():
        """Service name, version and entry points."""
        return {
            "name": app.title,
            "version": __version__,
            "submission": {
                "file_types": [".pdf", ".docx"],
                "max_upload_bytes": app_settings.max_upload_bytes,
                "submission_fee": app_settings.submission_fee,
                "payment_window_hours": app_settings.payment_window_hours,
            },
            "endpoints": {
                "health": f"{API_PREFIX}/health",
                "papers": f"{API_PREFIX}/papers",
                "users": f"{API_PREFIX}/users",
                "advisory": f"{API_PREFIX}/advisory/pre-check",
                "admin": f"{API_PREFIX}/admin/stats",
            },
            "docs": "/docs",
        }

    return app


app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "portal.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
