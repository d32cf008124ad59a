"""FastAPI application entry point"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from worktrack.infrastructure.config.settings import Settings, settings as default_settings
from worktrack.infrastructure.database.base import create_db_engine, create_session_factory, init_db
from worktrack.infrastructure.logging_config import configure_logging
from worktrack.presentation.api.v1.routers import (
    projects,
    subtasks,
    tags,
    todo_activities,
    todo_dependencies,
    todos,
    work_periods,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    logger.info("Initializing application...")
    init_db(app.state.engine)

    try:
        yield
    except (KeyboardInterrupt, asyncio.CancelledError):
        # Normal shutdown
        pass
    finally:
        app.state.engine.dispose()
        logger.info("Shutting down application...")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with its own engine and session factory"""
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = create_db_engine(settings)
    app.state.session_factory = create_session_factory(app.state.engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
        max_age=3600,
    )
    logger.debug("CORS configured for %s", settings.CORS_ORIGINS)

    # Include routers
    app.include_router(todos.router, prefix=settings.API_V1_PREFIX)
    app.include_router(todo_activities.router, prefix=settings.API_V1_PREFIX)
    app.include_router(subtasks.router, prefix=settings.API_V1_PREFIX)
    app.include_router(todo_dependencies.router, prefix=settings.API_V1_PREFIX)
    app.include_router(work_periods.router, prefix=settings.API_V1_PREFIX)
    app.include_router(tags.router, prefix=settings.API_V1_PREFIX)
    app.include_router(projects.router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "docs": "/docs",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "ok"}

    return app


app = create_app()
