"""
Application factory for FastAPI.

This module provides a factory function for creating FastAPI application instances.
The factory pattern allows for:
- Easy testing with custom settings
- Multiple app instances with different configurations
- Clear separation of app creation from route definitions

Usage:
    from backend.main import create_app
    from backend.settings import Settings

    # Default app (uses get_settings())
    app = create_app()

    # Test app with custom settings
    test_settings = Settings(environment="test", _env_file=None)
    test_app = create_app(settings=test_settings)
"""

import logging
from typing import Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    _configure_logging(settings)

    # Initialize Sentry for error tracking
    _init_sentry(settings)

    app = FastAPI(
        title="Training Progression API",
        description="Progression, fatigue, plateau and RPE calibration calculators",
        version="1.0.0",
    )

    _configure_cors(app, settings)

    _include_routers(app)

    # Routers read settings through the dependency; serve this instance
    from api.deps import get_settings as deps_get_settings
    app.dependency_overrides[deps_get_settings] = lambda: settings

    _log_engine_settings(settings)

    return app


def _configure_logging(settings: Settings) -> None:
    """Set the root log level from settings."""
    logging.basicConfig(level=settings.log_level)
    logging.getLogger().setLevel(settings.log_level)


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
            profiles_sample_rate=0.1,
            enable_tracing=True,
        )
        logger.info("Sentry initialized for training-progression-api")


def _configure_cors(app: FastAPI, settings: Settings) -> None:
    """Configure CORS middleware for the application."""
    trusted_origins = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]
    trusted_origins.extend(settings.cors_origins_list)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=trusted_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _include_routers(app: FastAPI) -> None:
    """Include all API routers in the application."""
    from api.routers import (
        calibration_router,
        discomfort_router,
        fatigue_router,
        health_router,
        plateaus_router,
        progression_router,
    )

    # Health router (no prefix - /health at root)
    app.include_router(health_router)

    # Calculator routers (with prefixes defined in each router)
    app.include_router(progression_router)
    app.include_router(fatigue_router)
    app.include_router(plateaus_router)
    app.include_router(calibration_router)
    app.include_router(discomfort_router)


def _log_engine_settings(settings: Settings) -> None:
    """Log the engine tunables at startup."""
    logger.info(
        f"Engine settings: readiness_threshold={settings.readiness_threshold} "
        f"calibration_stale_days={settings.calibration_stale_days} "
        f"discomfort_window_days={settings.discomfort_window_days} "
        f"(environment: {settings.environment})"
    )


# Default app instance for uvicorn
# This allows: uvicorn backend.main:app --reload
app = create_app()
