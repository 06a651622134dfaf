"""
FastAPI Dependency Providers for the Training Progression API.

This module provides FastAPI dependency injection functions for the
routers. The calculators themselves are pure and need no wiring; only
settings and the wall clock are injected so tests can override them.

Usage in routers:
    from api.deps import get_settings

    @router.post("/targets")
    def next_targets(settings: Settings = Depends(get_settings)):
        ...

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_clock] = lambda: lambda: fixed_now
"""

from datetime import datetime, timezone
from typing import Callable

from backend.settings import Settings, get_settings as _get_settings


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.

    Returns:
        Settings: Application settings instance
    """
    return _get_settings()


# =============================================================================
# Clock Provider
# =============================================================================


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_clock() -> Callable[[], datetime]:
    """
    Get the clock used for staleness checks.

    Returns:
        Callable returning the current UTC time
    """
    return _utc_now
