"""
API package for the Training Progression API.

This package contains:
- deps.py: FastAPI dependency providers for DI
- routers/: API route handlers
"""

# Re-export dependency providers for convenient access
from api.deps import get_clock, get_settings

__all__ = [
    "get_settings",
    "get_clock",
]
