"""
Router package for the Training Progression API.

This package contains all API routers organized by domain:
- health: Health check endpoint
- progression: Next-session targets, set quality, E1RM and warmups
- fatigue: Deload checks, deload weeks, fatigue scoring and readiness
- plateaus: Plateau detection and progress scoring
- calibration: RPE calibration analysis and adjusted RIR
- discomfort: Discomfort patterns and injury prompts
"""

from api.routers.calibration import router as calibration_router
from api.routers.discomfort import router as discomfort_router
from api.routers.fatigue import router as fatigue_router
from api.routers.health import router as health_router
from api.routers.plateaus import router as plateaus_router
from api.routers.progression import router as progression_router

__all__ = [
    "health_router",
    "progression_router",
    "fatigue_router",
    "plateaus_router",
    "calibration_router",
    "discomfort_router",
]
