"""
Domain layer for the training engine.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services).
"""

from domain.models import (
    CalibrationSetLog,
    DiscomfortEntry,
    Exercise,
    LastSessionPerformance,
    MesocycleWeek,
    PerformanceSnapshot,
    PeriodizationPlan,
    SetLog,
    UserProfile,
    WeeklyPerformanceData,
)

__all__ = [
    "CalibrationSetLog",
    "DiscomfortEntry",
    "Exercise",
    "LastSessionPerformance",
    "MesocycleWeek",
    "PerformanceSnapshot",
    "PeriodizationPlan",
    "SetLog",
    "UserProfile",
    "WeeklyPerformanceData",
]
