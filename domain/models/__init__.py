"""
Domain models for the training engine.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services).

These models represent the inputs and records the calculators work on:
- Exercise: Immutable catalog reference data
- SetLog: A single logged set (weight, reps, RPE)
- LastSessionPerformance / PerformanceSnapshot: Session summaries
- WeeklyPerformanceData / UserProfile: Recovery inputs
- PeriodizationPlan / MesocycleWeek: Mesocycle templates
- CalibrationSetLog: Sets tracked for RPE calibration
- DiscomfortEntry: Body-part discomfort reports

Usage:
    >>> from domain.models import Exercise, LastSessionPerformance

    >>> bench = Exercise(id="bench", name="Bench Press", primary_muscle="chest")
    >>> last = LastSessionPerformance(
    ...     exercise_id="bench", weight_kg=100, reps=12, rpe=8,
    ...     sets=3, average_rpe=8,
    ... )

    >>> # Serialize to JSON
    >>> json_str = last.model_dump_json(indent=2)
"""

from domain.models.calibration import CalibrationSetLog, PrescribedReps
from domain.models.discomfort import BodyPart, DiscomfortEntry, Severity
from domain.models.exercise import Exercise, Mechanic
from domain.models.mesocycle import (
    MesocycleWeek,
    PeriodizationPlan,
    PlannedExercise,
    PlannedSession,
    RPETarget,
)
from domain.models.performance import LastSessionPerformance, PerformanceSnapshot
from domain.models.recovery import Experience, UserProfile, WeeklyPerformanceData
from domain.models.set_log import BodyweightData, SetLog, SetQuality

__all__ = [
    # Reference data
    "Exercise",
    # Logged data
    "SetLog",
    "BodyweightData",
    "LastSessionPerformance",
    "PerformanceSnapshot",
    "CalibrationSetLog",
    "PrescribedReps",
    "DiscomfortEntry",
    # Recovery inputs
    "WeeklyPerformanceData",
    "UserProfile",
    # Mesocycle templates
    "PeriodizationPlan",
    "MesocycleWeek",
    "PlannedSession",
    "PlannedExercise",
    "RPETarget",
    # Literal types
    "Mechanic",
    "SetQuality",
    "Experience",
    "BodyPart",
    "Severity",
]
