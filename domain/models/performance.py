"""
Per-session performance summaries.

- LastSessionPerformance: what the progression calculator needs from the
  previous session of an exercise.
- PerformanceSnapshot: append-only best-set record, one per exercise per
  session, consumed by the plateau detector.
"""

from datetime import date

from pydantic import BaseModel, Field


class LastSessionPerformance(BaseModel):
    """Summary of the most recent session for one exercise."""

    exercise_id: str = Field(..., min_length=1)
    weight_kg: float = Field(..., ge=0, description="Top set weight")
    reps: int = Field(..., ge=0, description="Top set reps")
    rpe: float = Field(..., ge=1, le=10, description="Top set RPE")
    sets: int = Field(..., ge=1, description="Working sets performed")
    all_sets_completed: bool = True
    average_rpe: float = Field(..., ge=1, le=10)

    model_config = {"frozen": True}


class PerformanceSnapshot(BaseModel):
    """Best-set summary for one exercise in one session."""

    exercise_id: str = Field(..., min_length=1)
    session_date: date
    top_set_weight_kg: float = Field(..., ge=0)
    top_set_reps: int = Field(..., ge=0)
    top_set_rpe: float = Field(..., ge=1, le=10)
    total_working_sets: int = Field(default=3, ge=0)
    estimated_e1rm: float = Field(..., ge=0)

    model_config = {"frozen": True}
