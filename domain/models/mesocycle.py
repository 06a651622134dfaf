"""
Mesocycle plan and week templates.

A MesocycleWeek is a template of sessions for one training week. Deload
weeks are derived from a base week as a modified copy; the base week is
never mutated.
"""

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator


PeriodizationModelName = Literal["linear", "block", "undulating"]
DeloadStrategy = Literal["proactive", "reactive"]


class PeriodizationPlan(BaseModel):
    """Periodization settings for the current mesocycle."""

    model: PeriodizationModelName = "linear"
    mesocycle_weeks: int = Field(default=6, ge=1, description="Total weeks including deload")
    deload_frequency: int = Field(default=5, ge=1, description="Training weeks before deload")
    deload_strategy: DeloadStrategy = "proactive"

    model_config = {"frozen": True}


class RPETarget(BaseModel):
    """Inclusive RPE band for a week."""

    min: float = Field(..., ge=1, le=10)
    max: float = Field(..., ge=1, le=10)

    model_config = {"frozen": True}


class PlannedExercise(BaseModel):
    """One exercise prescription inside a planned session."""

    exercise_id: str = Field(..., min_length=1)
    exercise_name: str = ""
    sets: int = Field(..., ge=1)
    rep_range: Tuple[int, int] = (8, 12)
    target_rir: int = Field(default=2, ge=0, le=4)
    load_guidance: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("rep_range")
    @classmethod
    def validate_rep_range(cls, v: Tuple[int, int]) -> Tuple[int, int]:
        if v[1] < v[0]:
            raise ValueError(f"Rep range max ({v[1]}) is below min ({v[0]})")
        return v

    model_config = {"frozen": True}


class PlannedSession(BaseModel):
    """A single training day in a week template."""

    day: str = Field(..., min_length=1, description="Day label (e.g., 'Push A')")
    focus: str = ""
    exercises: List[PlannedExercise] = Field(default_factory=list)
    total_sets: int = Field(default=0, ge=0)
    estimated_minutes: int = Field(default=60, ge=0)

    model_config = {"frozen": True}


class MesocycleWeek(BaseModel):
    """A week's session template."""

    week_number: int = Field(..., ge=1)
    focus: str = ""
    intensity_modifier: float = Field(default=1.0, gt=0)
    volume_modifier: float = Field(default=1.0, gt=0)
    rpe_target: RPETarget = Field(default_factory=lambda: RPETarget(min=7, max=9))
    sessions: List[PlannedSession] = Field(default_factory=list)
    is_deload: bool = False

    model_config = {"frozen": True}
