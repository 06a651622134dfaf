"""
Recovery inputs: weekly surveys and the lifter profile.
"""

from typing import Literal

from pydantic import BaseModel, Field


Experience = Literal["novice", "intermediate", "advanced"]


class WeeklyPerformanceData(BaseModel):
    """
    One week of aggregated recovery/performance survey data.

    Ratings use a 1-5 scale. ``perceived_fatigue`` is higher-is-worse;
    ``sleep_quality`` and ``motivation_level`` are higher-is-better.
    """

    week_number: int = Field(..., ge=1, description="Week since mesocycle start")
    perceived_fatigue: int = Field(..., ge=1, le=5)
    sleep_quality: int = Field(..., ge=1, le=5)
    motivation_level: int = Field(..., ge=1, le=5)
    missed_reps: int = Field(default=0, ge=0)
    joint_pain: bool = False
    strength_decline: bool = False

    model_config = {"frozen": True}


class UserProfile(BaseModel):
    """Lifter attributes that shape recovery and deload cadence."""

    experience: Experience = "intermediate"
    age: int = Field(default=30, ge=10, le=100)
    training_age_years: float = Field(default=2, ge=0)
    sleep_quality: int = Field(default=3, ge=1, le=5)
    stress_level: int = Field(default=3, ge=1, le=5)

    model_config = {"frozen": True}
