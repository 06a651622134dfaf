"""
Set records used for effort-reporting calibration.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PrescribedReps(BaseModel):
    """Prescribed rep target; ``max`` is None for open-ended targets."""

    min: int = Field(..., ge=0)
    max: Optional[int] = Field(default=None, ge=0)

    model_config = {"frozen": True}


class CalibrationSetLog(BaseModel):
    """
    A logged set as seen by the calibration engine.

    ``reported_rir`` is the lifter's own estimate of reps left in reserve.
    AMRAP sets (``was_amrap=True``) are taken to failure and reveal the
    true rep capacity at that weight.
    """

    exercise_id: str = Field(..., min_length=1)
    exercise_name: str = Field(..., min_length=1)
    weight: float = Field(..., ge=0)
    prescribed_reps: PrescribedReps
    actual_reps: int = Field(..., ge=0)
    reported_rir: float = Field(..., ge=0)
    was_amrap: bool = False
    rest_time_seconds: Optional[int] = Field(default=None, ge=0)
    timestamp: datetime

    model_config = {"frozen": True}
