"""
Logged working/warmup sets.

A SetLog is created once per logged set and is never mutated afterwards.
Corrections produce a new record through ``model_copy(update=...)``.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


SetQuality = Literal["junk", "effective", "stimulative", "excessive"]
FormRating = Literal["clean", "some_breakdown", "ugly"]
BodyweightModification = Literal["none", "weighted", "assisted"]


class BodyweightData(BaseModel):
    """Load details for bodyweight movements (dips, pull-ups, etc.)."""

    modification: BodyweightModification = "none"
    added_weight_kg: float = Field(default=0, ge=0)
    assistance_weight_kg: float = Field(default=0, ge=0)
    user_bodyweight_kg: float = Field(..., gt=0)
    effective_load_kg: float = Field(..., ge=0)

    model_config = {"frozen": True}


class SetLog(BaseModel):
    """
    A single logged set.

    ``rpe`` is the effort report on the 1-10 scale; ``rir`` is derived
    as ``10 - rpe``.

    Examples:
        >>> s = SetLog(exercise_block_id="block-1", set_number=1,
        ...            weight_kg=100, reps=8, rpe=8)
        >>> s.rir
        2.0
    """

    id: Optional[str] = Field(default=None, description="Host-assigned id")
    exercise_block_id: str = Field(..., min_length=1)
    set_number: int = Field(..., ge=1)

    weight_kg: float = Field(..., ge=0)
    reps: int = Field(..., ge=0)
    rpe: float = Field(..., ge=1, le=10)

    is_warmup: bool = False
    quality: Optional[SetQuality] = None
    quality_reason: Optional[str] = None

    form_rating: Optional[FormRating] = None
    bodyweight_data: Optional[BodyweightData] = None
    note: Optional[str] = None

    logged_at: Optional[datetime] = None

    @field_validator("rpe")
    @classmethod
    def validate_rpe_step(cls, v: float) -> float:
        """RPE is reported in half-point steps."""
        if (v * 2) != int(v * 2):
            raise ValueError(f"RPE must be a multiple of 0.5, got {v}")
        return v

    @property
    def rir(self) -> float:
        return 10 - self.rpe

    @property
    def effective_load_kg(self) -> float:
        """Load used for E1RM: bodyweight effective load when present."""
        if self.bodyweight_data is not None:
            return self.bodyweight_data.effective_load_kg
        return self.weight_kg

    model_config = {"frozen": True}
