"""
Discomfort entries logged during sets.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


BodyPart = Literal[
    "lower_back",
    "upper_back",
    "neck",
    "left_shoulder",
    "right_shoulder",
    "shoulders",
    "left_elbow",
    "right_elbow",
    "elbows",
    "left_wrist",
    "right_wrist",
    "wrists",
    "left_knee",
    "right_knee",
    "knees",
    "left_hip",
    "right_hip",
    "hips",
    "other",
]

Severity = Literal["twinge", "discomfort", "pain"]


class DiscomfortEntry(BaseModel):
    """A single discomfort report tied to an exercise set."""

    id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    logged_at: datetime
    exercise_id: str = Field(..., min_length=1)
    exercise_name: str = Field(..., min_length=1)
    body_part: BodyPart
    severity: Severity
    side: Optional[Literal["left", "right", "both"]] = None
    notes: Optional[str] = None
    set_number: int = Field(default=1, ge=1)
    weight_kg: float = Field(default=0, ge=0)

    model_config = {"frozen": True}
