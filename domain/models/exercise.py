"""
Exercise reference data.

Exercises come from the host's catalog and are treated as immutable
inputs by every calculator in the engine.
"""

from typing import List, Literal, Tuple

from pydantic import BaseModel, Field, field_validator


Mechanic = Literal["compound", "isolation"]


class Exercise(BaseModel):
    """
    Value object describing a catalog exercise.

    Examples:
        >>> bench = Exercise(
        ...     id="bench-press",
        ...     name="Bench Press",
        ...     primary_muscle="chest",
        ...     mechanic="compound",
        ...     default_rep_range=(6, 10),
        ... )
        >>> bench.rep_range_min, bench.rep_range_max
        (6, 10)
    """

    # Identity
    id: str = Field(..., min_length=1, description="Catalog exercise id")
    name: str = Field(..., min_length=1, description="Display name")

    # Muscles and movement
    primary_muscle: str = Field(..., min_length=1, description="Primary muscle group")
    secondary_muscles: List[str] = Field(
        default_factory=list, description="Secondary muscle groups"
    )
    movement_pattern: str = Field(
        default="other",
        description="Movement pattern (e.g., 'horizontal_push', 'hinge', 'squat')",
    )
    mechanic: Mechanic = Field(default="compound", description="compound or isolation")

    # Prescription defaults
    default_rep_range: Tuple[int, int] = Field(
        default=(8, 12), description="Default (min, max) rep range"
    )
    default_rir: int = Field(default=2, ge=0, le=4, description="Default target RIR")
    min_weight_increment_kg: float = Field(
        default=2.5, gt=0, description="Smallest load jump available (kg)"
    )
    equipment_required: List[str] = Field(
        default_factory=list,
        description="Equipment needed (e.g., 'barbell', 'dumbbell', 'cable')",
    )

    @field_validator("default_rep_range")
    @classmethod
    def validate_rep_range(cls, v: Tuple[int, int]) -> Tuple[int, int]:
        """Rep range must be positive and ordered."""
        low, high = v
        if low < 1:
            raise ValueError("Rep range minimum must be at least 1")
        if high < low:
            raise ValueError(f"Rep range max ({high}) is below min ({low})")
        return v

    @property
    def rep_range_min(self) -> int:
        return self.default_rep_range[0]

    @property
    def rep_range_max(self) -> int:
        return self.default_rep_range[1]

    @property
    def is_compound(self) -> bool:
        return self.mechanic == "compound"

    def __str__(self) -> str:
        low, high = self.default_rep_range
        return f"{self.name} ({self.mechanic}, {low}-{high} @ RIR {self.default_rir})"

    model_config = {"frozen": True}
