"""
Periodization phase resolution.

This module maps a week of a mesocycle onto a training phase and adjusts
an exercise's base rep range for that phase:
- 3 periodization models (Linear, Block, Undulating)
- The final week of every mesocycle is a deload
- Static rep range adjustments per (phase, mechanic)
"""
import logging
import math
from enum import Enum
from typing import Dict, Tuple, Union

logger = logging.getLogger(__name__)


# =============================================================================
# Enums
# =============================================================================


class PeriodizationModel(str, Enum):
    """Available periodization models."""

    LINEAR = "linear"
    BLOCK = "block"
    UNDULATING = "undulating"


class TrainingPhase(str, Enum):
    """Training phase for a given week."""

    HYPERTROPHY = "hypertrophy"  # Wider rep range, moderate load
    STRENGTH = "strength"  # Narrower, heavier
    PEAKING = "peaking"  # Low reps, peak intensity
    DELOAD = "deload"  # Recovery week


# =============================================================================
# Rep Range Adjustments
# =============================================================================

# (min delta, max delta) applied to the exercise's default rep range
REP_RANGE_ADJUSTMENTS: Dict[TrainingPhase, Dict[str, Tuple[int, int]]] = {
    TrainingPhase.HYPERTROPHY: {"compound": (0, 2), "isolation": (0, 3)},
    TrainingPhase.STRENGTH: {"compound": (-2, -2), "isolation": (-1, -2)},
    TrainingPhase.PEAKING: {"compound": (-3, -5), "isolation": (-2, -4)},
    TrainingPhase.DELOAD: {"compound": (0, 0), "isolation": (0, 0)},
}

# Undulating models rotate phases week to week
UNDULATING_ROTATION = (
    TrainingPhase.HYPERTROPHY,
    TrainingPhase.STRENGTH,
    TrainingPhase.HYPERTROPHY,
    TrainingPhase.PEAKING,
)


# =============================================================================
# Phase Resolution
# =============================================================================


def get_periodization_phase(
    week: int,
    total_weeks: int,
    model: Union[PeriodizationModel, str] = PeriodizationModel.LINEAR,
) -> TrainingPhase:
    """
    Resolve the training phase for a week of the mesocycle.

    Linear: the final pre-deload week is peaking; the weeks before it are
    split in half (rounded up) into hypertrophy then strength.

    Block: the training weeks are split into thirds (rounded up) of
    hypertrophy, strength and peaking.

    Args:
        week: Current week number (1-indexed)
        total_weeks: Total mesocycle weeks including the deload
        model: Periodization model

    Returns:
        TrainingPhase for the week

    Raises:
        ValueError: If week or total_weeks is out of range

    Examples:
        >>> [get_periodization_phase(w, 6).value for w in range(1, 7)]
        ['hypertrophy', 'hypertrophy', 'strength', 'strength', 'peaking', 'deload']
    """
    if total_weeks < 1:
        raise ValueError(f"Total weeks must be at least 1, got {total_weeks}")
    if week < 1 or week > total_weeks:
        raise ValueError(f"Week {week} out of range [1, {total_weeks}]")

    model = PeriodizationModel(model)

    if week == total_weeks:
        return TrainingPhase.DELOAD

    training_weeks = total_weeks - 1

    if model == PeriodizationModel.BLOCK:
        block_length = math.ceil(training_weeks / 3)
        block_index = min((week - 1) // block_length, 2)
        return (
            TrainingPhase.HYPERTROPHY,
            TrainingPhase.STRENGTH,
            TrainingPhase.PEAKING,
        )[block_index]

    if model == PeriodizationModel.UNDULATING:
        return UNDULATING_ROTATION[(week - 1) % len(UNDULATING_ROTATION)]

    # Linear
    if week == training_weeks:
        return TrainingPhase.PEAKING
    hypertrophy_weeks = math.ceil((training_weeks - 1) / 2)
    if week <= hypertrophy_weeks:
        return TrainingPhase.HYPERTROPHY
    return TrainingPhase.STRENGTH


def adjust_rep_range(
    base_range: Tuple[int, int],
    phase: TrainingPhase,
    mechanic: str = "compound",
) -> Tuple[int, int]:
    """
    Apply the phase adjustment to an exercise's default rep range.

    Args:
        base_range: Exercise default (min, max) reps
        phase: Training phase for the week
        mechanic: "compound" or "isolation"

    Returns:
        Adjusted (min, max); min is at least 1 and max is at least min
    """
    min_delta, max_delta = REP_RANGE_ADJUSTMENTS[phase][mechanic]
    low = max(1, base_range[0] + min_delta)
    high = max(low, base_range[1] + max_delta)
    return (low, high)
