"""
Set quality classification.

Labels a set's training stimulus from its reported effort:
- junk: too far from failure to drive adaptation
- effective: contributes volume but could be pushed harder
- stimulative: the productive RPE 7.5-9.5 band
- excessive: failure reached before the final set
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from domain.models.performance import LastSessionPerformance
from domain.models.set_log import SetLog

logger = logging.getLogger(__name__)


# =============================================================================
# Enums / Constants
# =============================================================================


class SetQuality(str, Enum):
    """Training stimulus label for a single set."""

    JUNK = "junk"
    EFFECTIVE = "effective"
    STIMULATIVE = "stimulative"
    EXCESSIVE = "excessive"


JUNK_MAX_RPE = 5
STIMULATIVE_MIN_RPE = 7.5
STIMULATIVE_MAX_RPE = 9.5
FAILURE_RPE = 10


# =============================================================================
# Response DTOs
# =============================================================================


@dataclass(frozen=True)
class SetQualityResult:
    """Quality label plus the reason shown to the lifter."""
    quality: SetQuality
    reason: str


@dataclass(frozen=True)
class RegressionCheck:
    """Result of comparing two sessions of the same exercise."""
    is_regression: bool
    reason: str


# =============================================================================
# Classification
# =============================================================================


def classify_set_quality(
    rpe: float,
    target_rir: int,
    reps: int,
    target_rep_range: Tuple[int, int],
    is_last_set: bool,
) -> SetQualityResult:
    """
    Classify the stimulus quality of a logged set.

    Checks run in order: junk, premature failure, below the rep range,
    stimulative band, then effective.

    Args:
        rpe: Reported effort (1-10)
        target_rir: Prescribed reps in reserve
        reps: Reps completed
        target_rep_range: (min, max) prescribed reps
        is_last_set: Whether this was the final set for the exercise

    Returns:
        SetQualityResult with label and reason
    """
    min_reps, max_reps = target_rep_range
    rir = 10 - rpe

    if rpe <= JUNK_MAX_RPE:
        return SetQualityResult(
            quality=SetQuality.JUNK,
            reason=f"RPE {rpe:g} ({rir:g} RIR) - too far from failure to drive adaptation",
        )

    if rpe >= FAILURE_RPE and not is_last_set:
        return SetQualityResult(
            quality=SetQuality.EXCESSIVE,
            reason="Reached failure prematurely on a non-final set - may impact remaining sets",
        )

    if reps < min_reps:
        return SetQualityResult(
            quality=SetQuality.EFFECTIVE,
            reason=(
                f"RPE {rpe:g} with {reps} reps - Below target [{min_reps}-{max_reps}], "
                "consider reducing weight"
            ),
        )

    if STIMULATIVE_MIN_RPE <= rpe <= STIMULATIVE_MAX_RPE:
        return SetQualityResult(
            quality=SetQuality.STIMULATIVE,
            reason=f"RPE {rpe:g} with {reps} reps - excellent hypertrophy stimulus",
        )

    if rir > target_rir + 1:
        reason = f"RPE {rpe:g} - contributing to volume but could push harder"
    else:
        reason = f"RPE {rpe:g} - effective working set"
    return SetQualityResult(quality=SetQuality.EFFECTIVE, reason=reason)


def detect_junk_volume(sets: List[SetLog]) -> List[SetLog]:
    """Working sets logged at RPE 5 or below."""
    junk = [s for s in sets if not s.is_warmup and s.rpe <= JUNK_MAX_RPE]
    if junk:
        logger.debug(f"Detected {len(junk)} junk sets out of {len(sets)}")
    return junk


def detect_regression(
    current: LastSessionPerformance,
    previous: Optional[LastSessionPerformance],
) -> RegressionCheck:
    """
    Compare a session against the previous one for the same exercise.

    A regression is a weight drop, more than one rep lost at the same
    weight, or the same performance needing over a full point more RPE.
    """
    if previous is None:
        return RegressionCheck(is_regression=False, reason="No previous data to compare")

    if current.weight_kg < previous.weight_kg:
        return RegressionCheck(
            is_regression=True,
            reason=f"Weight dropped from {previous.weight_kg:g}kg to {current.weight_kg:g}kg",
        )

    if current.weight_kg == previous.weight_kg and current.reps < previous.reps - 1:
        return RegressionCheck(
            is_regression=True,
            reason=f"Reps dropped from {previous.reps} to {current.reps} at same weight",
        )

    if (
        current.weight_kg == previous.weight_kg
        and current.reps == previous.reps
        and current.average_rpe > previous.average_rpe + 1
    ):
        return RegressionCheck(
            is_regression=True,
            reason="Same performance required significantly more effort",
        )

    return RegressionCheck(is_regression=False, reason="")
