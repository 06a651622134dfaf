"""
Progression Service for next-session targets.

This module turns the last logged session of an exercise into the next
session's prescription:
- Starting weights for new exercises (calibrated or related-exercise E1RM)
- Deload and low-readiness reductions
- Load / rep / set progression driven by the periodization phase
- Fatigue adjustment applied last, on every path
- Session summaries and warmup protocols
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union
import logging
import math

from backend.core.e1rm import round_to_increment, working_weight_for
from backend.core.periodization_service import (
    PeriodizationModel,
    TrainingPhase,
    adjust_rep_range,
    get_periodization_phase,
)
from domain.models.exercise import Exercise
from domain.models.performance import LastSessionPerformance
from domain.models.set_log import SetLog

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================


class ProgressionType(str, Enum):
    """Which training variable the next session progresses."""

    TECHNIQUE = "technique"
    LOAD = "load"
    REPS = "reps"
    SETS = "sets"


# Load step scaling by experience; advanced lifters progress slower
WEIGHT_INCREMENT_FACTOR: Dict[str, float] = {
    "novice": 1.0,
    "intermediate": 0.8,
    "advanced": 0.6,
}

# Percentage step per session before experience scaling
LOAD_STEP_PERCENT = 0.025

REST_SECONDS = {"compound": 180, "isolation": 120}
MAX_SETS = {"compound": 5, "isolation": 4}
DEFAULT_SETS = 3
MAX_TARGET_RIR = 4

LOW_READINESS_THRESHOLD = 60
LOW_READINESS_EXTRA_REST = 30

DELOAD_LOAD_FACTOR = 0.85
DELOAD_MAX_SETS = 2
DELOAD_TARGET_RIR = 4

# Starting weights from a related exercise are discounted
RELATED_EXERCISE_FACTOR = 0.9

# Average RPE band that qualifies a top-of-range session for a load increase
APPROPRIATE_RPE_RANGE = (7, 9)

SYSTEMIC_FATIGUE_HIGH = 80
WEEKLY_FATIGUE_HIGH = 8
WEEKLY_FATIGUE_MODERATE = 5


# =============================================================================
# Response DTOs
# =============================================================================


@dataclass(frozen=True)
class ProgressionTargets:
    """Prescription for the next session of one exercise."""
    weight_kg: float
    rep_range: Tuple[int, int]
    target_rir: int
    sets: int
    rest_seconds: int
    progression_type: ProgressionType
    reason: str

    def __post_init__(self):
        if self.weight_kg < 0:
            raise ValueError(f"Target weight must be non-negative, got {self.weight_kg}")
        if not 0 <= self.target_rir <= MAX_TARGET_RIR:
            raise ValueError(f"Target RIR must be in [0, {MAX_TARGET_RIR}], got {self.target_rir}")
        if not self.reason:
            raise ValueError("Progression targets require a reason")


@dataclass(frozen=True)
class WarmupSet:
    """A single warmup set ahead of the working sets."""
    set_number: int
    percent_of_working: int
    weight_kg: float
    target_reps: int
    purpose: str
    rest_seconds: int


# =============================================================================
# Next Session Targets
# =============================================================================


def calculate_next_targets(
    exercise: Exercise,
    last_performance: Optional[LastSessionPerformance],
    experience: str = "intermediate",
    week_in_meso: int = 1,
    total_weeks_in_meso: int = 6,
    is_deload_week: bool = False,
    readiness_score: float = 80,
    calibrated_e1rm: Optional[float] = None,
    estimated_from_related: Optional[float] = None,
    systemic_fatigue_percent: Optional[float] = None,
    weekly_fatigue_score: Optional[float] = None,
    periodization_model: Union[PeriodizationModel, str] = PeriodizationModel.LINEAR,
    readiness_threshold: float = LOW_READINESS_THRESHOLD,
) -> ProgressionTargets:
    """
    Calculate the next session's targets for an exercise.

    Decision order:
    1. No prior performance: starting weight from calibration data
    2. Deload week: reduced load and volume
    3. Low readiness: proportional reduction
    4. Normal week: load, rep or set progression for the current phase
    5. Fatigue adjustment, always applied last

    Args:
        exercise: Catalog exercise
        last_performance: Last session summary, or None for a new exercise
        experience: "novice", "intermediate" or "advanced"
        week_in_meso: Current week (1-indexed)
        total_weeks_in_meso: Mesocycle length including deload
        is_deload_week: Whether this week is a scheduled deload
        readiness_score: Pre-workout readiness (0-100)
        calibrated_e1rm: Calibrated E1RM for this exercise, if known
        estimated_from_related: E1RM estimated from a related exercise
        systemic_fatigue_percent: Systemic fatigue (0-100)
        weekly_fatigue_score: Weekly fatigue score (0-10)
        periodization_model: Periodization model for phase resolution
        readiness_threshold: Readiness below which targets are reduced

    Returns:
        ProgressionTargets with a decision-specific reason

    Raises:
        ValueError: If experience or the week arguments are invalid
    """
    if experience not in WEIGHT_INCREMENT_FACTOR:
        raise ValueError(f"Unknown experience level: {experience}")

    if last_performance is None:
        targets = _starting_targets(exercise, calibrated_e1rm, estimated_from_related)
    elif is_deload_week:
        targets = _deload_targets(exercise, last_performance)
    elif readiness_score < readiness_threshold:
        targets = _low_readiness_targets(exercise, last_performance, readiness_score)
    else:
        phase = get_periodization_phase(
            week_in_meso, total_weeks_in_meso, periodization_model
        )
        targets = _normal_week_targets(
            exercise, last_performance, experience, week_in_meso, phase
        )

    logger.debug(
        f"{exercise.id}: {targets.progression_type.value} -> "
        f"{targets.weight_kg}kg x {targets.sets} ({targets.reason})"
    )

    hold_weight = last_performance.weight_kg if last_performance else None
    return adjust_for_fatigue(
        targets,
        weekly_fatigue_score=weekly_fatigue_score,
        systemic_fatigue_percent=systemic_fatigue_percent,
        hold_weight_kg=hold_weight,
    )


def _starting_targets(
    exercise: Exercise,
    calibrated_e1rm: Optional[float],
    estimated_from_related: Optional[float],
) -> ProgressionTargets:
    rep_range = exercise.default_rep_range
    base = dict(
        rep_range=rep_range,
        target_rir=exercise.default_rir,
        sets=DEFAULT_SETS,
        rest_seconds=REST_SECONDS[exercise.mechanic],
        progression_type=ProgressionType.TECHNIQUE,
    )

    if calibrated_e1rm and calibrated_e1rm > 0:
        raw = working_weight_for(calibrated_e1rm, rep_range[1], exercise.default_rir)
        weight = round_to_increment(raw, exercise.min_weight_increment_kg)
        return ProgressionTargets(
            weight_kg=weight,
            reason=f"Starting at {weight:g}kg using calibrated estimate (E1RM {calibrated_e1rm:g}kg)",
            **base,
        )

    if estimated_from_related and estimated_from_related > 0:
        raw = working_weight_for(estimated_from_related, rep_range[1], exercise.default_rir)
        weight = round_to_increment(raw * RELATED_EXERCISE_FACTOR, exercise.min_weight_increment_kg)
        return ProgressionTargets(
            weight_kg=weight,
            reason=f"Starting conservatively at {weight:g}kg, estimated from related exercise",
            **base,
        )

    return ProgressionTargets(
        weight_kg=0,
        reason="New exercise - learn technique first, start light and find a working weight",
        **base,
    )


def _deload_targets(
    exercise: Exercise, last: LastSessionPerformance
) -> ProgressionTargets:
    weight = round_to_increment(
        last.weight_kg * DELOAD_LOAD_FACTOR, exercise.min_weight_increment_kg
    )
    return ProgressionTargets(
        weight_kg=weight,
        rep_range=exercise.default_rep_range,
        target_rir=DELOAD_TARGET_RIR,
        sets=min(DELOAD_MAX_SETS, last.sets),
        rest_seconds=REST_SECONDS[exercise.mechanic],
        progression_type=ProgressionType.TECHNIQUE,
        reason="Deload week: reduced intensity and volume for recovery",
    )


def _low_readiness_targets(
    exercise: Exercise, last: LastSessionPerformance, readiness_score: float
) -> ProgressionTargets:
    # 0.7 at zero readiness, 1.0 at full readiness
    factor = 0.7 + 0.3 * readiness_score / 100
    weight = round_to_increment(last.weight_kg * factor, exercise.min_weight_increment_kg)
    return ProgressionTargets(
        weight_kg=weight,
        rep_range=exercise.default_rep_range,
        target_rir=min(MAX_TARGET_RIR, exercise.default_rir + 1),
        sets=max(1, math.floor(last.sets * factor)),
        rest_seconds=REST_SECONDS[exercise.mechanic] + LOW_READINESS_EXTRA_REST,
        progression_type=ProgressionType.TECHNIQUE,
        reason=f"Reduced targets due to low readiness ({readiness_score:g}%)",
    )


def _normal_week_targets(
    exercise: Exercise,
    last: LastSessionPerformance,
    experience: str,
    week_in_meso: int,
    phase: TrainingPhase,
) -> ProgressionTargets:
    rep_range = adjust_rep_range(exercise.default_rep_range, phase, exercise.mechanic)
    top = rep_range[1]
    low_rpe, high_rpe = APPROPRIATE_RPE_RANGE
    effort_appropriate = low_rpe <= last.average_rpe <= high_rpe

    common = dict(
        rep_range=rep_range,
        target_rir=exercise.default_rir,
        rest_seconds=REST_SECONDS[exercise.mechanic],
    )

    if last.reps >= top and effort_appropriate and last.all_sets_completed:
        step = load_step(last.weight_kg, exercise.min_weight_increment_kg, experience)
        weight = round_to_increment(last.weight_kg + step, exercise.min_weight_increment_kg)
        return ProgressionTargets(
            weight_kg=weight,
            sets=last.sets,
            progression_type=ProgressionType.LOAD,
            reason=(
                f"{phase.value.capitalize()} phase: hit {last.reps} reps at top of "
                f"{rep_range[0]}-{top} range, weight increased by {weight - last.weight_kg:g}kg"
            ),
            **common,
        )

    if last.reps < top:
        return ProgressionTargets(
            weight_kg=last.weight_kg,
            sets=last.sets,
            progression_type=ProgressionType.REPS,
            reason=(
                f"Target {last.reps + 1} reps (was {last.reps}) at {last.weight_kg:g}kg "
                "before increasing weight"
            ),
            **common,
        )

    max_sets = MAX_SETS[exercise.mechanic]
    if (
        last.average_rpe < low_rpe
        and last.all_sets_completed
        and week_in_meso > 1
        and last.sets < max_sets
    ):
        return ProgressionTargets(
            weight_kg=last.weight_kg,
            sets=last.sets + 1,
            progression_type=ProgressionType.SETS,
            reason=(
                f"Week {week_in_meso}: added set {last.sets + 1} - "
                f"RPE {last.average_rpe:g} shows capacity for more volume"
            ),
            **common,
        )

    if not last.all_sets_completed:
        reason = f"Did not complete all sets - hold {last.weight_kg:g}kg and repeat {last.reps} reps"
    elif last.average_rpe > high_rpe:
        reason = f"RPE {last.average_rpe:g} too high - hold {last.weight_kg:g}kg and consolidate reps"
    else:
        reason = f"Hold {last.weight_kg:g}kg and add reps before adding load or sets"
    return ProgressionTargets(
        weight_kg=last.weight_kg,
        sets=last.sets,
        progression_type=ProgressionType.REPS,
        reason=reason,
        **common,
    )


def load_step(weight_kg: float, min_increment_kg: float, experience: str) -> float:
    """
    Weight jump for a load progression.

    A percentage of the current weight scaled by experience, never less
    than the exercise's minimum increment.
    """
    percent_step = round_to_increment(
        weight_kg * LOAD_STEP_PERCENT * WEIGHT_INCREMENT_FACTOR[experience],
        min_increment_kg,
    )
    return max(min_increment_kg, percent_step)


# =============================================================================
# Fatigue Adjustment
# =============================================================================


def adjust_for_fatigue(
    targets: ProgressionTargets,
    weekly_fatigue_score: Optional[float] = None,
    systemic_fatigue_percent: Optional[float] = None,
    hold_weight_kg: Optional[float] = None,
) -> ProgressionTargets:
    """
    Apply fatigue signals to already-calculated targets.

    Args:
        targets: Targets from the progression decision
        weekly_fatigue_score: Weekly fatigue score (0-10)
        systemic_fatigue_percent: Systemic fatigue (0-100)
        hold_weight_kg: Weight to hold when progression is paused

    Returns:
        Adjusted copy of ``targets`` (unchanged when fatigue is low)
    """
    notes: List[str] = []
    target_rir = targets.target_rir
    progression_type = targets.progression_type
    weight = targets.weight_kg

    if systemic_fatigue_percent is not None and systemic_fatigue_percent >= SYSTEMIC_FATIGUE_HIGH:
        target_rir = min(MAX_TARGET_RIR, target_rir + 1)
        notes.append(f"high systemic fatigue ({systemic_fatigue_percent:g}%), +1 RIR")

    if weekly_fatigue_score is not None and weekly_fatigue_score >= WEEKLY_FATIGUE_HIGH:
        progression_type = ProgressionType.TECHNIQUE
        if hold_weight_kg is not None:
            weight = hold_weight_kg
        notes.append(f"high fatigue score ({weekly_fatigue_score:g}/10), holding load")
    elif weekly_fatigue_score is not None and weekly_fatigue_score >= WEEKLY_FATIGUE_MODERATE:
        notes.append(f"moderate fatigue score ({weekly_fatigue_score:g}/10), monitor recovery")

    if not notes:
        return targets

    logger.debug(f"Fatigue adjustment applied: {notes}")
    return replace(
        targets,
        weight_kg=weight,
        target_rir=target_rir,
        progression_type=progression_type,
        reason=f"{targets.reason} ({'; '.join(notes)})",
    )


# =============================================================================
# Session Helpers
# =============================================================================


def extract_performance_from_sets(
    sets: List[SetLog], exercise_id: str
) -> Optional[LastSessionPerformance]:
    """
    Summarize a session's working sets for the progression calculator.

    The top set is the heaviest, with more reps breaking ties.

    Returns:
        LastSessionPerformance, or None when there are no working sets
    """
    working = [s for s in sets if not s.is_warmup]
    if not working:
        return None

    top = working[0]
    for s in working[1:]:
        if s.weight_kg > top.weight_kg or (
            s.weight_kg == top.weight_kg and s.reps > top.reps
        ):
            top = s

    average_rpe = sum(s.rpe for s in working) / len(working)

    return LastSessionPerformance(
        exercise_id=exercise_id,
        weight_kg=top.weight_kg,
        reps=top.reps,
        rpe=top.rpe,
        sets=len(working),
        all_sets_completed=True,
        average_rpe=round(average_rpe, 1),
    )


def generate_warmup_protocol(
    working_weight: float,
    exercise: Exercise,
    is_first_exercise: bool = False,
) -> List[WarmupSet]:
    """
    Build warmup sets ramping up to the working weight.

    Args:
        working_weight: First working set weight (kg)
        exercise: Exercise being warmed up
        is_first_exercise: Adds a general warmup set when True

    Returns:
        Ordered warmup sets
    """
    increment = exercise.min_weight_increment_kg

    if working_weight < 20:
        return [
            WarmupSet(
                set_number=1,
                percent_of_working=50,
                weight_kg=round_to_increment(working_weight * 0.5, increment),
                target_reps=10,
                purpose="Light activation",
                rest_seconds=60,
            )
        ]

    protocol: List[WarmupSet] = []
    if is_first_exercise:
        protocol.append(
            WarmupSet(
                set_number=1,
                percent_of_working=0,
                weight_kg=0,
                target_reps=10,
                purpose="General warmup - increase blood flow",
                rest_seconds=60,
            )
        )

    if working_weight >= 100:
        percents = [30, 50, 70, 85]
    elif working_weight >= 50:
        percents = [40, 60, 80]
    else:
        percents = [50, 75]

    for percent in percents:
        if percent <= 50:
            reps, purpose, rest = 8, "Movement groove practice", 60
        elif percent <= 70:
            reps, purpose, rest = 5, "Neuromuscular preparation", 60
        else:
            reps, purpose, rest = 3, "CNS potentiation", 90

        protocol.append(
            WarmupSet(
                set_number=len(protocol) + 1,
                percent_of_working=percent,
                weight_kg=round_to_increment(working_weight * percent / 100, increment),
                target_reps=reps,
                purpose=purpose,
                rest_seconds=rest,
            )
        )

    return protocol
