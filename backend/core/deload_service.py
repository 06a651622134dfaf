"""
Deload Service for fatigue management.

This module provides business logic for detecting accumulated fatigue
and planning recovery weeks:
- Reactive deload triggers from weekly performance surveys
- Deload week generation from a template week
- Weekly fatigue scoring and trend analysis
- Proactive deload frequency from the lifter profile
"""
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Sequence, Union

from backend.core.numeric import round_half_up
from domain.models.mesocycle import MesocycleWeek, PeriodizationPlan, RPETarget
from domain.models.recovery import UserProfile, WeeklyPerformanceData

logger = logging.getLogger(__name__)


# =============================================================================
# Enums
# =============================================================================


class DeloadType(str, Enum):
    """Deload flavours."""

    VOLUME = "volume"  # Same load, fewer sets
    INTENSITY = "intensity"  # Less load, moderate volume
    FULL = "full"  # Light and easy


class FatigueLevel(str, Enum):
    """Fatigue score bands."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class FatigueTrendDirection(str, Enum):
    """Direction of the weekly fatigue score."""

    IMPROVING = "improving"
    STABLE = "stable"
    WORSENING = "worsening"


# =============================================================================
# Rule Tables
# =============================================================================

# Multipliers applied to sets (volume) and load (intensity)
DELOAD_MODIFIERS: Dict[DeloadType, Dict[str, float]] = {
    DeloadType.VOLUME: {"volume": 0.5, "intensity": 1.0},
    DeloadType.INTENSITY: {"volume": 0.7, "intensity": 0.85},
    DeloadType.FULL: {"volume": 0.5, "intensity": 0.6},
}

DELOAD_NOTES: Dict[DeloadType, str] = {
    DeloadType.VOLUME: "Deload week: maintain load, reduce sets by 50%",
    DeloadType.INTENSITY: "Deload week: reduce load 15%, moderate volume for joint recovery",
    DeloadType.FULL: "Deload week: light and easy - focus on movement quality and recovery",
}

DELOAD_RPE_TARGET = RPETarget(min=5, max=6)
DELOAD_RIR_INCREASE = 2
MAX_TARGET_RIR = 4

# (upper bound exclusive, level, recommendation)
FATIGUE_BANDS = (
    (25, FatigueLevel.LOW, "Continue training as planned"),
    (50, FatigueLevel.MODERATE, "Monitor closely, consider reducing volume next week"),
    (75, FatigueLevel.HIGH, "Volume deload recommended soon"),
)
CRITICAL_RECOMMENDATION = "Full deload or complete rest recommended immediately"

FATIGUE_TREND_WINDOW = 3
FATIGUE_TREND_THRESHOLD = 5

# Deload cadence bounds (weeks)
BASE_DELOAD_FREQUENCY = 5
MIN_DELOAD_FREQUENCY = 3
MAX_DELOAD_FREQUENCY = 8

# Extra weeks beyond the planned frequency before a deload is overdue
OVERDUE_GRACE_WEEKS = 2

NOVICE_MIN_REASONS = 2


# =============================================================================
# Response DTOs
# =============================================================================


@dataclass
class DeloadTriggers:
    """Result of a reactive deload check."""
    should_deload: bool
    reasons: List[str] = field(default_factory=list)
    suggested_deload_type: DeloadType = DeloadType.VOLUME


@dataclass(frozen=True)
class FatigueAssessment:
    """Band and recommendation for a fatigue score."""
    level: FatigueLevel
    recommendation: str


@dataclass(frozen=True)
class FatigueTrend:
    """Fatigue trend over recent weeks."""
    trend: FatigueTrendDirection
    average_score: int
    peak_score: int
    recommendation: str


# =============================================================================
# Reactive Deload Detection
# =============================================================================


def check_deload_triggers(
    history: Sequence[WeeklyPerformanceData],
    profile: UserProfile,
    plan: PeriodizationPlan,
) -> DeloadTriggers:
    """
    Check whether recent weeks warrant a deload.

    Each trigger is evaluated independently against the two most recent
    weeks and appends its own reason. Novices need at least two reasons;
    advanced lifters deload on any single reason.

    Args:
        history: Weekly performance data, oldest first
        profile: Lifter profile (experience gating)
        plan: Current periodization plan (overdue check)

    Returns:
        DeloadTriggers with ordered reasons and a suggested deload type
    """
    if len(history) < 2:
        return DeloadTriggers(should_deload=False)

    current = history[-1]
    previous = history[-2]
    reasons: List[str] = []
    deload_type = DeloadType.VOLUME
    should_deload = False

    if current.perceived_fatigue >= 4 and previous.perceived_fatigue >= 3:
        reasons.append("Perceived fatigue elevated for 2+ weeks")
        should_deload = True

    if current.strength_decline or current.missed_reps > 5:
        reasons.append("Strength regression or significant missed reps")
        should_deload = True
        deload_type = DeloadType.INTENSITY

    if current.sleep_quality <= 2 and previous.sleep_quality <= 2:
        reasons.append("Poor sleep for 2+ weeks - recovery compromised")
        should_deload = True
        deload_type = DeloadType.FULL

    if current.motivation_level <= 2 and previous.motivation_level <= 3:
        reasons.append("Declining motivation - possible overreaching")
        should_deload = True

    if current.joint_pain:
        reasons.append("Joint pain reported - reduce intensity")
        should_deload = True
        deload_type = DeloadType.INTENSITY

    weeks_since_start = current.week_number
    if weeks_since_start >= plan.deload_frequency + OVERDUE_GRACE_WEEKS:
        reasons.append(f"{weeks_since_start} weeks since mesocycle start - overdue for deload")
        should_deload = True

    if profile.experience == "novice" and len(reasons) < NOVICE_MIN_REASONS:
        should_deload = False
    if profile.experience == "advanced" and reasons:
        should_deload = True

    if should_deload:
        logger.info(f"Deload triggered ({deload_type.value}): {reasons}")

    return DeloadTriggers(
        should_deload=should_deload,
        reasons=reasons,
        suggested_deload_type=deload_type,
    )


# =============================================================================
# Deload Week Generation
# =============================================================================


def generate_deload_week(
    base_week: MesocycleWeek,
    deload_type: Union[DeloadType, str],
) -> MesocycleWeek:
    """
    Build a deload week from a template week.

    Sets are scaled by the volume modifier (floored, minimum 1), every
    exercise's target RIR rises by 2 (capped at 4) and the RPE band drops
    to 5-6. The base week is left untouched.

    Args:
        base_week: Template week to derive from
        deload_type: "volume", "intensity" or "full"

    Returns:
        New MesocycleWeek with ``is_deload=True``

    Raises:
        ValueError: If deload_type is unknown
    """
    deload_type = DeloadType(deload_type)
    mod = DELOAD_MODIFIERS[deload_type]
    reduces_load = deload_type in (DeloadType.INTENSITY, DeloadType.FULL)

    sessions = []
    for session in base_week.sessions:
        exercises = [
            ex.model_copy(
                update={
                    "sets": max(1, math.floor(ex.sets * mod["volume"])),
                    "target_rir": min(MAX_TARGET_RIR, ex.target_rir + DELOAD_RIR_INCREASE),
                    "notes": DELOAD_NOTES[deload_type],
                    "load_guidance": (
                        f"Reduce load to {round(mod['intensity'] * 100)}% of normal"
                        if reduces_load
                        else ex.load_guidance
                    ),
                }
            )
            for ex in session.exercises
        ]
        sessions.append(
            session.model_copy(
                update={
                    "focus": f"DELOAD ({deload_type.value}) - {session.focus}",
                    "exercises": exercises,
                    "total_sets": max(1, math.floor(session.total_sets * mod["volume"])),
                }
            )
        )

    return base_week.model_copy(
        update={
            "focus": f"DELOAD WEEK ({deload_type.value})",
            "volume_modifier": mod["volume"],
            "intensity_modifier": mod["intensity"],
            "rpe_target": DELOAD_RPE_TARGET,
            "sessions": sessions,
            "is_deload": True,
        }
    )


# =============================================================================
# Fatigue Scoring
# =============================================================================


def calculate_fatigue_score(week: WeeklyPerformanceData) -> int:
    """
    Weekly fatigue score (0-100); higher means more accumulated fatigue.

    Components: perceived fatigue (25), poor sleep (25), low motivation
    (20), missed reps (15), joint pain (10), strength decline (5).
    """
    score = 0.0
    score += (week.perceived_fatigue - 1) * 6.25
    score += (5 - week.sleep_quality) * 6.25
    score += (5 - week.motivation_level) * 5
    score += min(15, week.missed_reps * 3)
    if week.joint_pain:
        score += 10
    if week.strength_decline:
        score += 5
    return min(100, round_half_up(score))


def assess_fatigue_score(score: float) -> FatigueAssessment:
    """Band a fatigue score: low <25, moderate <50, high <75, else critical."""
    for upper, level, recommendation in FATIGUE_BANDS:
        if score < upper:
            return FatigueAssessment(level=level, recommendation=recommendation)
    return FatigueAssessment(level=FatigueLevel.CRITICAL, recommendation=CRITICAL_RECOMMENDATION)


def analyze_fatigue_trend(history: Sequence[WeeklyPerformanceData]) -> FatigueTrend:
    """
    Compare fatigue in the earlier and later half of the last three weeks.

    A later-half average more than 5 points higher is worsening, more than
    5 lower is improving.
    """
    if len(history) < 2:
        return FatigueTrend(
            trend=FatigueTrendDirection.STABLE,
            average_score=0,
            peak_score=0,
            recommendation="Not enough data to analyze trend",
        )

    scores = [calculate_fatigue_score(w) for w in history]
    average = sum(scores) / len(scores)
    peak = max(scores)

    recent = scores[-FATIGUE_TREND_WINDOW:]
    split = math.ceil(len(recent) / 2)
    first_half, second_half = recent[:split], recent[split:]
    diff = sum(second_half) / len(second_half) - sum(first_half) / len(first_half)

    if diff > FATIGUE_TREND_THRESHOLD:
        trend = FatigueTrendDirection.WORSENING
    elif diff < -FATIGUE_TREND_THRESHOLD:
        trend = FatigueTrendDirection.IMPROVING
    else:
        trend = FatigueTrendDirection.STABLE

    if trend == FatigueTrendDirection.WORSENING and average > 40:
        recommendation = "Fatigue accumulating - schedule deload within 1-2 weeks"
    elif trend == FatigueTrendDirection.IMPROVING:
        recommendation = "Recovery trending well - continue current approach"
    elif average > 50:
        recommendation = "Sustained high fatigue - consider adjusting training load"
    else:
        recommendation = "Fatigue levels manageable - continue as planned"

    return FatigueTrend(
        trend=trend,
        average_score=round_half_up(average),
        peak_score=peak,
        recommendation=recommendation,
    )


# =============================================================================
# Proactive Scheduling
# =============================================================================


def calculate_deload_frequency(profile: UserProfile) -> int:
    """
    Training weeks between scheduled deloads.

    Starts from 5 weeks and adjusts for age, training age, sleep and
    stress. The result is clamped to [3, 8].
    """
    weeks = BASE_DELOAD_FREQUENCY

    if profile.age < 25:
        weeks = 6
    elif 45 <= profile.age < 55:
        weeks = 4
    elif profile.age >= 55:
        weeks = 3

    # Training age overrides the age bands for beginners
    if profile.training_age_years < 1:
        weeks = 8
    elif profile.training_age_years >= 5:
        weeks -= 1

    if profile.sleep_quality <= 2 or profile.stress_level >= 4:
        weeks -= 1

    return max(MIN_DELOAD_FREQUENCY, min(MAX_DELOAD_FREQUENCY, weeks))


def get_deload_strategy(experience: str) -> str:
    """Novices deload reactively; everyone else on a schedule."""
    return "reactive" if experience == "novice" else "proactive"
