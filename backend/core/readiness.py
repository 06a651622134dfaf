"""
Pre-workout readiness scoring.

Combines a check-in (sleep, stress, nutrition, recent session load) into
a 0-100 readiness score. The progression calculator reduces targets when
the score falls below the configured threshold.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from backend.core.numeric import round_half_up

logger = logging.getLogger(__name__)


# Weight factors for the composite score
READINESS_WEIGHTS = {
    "sleep": 0.35,
    "stress": 0.25,
    "nutrition": 0.20,
    "recovery": 0.20,
}

# (minimum score, level, message, recommendation), checked top-down
READINESS_BANDS = (
    (85, "excellent", "Excellent readiness for training",
     "Great day for progression or high-intensity work"),
    (70, "good", "Good readiness for training", "Proceed with planned workout"),
    (55, "moderate", "Moderate readiness", "Maintain current weights, focus on execution"),
    (40, "low", "Low readiness today", "Consider reducing volume or intensity by 10-20%"),
    (0, "poor", "Poor readiness - recovery compromised",
     "Light technique work or rest day recommended"),
)


@dataclass(frozen=True)
class ReadinessInterpretation:
    """Readiness band with display text."""
    level: str
    message: str
    recommendation: str


def _sleep_hours_score(hours: float) -> float:
    if 7 <= hours <= 9:
        return 100
    if 6 <= hours < 7:
        return 70
    if 9 < hours <= 10:
        return 85
    if 5 <= hours < 6:
        return 50
    return 30


def calculate_readiness_score(
    sleep_hours: Optional[float] = None,
    sleep_quality: Optional[int] = None,
    stress_level: Optional[int] = None,
    nutrition_rating: Optional[int] = None,
    previous_session_rpe: float = 7,
    days_since_last_session: int = 1,
) -> int:
    """
    Calculate a 0-100 readiness score from check-in factors.

    Missing ratings default to neutral values (7h sleep, 3/5 ratings).

    Args:
        sleep_hours: Hours slept last night
        sleep_quality: Sleep quality rating (1-5)
        stress_level: Stress rating (1-5, higher is worse)
        nutrition_rating: Nutrition rating (1-5)
        previous_session_rpe: Average RPE of the previous session
        days_since_last_session: Rest days since the previous session

    Returns:
        Readiness score clamped to [0, 100]
    """
    hours = sleep_hours if sleep_hours is not None else 7
    quality = sleep_quality if sleep_quality is not None else 3
    stress = stress_level if stress_level is not None else 3
    nutrition = nutrition_rating if nutrition_rating is not None else 3

    sleep_score = _sleep_hours_score(hours) * (0.6 + quality * 0.1)
    stress_score = (6 - stress) * 20
    nutrition_score = nutrition * 20

    recovery_score = 70
    if previous_session_rpe >= 9:
        recovery_score -= 15
    elif previous_session_rpe <= 6:
        recovery_score += 10

    if days_since_last_session >= 2:
        recovery_score += 15
    elif days_since_last_session == 0:
        recovery_score -= 20

    total = (
        sleep_score * READINESS_WEIGHTS["sleep"]
        + stress_score * READINESS_WEIGHTS["stress"]
        + nutrition_score * READINESS_WEIGHTS["nutrition"]
        + recovery_score * READINESS_WEIGHTS["recovery"]
    )
    score = round_half_up(max(0, min(100, total)))
    logger.debug(f"Readiness score {score} (sleep={sleep_score:.1f}, stress={stress_score})")
    return score


def interpret_readiness(score: float) -> ReadinessInterpretation:
    """Map a readiness score onto its display band."""
    for minimum, level, message, recommendation in READINESS_BANDS:
        if score >= minimum:
            return ReadinessInterpretation(level, message, recommendation)
    # Scores below zero fall into the lowest band
    _, level, message, recommendation = READINESS_BANDS[-1]
    return ReadinessInterpretation(level, message, recommendation)
