"""
Estimated one-rep-max (E1RM) calculations.

Every estimate adjusts for effort: a set stopped short of failure is
credited with its reps in reserve, so ``effective_reps = reps + (10 - rpe)``.
"""
import logging

from domain.models.set_log import SetLog

logger = logging.getLogger(__name__)


# Brzycki is unreliable past this many effective reps
BRZYCKI_MAX_REPS = 10


# =============================================================================
# 1RM Calculation Formulas
# =============================================================================


def _effective_reps(reps: int, rpe: float) -> float:
    return reps + (10 - rpe)


def estimate_one_rep_max(weight: float, reps: int, rpe: float = 10) -> float:
    """
    Estimate 1RM using the Epley formula, adjusted for RPE.

    Formula: 1RM = weight * (1 + effective_reps / 30)

    Args:
        weight: Weight lifted (kg)
        reps: Reps completed
        rpe: Reported effort on the 1-10 scale

    Returns:
        Estimated 1RM rounded to 2 decimals, or 0 for zero weight/reps

    Examples:
        >>> estimate_one_rep_max(100, 10)
        133.33
        >>> estimate_one_rep_max(140, 1)
        140
    """
    if weight == 0 or reps == 0:
        return 0
    if reps == 1 and rpe == 10:
        return weight

    effective_reps = _effective_reps(reps, rpe)
    return round(weight * (1 + effective_reps / 30), 2)


def estimate_one_rep_max_brzycki(weight: float, reps: int, rpe: float = 10) -> float:
    """
    Estimate 1RM using the Brzycki formula, adjusted for RPE.

    Formula: 1RM = weight / (1.0278 - 0.0278 * effective_reps)

    Falls back to Epley above 10 effective reps, where Brzycki diverges.

    Args:
        weight: Weight lifted (kg)
        reps: Reps completed
        rpe: Reported effort on the 1-10 scale

    Returns:
        Estimated 1RM rounded to 2 decimals
    """
    if weight == 0 or reps == 0:
        return 0
    if reps == 1 and rpe == 10:
        return weight

    effective_reps = _effective_reps(reps, rpe)
    if effective_reps > BRZYCKI_MAX_REPS:
        return estimate_one_rep_max(weight, reps, rpe)

    return round(weight / (1.0278 - 0.0278 * effective_reps), 2)


def estimate_set_e1rm(set_log: SetLog) -> float:
    """Epley E1RM for a logged set, using the bodyweight effective load when present."""
    return estimate_one_rep_max(set_log.effective_load_kg, set_log.reps, set_log.rpe)


# =============================================================================
# Load Helpers
# =============================================================================


def round_to_increment(weight: float, increment: float = 2.5) -> float:
    """
    Round a weight to the nearest loadable increment.

    Args:
        weight: Raw weight (kg)
        increment: Smallest plate/pin jump (kg)

    Returns:
        Weight rounded to the nearest multiple of ``increment``
    """
    if increment <= 0:
        raise ValueError(f"Increment must be positive, got {increment}")
    return round(round(weight / increment) * increment, 2)


def working_weight_for(e1rm: float, target_reps: int, target_rir: float = 0) -> float:
    """
    Invert the Epley relation to find a working weight.

    Args:
        e1rm: Estimated 1RM (kg)
        target_reps: Reps to be performed
        target_rir: Reps to leave in reserve

    Returns:
        Weight that projects to ``e1rm`` at the given reps and RIR
    """
    if e1rm <= 0:
        return 0
    effective_reps = target_reps + target_rir
    if effective_reps <= 1 and target_rir == 0:
        return e1rm
    return e1rm / (1 + effective_reps / 30)
