"""
Plateau Service for E1RM trend analysis.

This module provides business logic for detecting stagnation:
- Linear regression of E1RM over time (weekly change)
- Plateau detection over the most recent snapshots
- Rule-based suggestions for breaking a plateau
- Batch analysis and progress scoring across exercises
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from backend.core.numeric import round_half_up
from domain.models.performance import PerformanceSnapshot

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# Minimum snapshots before a plateau can be called
MIN_SNAPSHOTS_FOR_ANALYSIS = 4

# E1RM improvement below this fraction over the window is a plateau
PLATEAU_THRESHOLD = 0.02

# Weeks since the peak E1RM that count as a plateau on their own
WEEKS_TO_PLATEAU = 3

# Snapshots considered when suggesting remedies
SUGGESTION_WINDOW = 6
MAX_SUGGESTIONS = 5


# =============================================================================
# Response DTOs
# =============================================================================


@dataclass(frozen=True)
class TrendPoint:
    """One E1RM observation."""
    date: date
    e1rm: float


@dataclass
class ExerciseTrend:
    """E1RM trend for one exercise."""
    exercise_id: str
    data_points: List[TrendPoint] = field(default_factory=list)
    weekly_change: float = 0.0
    is_plateaued: bool = False


@dataclass
class PlateauDetectionResult:
    """Plateau verdict for one exercise."""
    is_plateaued: bool
    weeks_since_progress: int
    last_progress_date: Optional[date]
    current_e1rm: float
    peak_e1rm: float
    suggestions: List[str] = field(default_factory=list)


@dataclass
class PlateauAlert:
    """Advisory record for a plateaued exercise, ready to persist."""
    user_id: str
    exercise_id: str
    detected_at: datetime
    weeks_since_progress: int
    suggested_actions: List[str]
    dismissed: bool = False
    id: Optional[str] = None


# =============================================================================
# Trend Analysis
# =============================================================================


def _sorted_by_date(snapshots: Sequence[PerformanceSnapshot]) -> List[PerformanceSnapshot]:
    return sorted(snapshots, key=lambda s: s.session_date)


def _weekly_change(points: List[TrendPoint]) -> float:
    """Least-squares slope of E1RM against weeks since the first point."""
    if len(points) < 2:
        return 0.0

    first = points[0].date
    xs = [(p.date - first).days / 7 for p in points]
    ys = [p.e1rm for p in points]

    n = len(points)
    sum_x = sum(xs)
    sum_y = sum(ys)
    sum_xy = sum(x * y for x, y in zip(xs, ys))
    sum_x2 = sum(x * x for x in xs)

    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        return 0.0
    return round((n * sum_xy - sum_x * sum_y) / denominator, 2)


def _window_is_flat(points: List[TrendPoint]) -> bool:
    if len(points) < MIN_SNAPSHOTS_FOR_ANALYSIS:
        return False

    window = points[-MIN_SNAPSHOTS_FOR_ANALYSIS:]
    first_e1rm = window[0].e1rm
    last_e1rm = window[-1].e1rm
    if first_e1rm <= 0:
        return False
    return (last_e1rm - first_e1rm) / first_e1rm < PLATEAU_THRESHOLD


def analyze_exercise_trend(snapshots: Sequence[PerformanceSnapshot]) -> ExerciseTrend:
    """
    Analyze the E1RM trend for one exercise.

    Args:
        snapshots: Performance snapshots in any order

    Returns:
        ExerciseTrend with date-sorted points, weekly slope and a flag for
        under 2% improvement across the last four snapshots
    """
    if not snapshots:
        return ExerciseTrend(exercise_id="")

    ordered = _sorted_by_date(snapshots)
    points = [TrendPoint(date=s.session_date, e1rm=s.estimated_e1rm) for s in ordered]

    return ExerciseTrend(
        exercise_id=snapshots[0].exercise_id,
        data_points=points,
        weekly_change=_weekly_change(points),
        is_plateaued=_window_is_flat(points),
    )


# =============================================================================
# Plateau Detection
# =============================================================================


def detect_plateau(snapshots: Sequence[PerformanceSnapshot]) -> PlateauDetectionResult:
    """
    Decide whether an exercise has stalled.

    Requires at least four snapshots; fewer returns a not-plateaued result
    with zeroed counters. An exercise is plateaued when the recent window
    is flat or the peak E1RM is three or more weeks old.
    """
    if len(snapshots) < MIN_SNAPSHOTS_FOR_ANALYSIS:
        current = snapshots[-1].estimated_e1rm if snapshots else 0
        return PlateauDetectionResult(
            is_plateaued=False,
            weeks_since_progress=0,
            last_progress_date=None,
            current_e1rm=current,
            peak_e1rm=0,
        )

    ordered = _sorted_by_date(snapshots)

    peak = ordered[0]
    for s in ordered[1:]:
        if s.estimated_e1rm > peak.estimated_e1rm:
            peak = s

    latest = ordered[-1]
    weeks_since_progress = (latest.session_date - peak.session_date).days // 7

    trend = analyze_exercise_trend(ordered)
    is_plateaued = trend.is_plateaued or weeks_since_progress >= WEEKS_TO_PLATEAU

    suggestions = generate_plateau_suggestions(ordered, trend) if is_plateaued else []
    if is_plateaued:
        logger.info(
            f"Plateau detected for {latest.exercise_id}: "
            f"{weeks_since_progress} weeks since peak {peak.estimated_e1rm}kg"
        )

    return PlateauDetectionResult(
        is_plateaued=is_plateaued,
        weeks_since_progress=weeks_since_progress,
        last_progress_date=peak.session_date,
        current_e1rm=latest.estimated_e1rm,
        peak_e1rm=peak.estimated_e1rm,
        suggestions=suggestions,
    )


def generate_plateau_suggestions(
    snapshots: Sequence[PerformanceSnapshot],
    trend: ExerciseTrend,
) -> List[str]:
    """
    Suggest remedies from the last six snapshots' reps, RPE and sets.

    Variation and technique review are always included; a recovery check
    is added when the trend is flat or falling. At most five are returned.
    """
    if not snapshots:
        return []

    recent = list(snapshots)[-SUGGESTION_WINDOW:]
    avg_reps = sum(s.top_set_reps for s in recent) / len(recent)
    avg_rpe = sum(s.top_set_rpe for s in recent) / len(recent)
    avg_sets = sum(s.total_working_sets for s in recent) / len(recent)

    suggestions: List[str] = []

    if avg_reps > 10:
        suggestions.append("Try a lower rep range (5-8 reps) with heavier weight to build strength")
    elif avg_reps < 6:
        suggestions.append(
            "Try a higher rep range (10-15 reps) to stimulate muscle through a different mechanism"
        )
    else:
        suggestions.append(
            "Consider cycling between strength (5-6 reps) and hypertrophy (10-12 reps) phases"
        )

    if avg_sets < 3:
        suggestions.append("Increase volume by adding 1-2 more working sets")
    elif avg_sets > 4:
        suggestions.append("Consider reducing sets and increasing intensity - quality over quantity")

    if avg_rpe < 7:
        suggestions.append("Push closer to failure (RPE 8-9) - you may have room to work harder")
    elif avg_rpe > 9:
        suggestions.append(
            "Consider backing off intensity slightly - constant failure can impede recovery"
        )

    suggestions.append("Try a variation or similar exercise to provide a novel stimulus")
    suggestions.append(
        "Film your sets and review technique - small improvements can unlock progress"
    )

    if trend.weekly_change <= 0:
        suggestions.append(
            "Check recovery factors: sleep, nutrition, and stress. "
            "A plateau can indicate under-recovery"
        )

    return suggestions[:MAX_SUGGESTIONS]


def create_plateau_alert(
    user_id: str,
    exercise_id: str,
    result: PlateauDetectionResult,
    now: Optional[datetime] = None,
) -> Optional[PlateauAlert]:
    """Build an alert for a plateaued exercise; None when progressing."""
    if not result.is_plateaued:
        return None

    return PlateauAlert(
        user_id=user_id,
        exercise_id=exercise_id,
        detected_at=now or datetime.now(timezone.utc),
        weeks_since_progress=result.weeks_since_progress,
        suggested_actions=list(result.suggestions),
    )


# =============================================================================
# Batch Analysis
# =============================================================================


def analyze_all_exercises(
    snapshots_by_exercise: Dict[str, Sequence[PerformanceSnapshot]],
) -> Dict[str, PlateauDetectionResult]:
    """Run plateau detection for every exercise."""
    return {
        exercise_id: detect_plateau(snapshots)
        for exercise_id, snapshots in snapshots_by_exercise.items()
    }


def get_plateaued_exercises(
    results: Dict[str, PlateauDetectionResult],
) -> List[Tuple[str, PlateauDetectionResult]]:
    """Plateaued exercises, longest-stalled first."""
    plateaued = [(ex_id, r) for ex_id, r in results.items() if r.is_plateaued]
    return sorted(plateaued, key=lambda item: item[1].weeks_since_progress, reverse=True)


def calculate_progress_score(results: Dict[str, PlateauDetectionResult]) -> int:
    """
    Progress score (0-100) for a cohort of exercises.

    Progressing exercises score 100; plateaued ones score
    ``50 - min(50, weeks_since_progress * 10)``. An empty cohort scores 100.
    """
    if not results:
        return 100

    total = 0
    for result in results.values():
        if result.is_plateaued:
            total += 50 - min(50, result.weeks_since_progress * 10)
        else:
            total += 100

    return round_half_up(total / len(results))
