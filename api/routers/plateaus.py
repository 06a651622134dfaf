"""
Plateau router for E1RM trend analysis.

This router provides endpoints for:
- Plateau detection for one exercise (with an optional alert)
- Batch analysis and a cohort progress score
"""
import logging
from datetime import date, datetime
from typing import Callable, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.deps import get_clock
from backend.core.plateau_service import (
    PlateauDetectionResult,
    analyze_all_exercises,
    analyze_exercise_trend,
    calculate_progress_score,
    create_plateau_alert,
    detect_plateau,
    get_plateaued_exercises,
)
from domain.models.performance import PerformanceSnapshot

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/plateaus",
    tags=["Plateaus"],
)


# =============================================================================
# Request Models
# =============================================================================


class PlateauDetectRequest(BaseModel):
    """Snapshots for one exercise, in any order."""
    snapshots: List[PerformanceSnapshot]
    user_id: Optional[str] = None


class ProgressScoreRequest(BaseModel):
    """Snapshots grouped by exercise id."""
    snapshots_by_exercise: Dict[str, List[PerformanceSnapshot]]


# =============================================================================
# Response Models
# =============================================================================


class PlateauResultResponse(BaseModel):
    """Plateau verdict for one exercise."""
    is_plateaued: bool
    weeks_since_progress: int
    last_progress_date: Optional[date] = None
    current_e1rm: float
    peak_e1rm: float
    suggestions: List[str]


class PlateauAlertResponse(BaseModel):
    """Advisory alert for a plateaued exercise."""
    user_id: str
    exercise_id: str
    detected_at: datetime
    weeks_since_progress: int
    suggested_actions: List[str]
    dismissed: bool


class PlateauDetectResponse(BaseModel):
    """Response model for single-exercise detection."""
    result: PlateauResultResponse
    weekly_change: float
    alert: Optional[PlateauAlertResponse] = None


class ProgressScoreResponse(BaseModel):
    """Response model for cohort analysis."""
    progress_score: int
    plateaued_exercises: List[str]
    results: Dict[str, PlateauResultResponse]


def _to_response(result: PlateauDetectionResult) -> PlateauResultResponse:
    return PlateauResultResponse(
        is_plateaued=result.is_plateaued,
        weeks_since_progress=result.weeks_since_progress,
        last_progress_date=result.last_progress_date,
        current_e1rm=result.current_e1rm,
        peak_e1rm=result.peak_e1rm,
        suggestions=result.suggestions,
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/detect", response_model=PlateauDetectResponse)
def detect(
    request: PlateauDetectRequest,
    clock: Callable[[], datetime] = Depends(get_clock),
) -> PlateauDetectResponse:
    """
    Detect a plateau for one exercise.

    An alert is included when the exercise is plateaued and a user_id
    was supplied.
    """
    result = detect_plateau(request.snapshots)
    trend = analyze_exercise_trend(request.snapshots)

    alert = None
    if request.user_id and request.snapshots:
        plateau_alert = create_plateau_alert(
            request.user_id,
            request.snapshots[0].exercise_id,
            result,
            now=clock(),
        )
        if plateau_alert is not None:
            alert = PlateauAlertResponse(
                user_id=plateau_alert.user_id,
                exercise_id=plateau_alert.exercise_id,
                detected_at=plateau_alert.detected_at,
                weeks_since_progress=plateau_alert.weeks_since_progress,
                suggested_actions=plateau_alert.suggested_actions,
                dismissed=plateau_alert.dismissed,
            )

    return PlateauDetectResponse(
        result=_to_response(result),
        weekly_change=trend.weekly_change,
        alert=alert,
    )


@router.post("/progress-score", response_model=ProgressScoreResponse)
def progress_score(request: ProgressScoreRequest) -> ProgressScoreResponse:
    """Analyze every exercise and score overall progress."""
    results = analyze_all_exercises(request.snapshots_by_exercise)
    return ProgressScoreResponse(
        progress_score=calculate_progress_score(results),
        plateaued_exercises=[ex_id for ex_id, _ in get_plateaued_exercises(results)],
        results={ex_id: _to_response(r) for ex_id, r in results.items()},
    )
