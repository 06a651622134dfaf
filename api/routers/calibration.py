"""
RPE calibration router.

The service is stateless: each request replays the lifter's set history
(oldest first) through a fresh RPECalibrationEngine. AMRAP sets in the
history produce calibrations as they are replayed.
"""
import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from api.deps import get_clock, get_settings
from backend.core.rpe_calibration import (
    CalibrationResult,
    RPECalibrationEngine,
    format_bias,
    get_bias_level,
)
from backend.settings import Settings
from domain.models.calibration import CalibrationSetLog

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/calibration",
    tags=["Calibration"],
)


# =============================================================================
# Request Models
# =============================================================================


class CalibrationHistoryRequest(BaseModel):
    """Set history, oldest first."""
    history: List[CalibrationSetLog]


class AdjustedRIRRequest(BaseModel):
    """Set history plus the RIR to adjust."""
    history: List[CalibrationSetLog]
    exercise_name: str
    target_rir: float = Field(..., ge=0)


# =============================================================================
# Response Models
# =============================================================================


class CalibrationResultResponse(BaseModel):
    """One exercise's latest calibration."""
    exercise_name: str
    predicted_max_reps: float
    actual_max_reps: int
    bias: float
    bias_display: str
    bias_level: str
    bias_interpretation: str
    confidence_level: str
    last_calibrated: datetime
    data_points: int
    needs_calibration: bool


class CalibrationPriorityResponse(BaseModel):
    exercise_name: str
    priority: str
    reason: str


class CalibrationAnalysisResponse(BaseModel):
    """Response model for a bias analysis."""
    overall_bias: float
    exercise_specific_bias: Dict[str, float]
    sandbagging_detected: bool
    overreaching_detected: bool
    recommendation: str
    calibrated_exercises: int
    needs_more_data: bool
    calibrations: List[CalibrationResultResponse]
    priorities: List[CalibrationPriorityResponse]


class AdjustedRIRResponse(BaseModel):
    """Response model for an adjusted RIR prescription."""
    prescribed_rir: float
    internal_target_rir: float
    has_adjustment: bool
    adjustment_reason: Optional[str] = None


# =============================================================================
# Helpers
# =============================================================================


def _replay(
    history: List[CalibrationSetLog],
    clock: Callable[[], datetime],
) -> RPECalibrationEngine:
    engine = RPECalibrationEngine(clock=clock)
    for log in history:
        engine.add_set_log(log)
    return engine


def _result_response(
    engine: RPECalibrationEngine,
    result: CalibrationResult,
    stale_days: int,
) -> CalibrationResultResponse:
    return CalibrationResultResponse(
        exercise_name=result.exercise_name,
        predicted_max_reps=result.predicted_max_reps,
        actual_max_reps=result.actual_max_reps,
        bias=result.bias,
        bias_display=format_bias(result.bias),
        bias_level=get_bias_level(result.bias),
        bias_interpretation=result.bias_interpretation,
        confidence_level=result.confidence_level,
        last_calibrated=result.last_calibrated,
        data_points=result.data_points,
        needs_calibration=engine.needs_calibration(result.exercise_name, stale_days),
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/analyze", response_model=CalibrationAnalysisResponse)
def analyze(
    request: CalibrationHistoryRequest,
    settings: Settings = Depends(get_settings),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> CalibrationAnalysisResponse:
    """Replay a set history and report calibration per exercise and overall."""
    engine = _replay(request.history, clock)
    analysis = engine.analyze_overall_bias()

    calibrations = []
    for name in analysis.exercise_specific_bias:
        result = engine.get_calibration_result(name)
        if result is not None:
            calibrations.append(
                _result_response(engine, result, settings.calibration_stale_days)
            )

    logger.debug(
        f"Calibration analysis over {len(request.history)} sets: "
        f"{analysis.calibrated_exercises} exercises calibrated"
    )

    return CalibrationAnalysisResponse(
        overall_bias=analysis.overall_bias,
        exercise_specific_bias=analysis.exercise_specific_bias,
        sandbagging_detected=analysis.sandbagging_detected,
        overreaching_detected=analysis.overreaching_detected,
        recommendation=analysis.recommendation,
        calibrated_exercises=analysis.calibrated_exercises,
        needs_more_data=analysis.needs_more_data,
        calibrations=calibrations,
        priorities=[
            CalibrationPriorityResponse(
                exercise_name=p.exercise_name,
                priority=p.priority,
                reason=p.reason,
            )
            for p in engine.get_calibration_priorities()
        ],
    )


@router.post("/adjusted-rir", response_model=AdjustedRIRResponse)
def adjusted_rir(
    request: AdjustedRIRRequest,
    clock: Callable[[], datetime] = Depends(get_clock),
) -> AdjustedRIRResponse:
    """Adjust a target RIR for the lifter's learned reporting bias."""
    engine = _replay(request.history, clock)
    result = engine.get_adjusted_rir(request.exercise_name, request.target_rir)
    return AdjustedRIRResponse(
        prescribed_rir=result.prescribed_rir,
        internal_target_rir=result.internal_target_rir,
        has_adjustment=result.has_adjustment,
        adjustment_reason=result.adjustment_reason,
    )
