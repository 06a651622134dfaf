"""
Progression router for next-session prescriptions.

This router provides endpoints for:
- Next-session targets (load / reps / sets / technique)
- Set quality classification
- E1RM estimation
- Warmup protocols
"""
import logging
from typing import List, Literal, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from api.deps import get_settings
from backend.core.e1rm import estimate_one_rep_max, estimate_one_rep_max_brzycki
from backend.core.progression_service import (
    calculate_next_targets,
    generate_warmup_protocol,
)
from backend.core.set_quality import classify_set_quality
from backend.settings import Settings
from domain.models.exercise import Exercise
from domain.models.performance import LastSessionPerformance

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/progression",
    tags=["Progression"],
)


# =============================================================================
# Request Models
# =============================================================================


class NextTargetsRequest(BaseModel):
    """Inputs for the next-session calculation."""
    exercise: Exercise
    last_performance: Optional[LastSessionPerformance] = None
    experience: Literal["novice", "intermediate", "advanced"] = "intermediate"
    week_in_meso: int = Field(1, ge=1)
    total_weeks_in_meso: int = Field(6, ge=1)
    is_deload_week: bool = False
    readiness_score: float = Field(80, ge=0, le=100)
    calibrated_e1rm: Optional[float] = Field(None, gt=0)
    estimated_from_related: Optional[float] = Field(None, gt=0)
    systemic_fatigue_percent: Optional[float] = Field(None, ge=0, le=100)
    weekly_fatigue_score: Optional[float] = Field(None, ge=0, le=10)
    periodization_model: Literal["linear", "block", "undulating"] = "linear"


class SetQualityRequest(BaseModel):
    """A single set to classify."""
    rpe: float = Field(..., ge=1, le=10)
    target_rir: int = Field(2, ge=0, le=4)
    reps: int = Field(..., ge=0)
    target_rep_range: Tuple[int, int]
    is_last_set: bool = False


class E1RMRequest(BaseModel):
    """A (weight, reps, effort) triple."""
    weight: float = Field(..., ge=0)
    reps: int = Field(..., ge=0)
    rpe: float = Field(10, ge=1, le=10)
    formula: Literal["epley", "brzycki"] = "epley"


class WarmupRequest(BaseModel):
    """Working weight and exercise to warm up for."""
    working_weight: float = Field(..., ge=0)
    exercise: Exercise
    is_first_exercise: bool = False


# =============================================================================
# Response Models
# =============================================================================


class ProgressionTargetsResponse(BaseModel):
    """Response model for next-session targets."""
    weight_kg: float
    rep_range: Tuple[int, int]
    target_rir: int
    sets: int
    rest_seconds: int
    progression_type: str
    reason: str


class SetQualityResponse(BaseModel):
    """Response model for set quality."""
    quality: str
    reason: str


class E1RMResponse(BaseModel):
    """Response model for an E1RM estimate."""
    e1rm: float
    formula: str


class WarmupSetResponse(BaseModel):
    """A single warmup set."""
    set_number: int
    percent_of_working: int
    weight_kg: float
    target_reps: int
    purpose: str
    rest_seconds: int


class WarmupResponse(BaseModel):
    """Response model for a warmup protocol."""
    sets: List[WarmupSetResponse]


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/targets", response_model=ProgressionTargetsResponse)
def next_targets(
    request: NextTargetsRequest,
    settings: Settings = Depends(get_settings),
) -> ProgressionTargetsResponse:
    """
    Calculate the next session's targets for one exercise.

    Every response carries a decision-specific reason.
    """
    try:
        targets = calculate_next_targets(
            exercise=request.exercise,
            last_performance=request.last_performance,
            experience=request.experience,
            week_in_meso=request.week_in_meso,
            total_weeks_in_meso=request.total_weeks_in_meso,
            is_deload_week=request.is_deload_week,
            readiness_score=request.readiness_score,
            calibrated_e1rm=request.calibrated_e1rm,
            estimated_from_related=request.estimated_from_related,
            systemic_fatigue_percent=request.systemic_fatigue_percent,
            weekly_fatigue_score=request.weekly_fatigue_score,
            periodization_model=request.periodization_model,
            readiness_threshold=settings.readiness_threshold,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ProgressionTargetsResponse(
        weight_kg=targets.weight_kg,
        rep_range=targets.rep_range,
        target_rir=targets.target_rir,
        sets=targets.sets,
        rest_seconds=targets.rest_seconds,
        progression_type=targets.progression_type.value,
        reason=targets.reason,
    )


@router.post("/set-quality", response_model=SetQualityResponse)
def set_quality(request: SetQualityRequest) -> SetQualityResponse:
    """Classify a set as junk, effective, stimulative or excessive."""
    result = classify_set_quality(
        rpe=request.rpe,
        target_rir=request.target_rir,
        reps=request.reps,
        target_rep_range=request.target_rep_range,
        is_last_set=request.is_last_set,
    )
    return SetQualityResponse(quality=result.quality.value, reason=result.reason)


@router.post("/e1rm", response_model=E1RMResponse)
def e1rm(request: E1RMRequest) -> E1RMResponse:
    """Estimate a one-rep max from a submaximal set."""
    if request.formula == "brzycki":
        value = estimate_one_rep_max_brzycki(request.weight, request.reps, request.rpe)
    else:
        value = estimate_one_rep_max(request.weight, request.reps, request.rpe)
    return E1RMResponse(e1rm=value, formula=request.formula)


@router.post("/warmup", response_model=WarmupResponse)
def warmup(request: WarmupRequest) -> WarmupResponse:
    """Build warmup sets ramping up to the working weight."""
    protocol = generate_warmup_protocol(
        request.working_weight,
        request.exercise,
        is_first_exercise=request.is_first_exercise,
    )
    return WarmupResponse(
        sets=[
            WarmupSetResponse(
                set_number=s.set_number,
                percent_of_working=s.percent_of_working,
                weight_kg=s.weight_kg,
                target_reps=s.target_reps,
                purpose=s.purpose,
                rest_seconds=s.rest_seconds,
            )
            for s in protocol
        ]
    )
