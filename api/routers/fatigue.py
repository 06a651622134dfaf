"""
Fatigue router for deload planning and readiness.

This router provides endpoints for:
- Reactive deload checks from weekly surveys
- Deload week generation
- Weekly fatigue scores and trends
- Proactive deload frequency
- Pre-workout readiness
"""
import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from backend.core.deload_service import (
    analyze_fatigue_trend,
    assess_fatigue_score,
    calculate_deload_frequency,
    calculate_fatigue_score,
    check_deload_triggers,
    generate_deload_week,
    get_deload_strategy,
)
from backend.core.readiness import calculate_readiness_score, interpret_readiness
from domain.models.mesocycle import MesocycleWeek, PeriodizationPlan
from domain.models.recovery import UserProfile, WeeklyPerformanceData

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/fatigue",
    tags=["Fatigue"],
)


# =============================================================================
# Request Models
# =============================================================================


class DeloadCheckRequest(BaseModel):
    """Weekly history (oldest first) plus profile and plan."""
    history: List[WeeklyPerformanceData]
    profile: UserProfile = Field(default_factory=UserProfile)
    plan: PeriodizationPlan = Field(default_factory=PeriodizationPlan)


class DeloadWeekRequest(BaseModel):
    """Template week and deload flavour."""
    base_week: MesocycleWeek
    deload_type: Literal["volume", "intensity", "full"] = "volume"


class FatigueTrendRequest(BaseModel):
    """Weekly history, oldest first."""
    history: List[WeeklyPerformanceData]


class ReadinessRequest(BaseModel):
    """Pre-workout check-in. Missing ratings count as neutral."""
    sleep_hours: Optional[float] = Field(None, ge=0, le=24)
    sleep_quality: Optional[int] = Field(None, ge=1, le=5)
    stress_level: Optional[int] = Field(None, ge=1, le=5)
    nutrition_rating: Optional[int] = Field(None, ge=1, le=5)
    previous_session_rpe: float = Field(7, ge=1, le=10)
    days_since_last_session: int = Field(1, ge=0)


# =============================================================================
# Response Models
# =============================================================================


class DeloadCheckResponse(BaseModel):
    """Response model for a deload check."""
    should_deload: bool
    reasons: List[str]
    suggested_deload_type: str


class FatigueScoreResponse(BaseModel):
    """Response model for a single week's fatigue score."""
    score: int
    level: str
    recommendation: str


class FatigueTrendResponse(BaseModel):
    """Response model for a fatigue trend."""
    trend: str
    average_score: int
    peak_score: int
    recommendation: str


class DeloadFrequencyResponse(BaseModel):
    """Response model for proactive deload scheduling."""
    deload_frequency: int
    strategy: str


class ReadinessResponse(BaseModel):
    """Response model for readiness."""
    score: int
    level: str
    message: str
    recommendation: str


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/deload-check", response_model=DeloadCheckResponse)
def deload_check(request: DeloadCheckRequest) -> DeloadCheckResponse:
    """Check whether the recent weeks warrant a deload."""
    triggers = check_deload_triggers(request.history, request.profile, request.plan)
    return DeloadCheckResponse(
        should_deload=triggers.should_deload,
        reasons=triggers.reasons,
        suggested_deload_type=triggers.suggested_deload_type.value,
    )


@router.post("/deload-week", response_model=MesocycleWeek)
def deload_week(request: DeloadWeekRequest) -> MesocycleWeek:
    """Derive a deload week from a template week."""
    try:
        return generate_deload_week(request.base_week, request.deload_type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/score", response_model=FatigueScoreResponse)
def fatigue_score(week: WeeklyPerformanceData) -> FatigueScoreResponse:
    """Score one week's survey and band the result."""
    score = calculate_fatigue_score(week)
    assessment = assess_fatigue_score(score)
    return FatigueScoreResponse(
        score=score,
        level=assessment.level.value,
        recommendation=assessment.recommendation,
    )


@router.post("/trend", response_model=FatigueTrendResponse)
def fatigue_trend(request: FatigueTrendRequest) -> FatigueTrendResponse:
    """Analyze the direction of weekly fatigue."""
    trend = analyze_fatigue_trend(request.history)
    return FatigueTrendResponse(
        trend=trend.trend.value,
        average_score=trend.average_score,
        peak_score=trend.peak_score,
        recommendation=trend.recommendation,
    )


@router.post("/deload-frequency", response_model=DeloadFrequencyResponse)
def deload_frequency(profile: UserProfile) -> DeloadFrequencyResponse:
    """Recommend how often to schedule deloads for this lifter."""
    return DeloadFrequencyResponse(
        deload_frequency=calculate_deload_frequency(profile),
        strategy=get_deload_strategy(profile.experience),
    )


@router.post("/readiness", response_model=ReadinessResponse)
def readiness(request: ReadinessRequest) -> ReadinessResponse:
    """Score a pre-workout check-in."""
    score = calculate_readiness_score(
        sleep_hours=request.sleep_hours,
        sleep_quality=request.sleep_quality,
        stress_level=request.stress_level,
        nutrition_rating=request.nutrition_rating,
        previous_session_rpe=request.previous_session_rpe,
        days_since_last_session=request.days_since_last_session,
    )
    interpretation = interpret_readiness(score)
    return ReadinessResponse(
        score=score,
        level=interpretation.level,
        message=interpretation.message,
        recommendation=interpretation.recommendation,
    )
