"""
Discomfort router.

This router provides endpoints for:
- Pattern detection over recent discomfort entries
- Evaluating a newly logged entry (pain warning / injury prompt)
"""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from api.deps import get_settings
from backend.core.discomfort_tracker import (
    detect_discomfort_patterns,
    get_body_part_display_name,
    process_discomfort_log,
)
from backend.settings import Settings
from domain.models.discomfort import DiscomfortEntry

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/discomfort",
    tags=["Discomfort"],
)


# =============================================================================
# Request Models
# =============================================================================


class DiscomfortPatternsRequest(BaseModel):
    """Entries to cluster; the window ends at ``now`` or the latest entry."""
    entries: List[DiscomfortEntry]
    now: Optional[datetime] = None


class DiscomfortLogRequest(BaseModel):
    """A newly logged entry plus prior history."""
    entry: DiscomfortEntry
    history: List[DiscomfortEntry] = Field(default_factory=list)


# =============================================================================
# Response Models
# =============================================================================


class DiscomfortPatternResponse(BaseModel):
    body_part: str
    display_name: str
    occurrences: int
    days_span: int
    average_severity: str
    exercises: List[str]
    suggests_injury: bool
    suggested_injury_type: Optional[str] = None


class DiscomfortPatternsResponse(BaseModel):
    """Response model for pattern detection."""
    patterns: List[DiscomfortPatternResponse]


class InjuryPromptResponse(BaseModel):
    body_part: str
    suggested_type: str
    message: str
    occurrence_count: int
    days_span: int


class PainWarningResponse(BaseModel):
    title: str
    message: str
    actions: List[str]


class DiscomfortLogResponse(BaseModel):
    """Response model for a logged entry."""
    injury_prompt: Optional[InjuryPromptResponse] = None
    pain_warning: Optional[PainWarningResponse] = None


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/patterns", response_model=DiscomfortPatternsResponse)
def patterns(
    request: DiscomfortPatternsRequest,
    settings: Settings = Depends(get_settings),
) -> DiscomfortPatternsResponse:
    """Cluster recent discomfort by body part."""
    found = detect_discomfort_patterns(
        request.entries,
        window_days=settings.discomfort_window_days,
        now=request.now,
    )
    return DiscomfortPatternsResponse(
        patterns=[
            DiscomfortPatternResponse(
                body_part=p.body_part,
                display_name=get_body_part_display_name(p.body_part),
                occurrences=p.occurrences,
                days_span=p.days_span,
                average_severity=p.average_severity,
                exercises=p.exercises,
                suggests_injury=p.suggests_injury,
                suggested_injury_type=p.suggested_injury_type,
            )
            for p in found
        ]
    )


@router.post("/log", response_model=DiscomfortLogResponse)
def log_discomfort(
    request: DiscomfortLogRequest,
    settings: Settings = Depends(get_settings),
) -> DiscomfortLogResponse:
    """Evaluate a newly logged discomfort entry."""
    result = process_discomfort_log(
        request.entry,
        request.history,
        window_days=settings.discomfort_window_days,
    )

    response = DiscomfortLogResponse()
    if result.injury_prompt is not None:
        prompt = result.injury_prompt
        response.injury_prompt = InjuryPromptResponse(
            body_part=prompt.body_part,
            suggested_type=prompt.suggested_type,
            message=prompt.message,
            occurrence_count=prompt.occurrence_count,
            days_span=prompt.days_span,
        )
    if result.pain_warning is not None:
        warning = result.pain_warning
        response.pain_warning = PainWarningResponse(
            title=warning.title,
            message=warning.message,
            actions=warning.actions,
        )
    return response
