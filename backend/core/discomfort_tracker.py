"""
Discomfort pattern tracking.

Clusters discomfort logged during sets by body part and flags repeated
or painful patterns that should be tracked as an injury.
"""
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence

from backend.core.numeric import as_utc
from domain.models.discomfort import DiscomfortEntry

logger = logging.getLogger(__name__)


DEFAULT_WINDOW_DAYS = 14
MIN_OCCURRENCES_FOR_PATTERN = 2
INJURY_OCCURRENCES = 3

SEVERITY_SCORES = {"twinge": 1, "discomfort": 2, "pain": 3}

# (upper bound exclusive, label) for averaged severity scores
SEVERITY_LABELS = ((1.5, "twinge"), (2.5, "discomfort"))

# Most common injury type per body part
BODY_PART_INJURY_TYPES: Dict[str, Optional[str]] = {
    "lower_back": "lower_back_strain",
    "upper_back": "upper_back_strain",
    "neck": "neck_strain",
    "left_shoulder": "shoulder_impingement",
    "right_shoulder": "shoulder_impingement",
    "shoulders": "shoulder_impingement",
    "left_elbow": "elbow_tendinitis",
    "right_elbow": "elbow_tendinitis",
    "elbows": "elbow_tendinitis",
    "left_wrist": "wrist_strain",
    "right_wrist": "wrist_strain",
    "wrists": "wrist_strain",
    "left_knee": "knee_injury",
    "right_knee": "knee_injury",
    "knees": "knee_injury",
    "left_hip": "hip_flexor_strain",
    "right_hip": "hip_flexor_strain",
    "hips": "hip_flexor_strain",
    "other": None,
}

PAIN_WARNING_ACTIONS = ["skip_remaining", "continue_carefully", "end_workout"]


@dataclass
class DiscomfortPattern:
    """Repeated discomfort at one body part within the window."""
    body_part: str
    occurrences: int
    days_span: int
    average_severity: str
    exercises: List[str] = field(default_factory=list)
    suggests_injury: bool = False
    suggested_injury_type: Optional[str] = None


@dataclass(frozen=True)
class InjuryCreationPrompt:
    """Suggestion to track a discomfort pattern as an injury."""
    body_part: str
    suggested_type: str
    message: str
    occurrence_count: int
    days_span: int


@dataclass(frozen=True)
class PainWarning:
    """Immediate warning shown when pain is logged."""
    title: str
    message: str
    actions: List[str]


@dataclass
class DiscomfortLogResult:
    injury_prompt: Optional[InjuryCreationPrompt] = None
    pain_warning: Optional[PainWarning] = None


def _severity_label(score: float) -> str:
    for upper, label in SEVERITY_LABELS:
        if score < upper:
            return label
    return "pain"


def get_body_part_display_name(body_part: str) -> str:
    """'left_shoulder' -> 'Left Shoulder'."""
    return body_part.replace("_", " ").title()


def detect_discomfort_patterns(
    entries: Sequence[DiscomfortEntry],
    window_days: int = DEFAULT_WINDOW_DAYS,
    now: Optional[datetime] = None,
) -> List[DiscomfortPattern]:
    """
    Group recent discomfort by body part.

    Args:
        entries: Discomfort entries in any order
        window_days: Trailing window length in days
        now: End of the window; defaults to the latest entry's timestamp

    Returns:
        Patterns with at least two occurrences, most severe first, then
        by occurrence count
    """
    if not entries:
        return []

    end = as_utc(now) if now is not None else max(as_utc(e.logged_at) for e in entries)
    window_start = end - timedelta(days=window_days)

    by_body_part: Dict[str, List[DiscomfortEntry]] = {}
    for entry in entries:
        if as_utc(entry.logged_at) >= window_start:
            by_body_part.setdefault(entry.body_part, []).append(entry)

    patterns: List[DiscomfortPattern] = []
    for body_part, group in by_body_part.items():
        if len(group) < MIN_OCCURRENCES_FOR_PATTERN:
            continue

        timestamps = [as_utc(e.logged_at) for e in group]
        span_days = (max(timestamps) - min(timestamps)).total_seconds() / 86400
        average_score = sum(SEVERITY_SCORES[e.severity] for e in group) / len(group)

        exercises: List[str] = []
        for e in group:
            if e.exercise_name not in exercises:
                exercises.append(e.exercise_name)

        has_pain = any(e.severity == "pain" for e in group)
        patterns.append(
            DiscomfortPattern(
                body_part=body_part,
                occurrences=len(group),
                days_span=math.ceil(span_days) + 1,
                average_severity=_severity_label(average_score),
                exercises=exercises,
                suggests_injury=len(group) >= INJURY_OCCURRENCES or has_pain,
                suggested_injury_type=BODY_PART_INJURY_TYPES.get(body_part),
            )
        )

    return sorted(
        patterns,
        key=lambda p: (SEVERITY_SCORES[p.average_severity], p.occurrences),
        reverse=True,
    )


def process_discomfort_log(
    new_entry: DiscomfortEntry,
    history: Sequence[DiscomfortEntry],
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> DiscomfortLogResult:
    """
    Evaluate a newly logged discomfort against recent history.

    A pain warning is emitted only for pain-level entries. An injury
    prompt is emitted when the body part's pattern, including the new
    entry, suggests an injury.
    """
    result = DiscomfortLogResult()

    if new_entry.severity == "pain":
        result.pain_warning = PainWarning(
            title="Pain Logged",
            message="Consider stopping this exercise. Continuing through pain can worsen injury.",
            actions=list(PAIN_WARNING_ACTIONS),
        )

    patterns = detect_discomfort_patterns(list(history) + [new_entry], window_days)
    pattern = next(
        (p for p in patterns if p.body_part == new_entry.body_part and p.suggests_injury),
        None,
    )

    if pattern is not None and pattern.suggested_injury_type:
        display = get_body_part_display_name(pattern.body_part).lower()
        result.injury_prompt = InjuryCreationPrompt(
            body_part=pattern.body_part,
            suggested_type=pattern.suggested_injury_type,
            message=(
                f"You've logged {display} discomfort {pattern.occurrences} times recently. "
                "Consider tracking this as an injury for better exercise recommendations."
            ),
            occurrence_count=pattern.occurrences,
            days_span=pattern.days_span,
        )
        logger.info(
            f"Injury prompt for {pattern.body_part}: {pattern.occurrences} occurrences "
            f"over {pattern.days_span} days"
        )

    return result
