"""
RPE Calibration Engine.

Compares AMRAP (max-effort) results with what the lifter's recent RIR
reports predicted, learns each lifter's reporting bias per exercise and
adjusts future RIR prescriptions to compensate.

The engine owns a bounded, per-instance history. It does no locking;
callers sharing one instance across requests must serialize writes.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Optional
import logging

from backend.core.numeric import as_utc, round_half_up
from domain.models.calibration import CalibrationSetLog

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

MAX_HISTORY_SIZE = 500

# Prior sets must be within this window and weight tolerance of the AMRAP
MATCH_WINDOW = timedelta(days=28)
WEIGHT_TOLERANCE = 0.10

# Matched-sample cut-offs for confidence levels
MEDIUM_CONFIDENCE_SAMPLES = 3
HIGH_CONFIDENCE_SAMPLES = 6

CONFIDENCE_WEIGHTS = {"low": 1, "medium": 2, "high": 3}
PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}

SANDBAGGING_BIAS = 2
OVERREACHING_BIAS = -2

DEFAULT_STALE_DAYS = 14
PRIORITY_STALE_DAYS = 28

# Minimum non-low-confidence calibrations before the overall bias is trusted
MIN_CONFIDENT_CALIBRATIONS = 3


# =============================================================================
# Response DTOs
# =============================================================================


@dataclass
class CalibrationResult:
    """Comparison of an AMRAP result against predicted max reps."""
    exercise_name: str
    predicted_max_reps: float
    actual_max_reps: int
    # Positive: stopped early (sandbagging). Negative: closer to failure than reported.
    bias: float
    bias_interpretation: str
    confidence_level: str
    last_calibrated: datetime
    data_points: int


@dataclass
class RPEBiasAnalysis:
    """Confidence-weighted bias across all calibrated exercises."""
    overall_bias: float
    exercise_specific_bias: Dict[str, float] = field(default_factory=dict)
    sandbagging_detected: bool = False
    overreaching_detected: bool = False
    recommendation: str = ""
    calibrated_exercises: int = 0
    needs_more_data: bool = True


@dataclass(frozen=True)
class AdjustedRIRResult:
    """RIR to tell the lifter versus the RIR actually intended."""
    prescribed_rir: float
    internal_target_rir: float
    has_adjustment: bool
    adjustment_reason: Optional[str] = None


@dataclass(frozen=True)
class CalibrationPriority:
    """How urgently an exercise needs an AMRAP calibration."""
    exercise_name: str
    priority: str
    reason: str


# =============================================================================
# Calibration Engine
# =============================================================================


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RPECalibrationEngine:
    """
    Tracks and applies a lifter's RPE calibration.

    Usage:
        1. Create an instance with persisted history and calibrations
        2. Call add_set_log() after each set
        3. AMRAP sets return a CalibrationResult
        4. analyze_overall_bias() gives aggregate insights
        5. get_adjusted_rir() adjusts prescriptions for the learned bias
    """

    def __init__(
        self,
        initial_history: Iterable[CalibrationSetLog] = (),
        initial_calibrations: Iterable[CalibrationResult] = (),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the calibration engine.

        Args:
            initial_history: Persisted set logs, oldest first
            initial_calibrations: Persisted calibration results
            clock: Returns the current time; defaults to UTC now
        """
        self._clock = clock or _utc_now
        self._history: List[CalibrationSetLog] = list(initial_history)[-MAX_HISTORY_SIZE:]
        self._calibrations: Dict[str, CalibrationResult] = {}
        for calibration in initial_calibrations:
            self._calibrations[calibration.exercise_name.lower()] = calibration

    @property
    def history(self) -> List[CalibrationSetLog]:
        return list(self._history)

    def add_set_log(self, log: CalibrationSetLog) -> Optional[CalibrationResult]:
        """
        Record a set; AMRAP sets are calibrated immediately.

        Returns:
            CalibrationResult for AMRAP sets, otherwise None
        """
        self._history.append(log)
        if len(self._history) > MAX_HISTORY_SIZE:
            self._history = self._history[-MAX_HISTORY_SIZE:]

        if log.was_amrap:
            return self._calibrate_amrap(log)
        return None

    def _matching_sets(self, amrap: CalibrationSetLog) -> List[CalibrationSetLog]:
        key = amrap.exercise_name.lower()
        amrap_time = as_utc(amrap.timestamp)
        reference_weight = max(1.0, amrap.weight)

        matches = []
        for s in self._history:
            if s.was_amrap or s.exercise_name.lower() != key:
                continue
            set_time = as_utc(s.timestamp)
            if set_time >= amrap_time or amrap_time - set_time >= MATCH_WINDOW:
                continue
            if abs(s.weight - amrap.weight) / reference_weight >= WEIGHT_TOLERANCE:
                continue
            matches.append(s)
        return matches

    def _calibrate_amrap(self, amrap: CalibrationSetLog) -> CalibrationResult:
        key = amrap.exercise_name.lower()
        matches = self._matching_sets(amrap)

        if not matches:
            result = CalibrationResult(
                exercise_name=amrap.exercise_name,
                predicted_max_reps=amrap.actual_reps,
                actual_max_reps=amrap.actual_reps,
                bias=0.0,
                bias_interpretation="First calibration - no prior data to compare",
                confidence_level="low",
                last_calibrated=amrap.timestamp,
                data_points=0,
            )
            self._calibrations[key] = result
            return result

        # 8 reps reported at RIR 3 implies 11 reps were possible
        predictions = [s.actual_reps + s.reported_rir for s in matches]
        predicted = sum(predictions) / len(predictions)
        bias = amrap.actual_reps - predicted

        result = CalibrationResult(
            exercise_name=amrap.exercise_name,
            predicted_max_reps=round(predicted, 1),
            actual_max_reps=amrap.actual_reps,
            bias=round(bias, 1),
            bias_interpretation=interpret_bias(bias),
            confidence_level=_confidence_for(len(matches)),
            last_calibrated=amrap.timestamp,
            data_points=len(matches),
        )
        self._calibrations[key] = result
        logger.debug(
            f"Calibrated {amrap.exercise_name}: predicted {result.predicted_max_reps}, "
            f"actual {amrap.actual_reps}, bias {result.bias:+}"
        )
        return result

    def get_calibration_result(self, exercise_name: str) -> Optional[CalibrationResult]:
        """Latest calibration for an exercise (case-insensitive), or None."""
        return self._calibrations.get(exercise_name.lower())

    def analyze_overall_bias(self) -> RPEBiasAnalysis:
        """Confidence-weighted bias across every calibrated exercise."""
        calibrations = list(self._calibrations.values())
        if not calibrations:
            return RPEBiasAnalysis(
                overall_bias=0.0,
                recommendation="Complete some AMRAP sets to calibrate your RPE perception.",
            )

        total_weight = sum(CONFIDENCE_WEIGHTS[c.confidence_level] for c in calibrations)
        overall = (
            sum(c.bias * CONFIDENCE_WEIGHTS[c.confidence_level] for c in calibrations)
            / total_weight
        )

        confident = [c for c in calibrations if c.confidence_level != "low"]
        analysis = RPEBiasAnalysis(
            overall_bias=round(overall, 1),
            exercise_specific_bias={c.exercise_name: c.bias for c in calibrations},
            sandbagging_detected=overall >= SANDBAGGING_BIAS,
            overreaching_detected=overall <= OVERREACHING_BIAS,
            recommendation=_overall_recommendation(overall),
            calibrated_exercises=len(calibrations),
            needs_more_data=len(confident) < MIN_CONFIDENT_CALIBRATIONS,
        )
        if analysis.sandbagging_detected:
            logger.info(f"Sandbagging detected: overall bias {analysis.overall_bias:+}")
        elif analysis.overreaching_detected:
            logger.info(f"Overreaching detected: overall bias {analysis.overall_bias:+}")
        return analysis

    def get_adjusted_rir(self, exercise_name: str, target_rir: float) -> AdjustedRIRResult:
        """
        RIR to prescribe so the lifter's true stopping point matches intent.

        A lifter with a +2 bias stops two reps early, so a true RIR 2 is
        prescribed as RIR 0. Uncalibrated or low-confidence exercises are
        left unchanged.
        """
        unchanged = AdjustedRIRResult(
            prescribed_rir=target_rir,
            internal_target_rir=target_rir,
            has_adjustment=False,
        )

        calibration = self.get_calibration_result(exercise_name)
        if calibration is None or calibration.confidence_level == "low":
            return unchanged

        adjustment = round_half_up(calibration.bias)
        if adjustment == 0:
            return unchanged

        if adjustment > 0:
            reason = (
                f"Adjusted down by {adjustment} based on your calibration data "
                f"(you tend to stop {adjustment} reps early)"
            )
        else:
            reason = (
                f"Adjusted up by {-adjustment} based on your calibration data "
                f"(you tend to push {-adjustment} reps closer to failure)"
            )

        return AdjustedRIRResult(
            prescribed_rir=max(0, target_rir - adjustment),
            internal_target_rir=target_rir,
            has_adjustment=True,
            adjustment_reason=reason,
        )

    def _days_since(self, calibration: CalibrationResult) -> int:
        elapsed = as_utc(self._clock()) - as_utc(calibration.last_calibrated)
        return elapsed.days

    def needs_calibration(
        self, exercise_name: str, day_threshold: int = DEFAULT_STALE_DAYS
    ) -> bool:
        """True if never calibrated, low-confidence, or stale."""
        calibration = self.get_calibration_result(exercise_name)
        if calibration is None:
            return True
        if calibration.confidence_level == "low":
            return True
        return self._days_since(calibration) >= day_threshold

    def get_calibration_priorities(self) -> List[CalibrationPriority]:
        """
        Rank exercises seen in the history by calibration need.

        high: never calibrated or low confidence; medium: stale beyond
        28 days; low: recently calibrated.
        """
        seen: Dict[str, str] = {}
        for s in self._history:
            seen.setdefault(s.exercise_name.lower(), s.exercise_name)

        priorities: List[CalibrationPriority] = []
        for key, name in seen.items():
            calibration = self._calibrations.get(key)
            if calibration is None:
                priorities.append(CalibrationPriority(name, "high", "Never calibrated"))
                continue
            if calibration.confidence_level == "low":
                priorities.append(CalibrationPriority(name, "high", "Low confidence calibration"))
                continue

            days = self._days_since(calibration)
            if days > PRIORITY_STALE_DAYS:
                priorities.append(
                    CalibrationPriority(name, "medium", f"Last calibrated {days} days ago")
                )
            else:
                priorities.append(CalibrationPriority(name, "low", "Recently calibrated"))

        return sorted(priorities, key=lambda p: PRIORITY_ORDER[p.priority])

    def export_data(self) -> Dict[str, list]:
        """History and calibrations for persistence."""
        return {
            "history": list(self._history),
            "calibrations": list(self._calibrations.values()),
        }


# =============================================================================
# Helper Functions
# =============================================================================


def _confidence_for(samples: int) -> str:
    if samples >= HIGH_CONFIDENCE_SAMPLES:
        return "high"
    if samples >= MEDIUM_CONFIDENCE_SAMPLES:
        return "medium"
    return "low"


def interpret_bias(bias: float) -> str:
    """Human-readable description of a bias value."""
    if bias >= 4:
        return "Significant sandbagging - you had 4+ more reps than you thought"
    if bias >= 2:
        return "Moderate sandbagging - you're stopping 2-3 reps earlier than necessary"
    if bias >= 0.5:
        return "Slight underestimate - pretty well calibrated"
    if bias >= -0.5:
        return "Excellent calibration - your RIR estimates are accurate"
    if bias >= -2:
        return "Slight overestimate - you're pushing a bit harder than you think"
    return "Significant overestimate - be careful, you're closer to failure than you realize"


def _overall_recommendation(overall_bias: float) -> str:
    if overall_bias >= 3:
        return (
            "You're consistently stopping 3+ reps before failure. Your hard sets aren't "
            "as hard as you think. Push closer to failure on safe exercises."
        )
    if overall_bias >= 1.5:
        return (
            "You tend to underestimate your capacity by 1-2 reps. Consider pushing a bit "
            "harder, especially on machine and isolation work."
        )
    if overall_bias >= -0.5:
        return (
            "Your RPE calibration is solid. Keep using AMRAP sets periodically to stay "
            "calibrated."
        )
    if overall_bias >= -1.5:
        return (
            "You tend to push slightly closer to failure than you think. This is fine but "
            "monitor for signs of overreaching."
        )
    return (
        "You may be pushing too close to failure regularly. This increases injury risk "
        "and recovery demands. Consider leaving 1-2 more reps in reserve."
    )


def get_bias_level(bias: float) -> str:
    """Display category: sandbagging, accurate or overreaching."""
    if bias >= 1.5:
        return "sandbagging"
    if bias <= -1.5:
        return "overreaching"
    return "accurate"


def format_bias(bias: float) -> str:
    """Signed bias for display, e.g. '+3.0 reps'."""
    if bias >= 0:
        return f"+{bias:.1f} reps"
    return f"{bias:.1f} reps"


# "Reps in tank" buttons: 4 = "4+ easy", 2 = "2-3 good", 1 = "hard", 0 = "maxed out"
REPS_IN_TANK_TO_RIR = {4: 4.0, 2: 2.5, 1: 1.0, 0: 0.0}


def reps_in_tank_to_rir(reps_in_tank: int) -> float:
    """Convert a reps-in-tank button value to numeric RIR."""
    if reps_in_tank not in REPS_IN_TANK_TO_RIR:
        raise ValueError(f"Unknown reps-in-tank value: {reps_in_tank}")
    return REPS_IN_TANK_TO_RIR[reps_in_tank]
