"""
Unit tests for Plateau Service.

Tests cover:
- E1RM trend regression
- Plateau detection (flat window and stale peak)
- Suggestion rules
- Alerts, batch analysis and progress scoring
"""
import pytest
from datetime import date, datetime, timedelta, timezone

from backend.core.plateau_service import (
    ExerciseTrend,
    PlateauDetectionResult,
    analyze_all_exercises,
    analyze_exercise_trend,
    calculate_progress_score,
    create_plateau_alert,
    detect_plateau,
    generate_plateau_suggestions,
    get_plateaued_exercises,
)
from domain.models.performance import PerformanceSnapshot


START = date(2024, 1, 1)


def _snapshots(e1rms, reps=8, rpe=8, sets=3, exercise_id="squat", days_apart=7):
    return [
        PerformanceSnapshot(
            exercise_id=exercise_id,
            session_date=START + timedelta(days=i * days_apart),
            top_set_weight_kg=100,
            top_set_reps=reps,
            top_set_rpe=rpe,
            total_working_sets=sets,
            estimated_e1rm=e1rm,
        )
        for i, e1rm in enumerate(e1rms)
    ]


def _result(is_plateaued, weeks=0):
    return PlateauDetectionResult(
        is_plateaued=is_plateaued,
        weeks_since_progress=weeks,
        last_progress_date=START,
        current_e1rm=100,
        peak_e1rm=100,
    )


# =============================================================================
# Trend Tests
# =============================================================================


@pytest.mark.unit
class TestAnalyzeExerciseTrend:
    """Tests for analyze_exercise_trend."""

    def test_weekly_change_is_regression_slope(self):
        trend = analyze_exercise_trend(_snapshots([100, 105, 110, 115]))
        assert trend.weekly_change == 5.0
        assert trend.is_plateaued is False
        assert trend.exercise_id == "squat"

    def test_sorts_by_date(self):
        snapshots = _snapshots([100, 105, 110, 115])
        trend = analyze_exercise_trend(list(reversed(snapshots)))
        assert [p.e1rm for p in trend.data_points] == [100, 105, 110, 115]
        assert trend.weekly_change == 5.0

    def test_flat_window_is_plateaued(self):
        trend = analyze_exercise_trend(_snapshots([100, 100.5, 101, 101]))
        assert trend.is_plateaued is True

    def test_empty_input(self):
        trend = analyze_exercise_trend([])
        assert trend.data_points == []
        assert trend.weekly_change == 0.0

    def test_same_day_points_have_zero_slope(self):
        trend = analyze_exercise_trend(_snapshots([100, 110], days_apart=0))
        assert trend.weekly_change == 0.0

    def test_zero_baseline_is_not_flat(self):
        trend = analyze_exercise_trend(_snapshots([0, 0, 0, 0]))
        assert trend.is_plateaued is False


# =============================================================================
# Detection Tests
# =============================================================================


@pytest.mark.unit
class TestDetectPlateau:
    """Tests for detect_plateau."""

    def test_fewer_than_four_snapshots(self):
        result = detect_plateau(_snapshots([100, 100, 100]))
        assert result.is_plateaued is False
        assert result.weeks_since_progress == 0
        assert result.last_progress_date is None
        assert result.current_e1rm == 100

    def test_no_snapshots(self):
        result = detect_plateau([])
        assert result.is_plateaued is False
        assert result.current_e1rm == 0

    def test_progressing_lift(self):
        result = detect_plateau(_snapshots([100, 105, 110, 115]))
        assert result.is_plateaued is False
        assert result.weeks_since_progress == 0
        assert result.peak_e1rm == 115
        assert result.suggestions == []

    def test_flat_lift_is_plateaued(self):
        result = detect_plateau(_snapshots([100, 100.5, 101, 101]))
        assert result.is_plateaued is True
        assert result.weeks_since_progress == 1
        assert result.suggestions

    def test_stale_peak_is_plateaued(self):
        result = detect_plateau(_snapshots([120, 100, 105, 110, 115]))
        assert result.is_plateaued is True
        assert result.weeks_since_progress == 4
        assert result.peak_e1rm == 120
        assert result.current_e1rm == 115
        assert result.last_progress_date == START


# =============================================================================
# Suggestion Tests
# =============================================================================


@pytest.mark.unit
class TestPlateauSuggestions:
    """Tests for generate_plateau_suggestions."""

    def test_high_reps_low_volume_easy_sets(self):
        snapshots = _snapshots([100, 100, 100, 100], reps=12, rpe=6, sets=2)
        trend = ExerciseTrend(exercise_id="squat", weekly_change=0.0)
        suggestions = generate_plateau_suggestions(snapshots, trend)
        assert len(suggestions) == 5
        assert "lower rep range" in suggestions[0]
        assert "more working sets" in suggestions[1]
        assert "closer to failure" in suggestions[2]

    def test_low_reps_high_rpe(self):
        snapshots = _snapshots([100, 100, 100, 100], reps=4, rpe=9.5, sets=5)
        trend = ExerciseTrend(exercise_id="squat", weekly_change=1.0)
        suggestions = generate_plateau_suggestions(snapshots, trend)
        assert "higher rep range" in suggestions[0]
        assert "reducing sets" in suggestions[1]
        assert "backing off" in suggestions[2]

    def test_always_suggests_variation_and_technique(self):
        snapshots = _snapshots([100, 100, 100, 100])
        trend = ExerciseTrend(exercise_id="squat", weekly_change=1.0)
        suggestions = generate_plateau_suggestions(snapshots, trend)
        assert any("variation" in s for s in suggestions)
        assert any("technique" in s for s in suggestions)
        assert not any("recovery factors" in s for s in suggestions)

    def test_recovery_check_when_flat(self):
        snapshots = _snapshots([100, 100, 100, 100])
        trend = ExerciseTrend(exercise_id="squat", weekly_change=0.0)
        suggestions = generate_plateau_suggestions(snapshots, trend)
        assert "recovery factors" in suggestions[-1]
        assert len(suggestions) == 4

    def test_empty_snapshots(self):
        assert generate_plateau_suggestions([], ExerciseTrend(exercise_id="x")) == []


# =============================================================================
# Alert / Batch Tests
# =============================================================================


@pytest.mark.unit
class TestPlateauAlert:
    """Tests for create_plateau_alert."""

    def test_no_alert_when_progressing(self):
        assert create_plateau_alert("user-1", "squat", _result(False)) is None

    def test_alert_for_plateau(self):
        now = datetime(2024, 3, 1, tzinfo=timezone.utc)
        result = _result(True, weeks=4)
        result.suggestions = ["Try a variation"]
        alert = create_plateau_alert("user-1", "squat", result, now=now)
        assert alert.user_id == "user-1"
        assert alert.exercise_id == "squat"
        assert alert.detected_at == now
        assert alert.weeks_since_progress == 4
        assert alert.suggested_actions == ["Try a variation"]
        assert alert.dismissed is False


@pytest.mark.unit
class TestBatchAnalysis:
    """Tests for batch helpers and progress scoring."""

    def test_analyze_all_exercises(self):
        results = analyze_all_exercises({
            "squat": _snapshots([100, 105, 110, 115]),
            "bench": _snapshots([80, 80, 80, 80], exercise_id="bench"),
        })
        assert results["squat"].is_plateaued is False
        assert results["bench"].is_plateaued is True

    def test_plateaued_sorted_worst_first(self):
        results = {
            "squat": _result(True, weeks=2),
            "bench": _result(False),
            "row": _result(True, weeks=5),
        }
        assert [ex_id for ex_id, _ in get_plateaued_exercises(results)] == ["row", "squat"]

    def test_progress_score_empty(self):
        assert calculate_progress_score({}) == 100

    def test_progress_score_mixed(self):
        results = {"squat": _result(False), "bench": _result(True, weeks=2)}
        assert calculate_progress_score(results) == 65

    def test_progress_score_half_rounds_up(self):
        results = {
            "squat": _result(False),
            "bench": _result(False),
            "row": _result(False),
            "press": _result(True, weeks=2),
        }
        # 330 / 4 = 82.5
        assert calculate_progress_score(results) == 83

    def test_long_plateau_scores_zero(self):
        assert calculate_progress_score({"squat": _result(True, weeks=6)}) == 0
