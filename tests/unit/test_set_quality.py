"""
Unit tests for set quality classification.

Tests cover:
- Junk / excessive / stimulative / effective labels
- Below-range reasons
- Junk volume and regression detection
"""
import pytest

from backend.core.set_quality import (
    SetQuality,
    classify_set_quality,
    detect_junk_volume,
    detect_regression,
)
from domain.models.performance import LastSessionPerformance
from domain.models.set_log import SetLog


def _performance(weight=100, reps=8, average_rpe=8):
    return LastSessionPerformance(
        exercise_id="squat",
        weight_kg=weight,
        reps=reps,
        rpe=average_rpe,
        sets=3,
        average_rpe=average_rpe,
    )


# =============================================================================
# Classification Tests
# =============================================================================


@pytest.mark.unit
class TestClassifySetQuality:
    """Tests for classify_set_quality."""

    @pytest.mark.parametrize("rpe", [1, 3, 4.5, 5])
    def test_low_rpe_is_junk(self, rpe):
        result = classify_set_quality(rpe, 2, 8, (6, 10), is_last_set=False)
        assert result.quality == SetQuality.JUNK
        assert "too far from failure" in result.reason

    def test_failure_on_non_final_set_is_excessive(self):
        result = classify_set_quality(10, 2, 8, (6, 10), is_last_set=False)
        assert result.quality == SetQuality.EXCESSIVE
        assert "failure" in result.reason

    def test_failure_on_final_set_is_effective(self):
        result = classify_set_quality(10, 2, 8, (6, 10), is_last_set=True)
        assert result.quality == SetQuality.EFFECTIVE

    @pytest.mark.parametrize("rpe", [7.5, 8, 9, 9.5])
    def test_stimulative_band(self, rpe):
        result = classify_set_quality(rpe, 2, 8, (6, 10), is_last_set=False)
        assert result.quality == SetQuality.STIMULATIVE

    def test_moderate_rpe_is_effective(self):
        result = classify_set_quality(7, 2, 8, (6, 10), is_last_set=False)
        assert result.quality == SetQuality.EFFECTIVE
        assert result.reason == "RPE 7 - effective working set"

    def test_far_from_target_rir_suggests_pushing_harder(self):
        result = classify_set_quality(6, 2, 8, (6, 10), is_last_set=False)
        assert result.quality == SetQuality.EFFECTIVE
        assert "could push harder" in result.reason

    def test_below_range_is_effective_with_range_in_reason(self):
        """Missing the range minimum outranks the stimulative band."""
        result = classify_set_quality(8.5, 2, 4, (6, 10), is_last_set=False)
        assert result.quality == SetQuality.EFFECTIVE
        assert "Below target [6-10]" in result.reason

    def test_reason_is_never_empty(self):
        for rpe in [1, 5, 6, 7, 7.5, 9.5, 10]:
            for is_last in (True, False):
                result = classify_set_quality(rpe, 2, 8, (6, 10), is_last)
                assert result.reason


# =============================================================================
# Junk Volume Tests
# =============================================================================


@pytest.mark.unit
class TestDetectJunkVolume:
    """Tests for detect_junk_volume."""

    def test_flags_low_rpe_working_sets(self):
        sets = [
            SetLog(exercise_block_id="b", set_number=1, weight_kg=60, reps=10, rpe=4, is_warmup=True),
            SetLog(exercise_block_id="b", set_number=2, weight_kg=100, reps=8, rpe=5),
            SetLog(exercise_block_id="b", set_number=3, weight_kg=100, reps=8, rpe=8),
        ]
        junk = detect_junk_volume(sets)
        assert [s.set_number for s in junk] == [2]

    def test_empty_input(self):
        assert detect_junk_volume([]) == []


# =============================================================================
# Regression Tests
# =============================================================================


@pytest.mark.unit
class TestDetectRegression:
    """Tests for detect_regression."""

    def test_no_previous_data(self):
        result = detect_regression(_performance(), None)
        assert result.is_regression is False
        assert result.reason == "No previous data to compare"

    def test_weight_drop(self):
        result = detect_regression(_performance(weight=95), _performance(weight=100))
        assert result.is_regression is True
        assert "Weight dropped from 100kg to 95kg" == result.reason

    def test_rep_drop_at_same_weight(self):
        result = detect_regression(_performance(reps=6), _performance(reps=8))
        assert result.is_regression is True
        assert "Reps dropped from 8 to 6" in result.reason

    def test_one_rep_drop_is_noise(self):
        result = detect_regression(_performance(reps=7), _performance(reps=8))
        assert result.is_regression is False

    def test_same_performance_much_harder(self):
        result = detect_regression(_performance(average_rpe=9.5), _performance(average_rpe=8))
        assert result.is_regression is True
        assert "more effort" in result.reason

    def test_progress_is_not_regression(self):
        result = detect_regression(_performance(weight=102.5), _performance(weight=100))
        assert result.is_regression is False
