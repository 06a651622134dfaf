"""
Unit tests for domain models.

These tests verify:
- Model validation
- Immutability
- Computed properties
- JSON round trips used at the API boundary
"""

import json
import pytest
from datetime import datetime, timezone
from pydantic import ValidationError


@pytest.mark.unit
class TestExerciseModel:
    """Tests for the Exercise value object."""

    def test_exercise_defaults(self):
        from domain.models import Exercise

        exercise = Exercise(id="bench", name="Bench Press", primary_muscle="chest")
        assert exercise.mechanic == "compound"
        assert exercise.default_rep_range == (8, 12)
        assert exercise.default_rir == 2
        assert exercise.min_weight_increment_kg == 2.5
        assert exercise.is_compound is True

    def test_rep_range_properties(self):
        from domain.models import Exercise

        exercise = Exercise(
            id="curl", name="Curl", primary_muscle="biceps",
            mechanic="isolation", default_rep_range=(10, 15),
        )
        assert exercise.rep_range_min == 10
        assert exercise.rep_range_max == 15
        assert exercise.is_compound is False

    def test_inverted_rep_range_rejected(self):
        from domain.models import Exercise

        with pytest.raises(ValidationError):
            Exercise(id="x", name="X", primary_muscle="chest", default_rep_range=(12, 8))

    def test_zero_rep_minimum_rejected(self):
        from domain.models import Exercise

        with pytest.raises(ValidationError):
            Exercise(id="x", name="X", primary_muscle="chest", default_rep_range=(0, 8))

    def test_rir_bounds(self):
        from domain.models import Exercise

        with pytest.raises(ValidationError):
            Exercise(id="x", name="X", primary_muscle="chest", default_rir=5)

    def test_exercise_is_frozen(self):
        from domain.models import Exercise

        exercise = Exercise(id="bench", name="Bench Press", primary_muscle="chest")
        with pytest.raises(ValidationError):
            exercise.default_rir = 3

    def test_str(self):
        from domain.models import Exercise

        exercise = Exercise(id="bench", name="Bench Press", primary_muscle="chest")
        assert str(exercise) == "Bench Press (compound, 8-12 @ RIR 2)"


@pytest.mark.unit
class TestSetLogModel:
    """Tests for the SetLog model."""

    def test_rir_derived_from_rpe(self):
        from domain.models import SetLog

        set_log = SetLog(exercise_block_id="b", set_number=1, weight_kg=100, reps=8, rpe=8)
        assert set_log.rir == 2

    def test_half_step_rpe_accepted(self):
        from domain.models import SetLog

        set_log = SetLog(exercise_block_id="b", set_number=1, weight_kg=100, reps=8, rpe=8.5)
        assert set_log.rir == 1.5

    def test_quarter_step_rpe_rejected(self):
        from domain.models import SetLog

        with pytest.raises(ValidationError):
            SetLog(exercise_block_id="b", set_number=1, weight_kg=100, reps=8, rpe=8.25)

    def test_rpe_out_of_range_rejected(self):
        from domain.models import SetLog

        with pytest.raises(ValidationError):
            SetLog(exercise_block_id="b", set_number=1, weight_kg=100, reps=8, rpe=11)

    def test_correction_produces_new_record(self):
        from domain.models import SetLog

        original = SetLog(exercise_block_id="b", set_number=1, weight_kg=100, reps=8, rpe=8)
        corrected = original.model_copy(update={"reps": 9})
        assert original.reps == 8
        assert corrected.reps == 9

    def test_effective_load_defaults_to_weight(self):
        from domain.models import SetLog

        set_log = SetLog(exercise_block_id="b", set_number=1, weight_kg=60, reps=8, rpe=8)
        assert set_log.effective_load_kg == 60

    def test_assisted_bodyweight_load(self):
        from domain.models import BodyweightData, SetLog

        set_log = SetLog(
            exercise_block_id="b",
            set_number=1,
            weight_kg=0,
            reps=8,
            rpe=8,
            bodyweight_data=BodyweightData(
                modification="assisted",
                assistance_weight_kg=20,
                user_bodyweight_kg=80,
                effective_load_kg=60,
            ),
        )
        assert set_log.effective_load_kg == 60


@pytest.mark.unit
class TestRecoveryModels:
    """Tests for weekly surveys and the user profile."""

    def test_survey_ratings_bounded(self):
        from domain.models import WeeklyPerformanceData

        with pytest.raises(ValidationError):
            WeeklyPerformanceData(
                week_number=1, perceived_fatigue=6, sleep_quality=3, motivation_level=3
            )

    def test_profile_defaults(self):
        from domain.models import UserProfile

        profile = UserProfile()
        assert profile.experience == "intermediate"
        assert profile.age == 30

    def test_unknown_experience_rejected(self):
        from domain.models import UserProfile

        with pytest.raises(ValidationError):
            UserProfile(experience="elite")


@pytest.mark.unit
class TestMesocycleModels:
    """Tests for mesocycle templates."""

    def test_week_defaults(self):
        from domain.models import MesocycleWeek

        week = MesocycleWeek(week_number=1)
        assert week.rpe_target.min == 7
        assert week.rpe_target.max == 9
        assert week.is_deload is False

    def test_week_round_trip(self):
        from domain.models import MesocycleWeek, PlannedExercise, PlannedSession

        week = MesocycleWeek(
            week_number=2,
            sessions=[
                PlannedSession(
                    day="Legs",
                    exercises=[PlannedExercise(exercise_id="squat", sets=4, rep_range=(5, 8))],
                    total_sets=4,
                )
            ],
        )
        restored = MesocycleWeek.model_validate(json.loads(week.model_dump_json()))
        assert restored == week


@pytest.mark.unit
class TestAdvisoryInputModels:
    """Tests for calibration and discomfort inputs."""

    def test_calibration_log_open_ended_prescription(self):
        from domain.models import CalibrationSetLog, PrescribedReps

        log = CalibrationSetLog(
            exercise_id="bench",
            exercise_name="Bench Press",
            weight=100,
            prescribed_reps=PrescribedReps(min=8),
            actual_reps=14,
            reported_rir=0,
            was_amrap=True,
            timestamp=datetime(2024, 3, 1, tzinfo=timezone.utc),
        )
        assert log.prescribed_reps.max is None

    def test_discomfort_severity_validated(self):
        from domain.models import DiscomfortEntry

        with pytest.raises(ValidationError):
            DiscomfortEntry(
                id="d1",
                user_id="u1",
                logged_at=datetime(2024, 3, 1, tzinfo=timezone.utc),
                exercise_id="deadlift",
                exercise_name="Deadlift",
                body_part="lower_back",
                severity="agony",
            )
