"""
Shared fixtures for the engine and API test suites.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from api.deps import get_clock
from backend.main import create_app
from backend.settings import Settings
from domain.models import Exercise, LastSessionPerformance


FIXED_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Domain Fixtures
# =============================================================================


@pytest.fixture
def bench():
    """Compound barbell exercise with a 6-10 default range."""
    return Exercise(
        id="barbell-bench-press",
        name="Barbell Bench Press",
        primary_muscle="chest",
        secondary_muscles=["triceps", "front_delts"],
        movement_pattern="horizontal_push",
        mechanic="compound",
        default_rep_range=(6, 10),
        default_rir=2,
        min_weight_increment_kg=2.5,
        equipment_required=["barbell", "bench"],
    )


@pytest.fixture
def curl():
    """Isolation dumbbell exercise with a 10-15 default range."""
    return Exercise(
        id="dumbbell-curl",
        name="Dumbbell Curl",
        primary_muscle="biceps",
        movement_pattern="elbow_flexion",
        mechanic="isolation",
        default_rep_range=(10, 15),
        default_rir=1,
        min_weight_increment_kg=1.0,
        equipment_required=["dumbbell"],
    )


@pytest.fixture
def make_performance():
    """Factory for LastSessionPerformance with sensible defaults."""

    def _make(**overrides):
        data = dict(
            exercise_id="barbell-bench-press",
            weight_kg=100,
            reps=12,
            rpe=8,
            sets=3,
            all_sets_completed=True,
            average_rpe=8,
        )
        data.update(overrides)
        return LastSessionPerformance(**data)

    return _make


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def test_settings():
    """Settings isolated from any local .env file."""
    return Settings(environment="test", _env_file=None)


@pytest.fixture
def client(test_settings):
    """Test client with a pinned clock."""
    app = create_app(settings=test_settings)
    app.dependency_overrides[get_clock] = lambda: (lambda: FIXED_NOW)

    yield TestClient(app)

    app.dependency_overrides.clear()
