"""
Integration tests for Plateau API endpoints.
"""
import pytest
from datetime import date, timedelta


def _snapshots(e1rms, exercise_id="squat"):
    start = date(2024, 1, 1)
    return [
        {
            "exercise_id": exercise_id,
            "session_date": (start + timedelta(days=7 * i)).isoformat(),
            "top_set_weight_kg": 100,
            "top_set_reps": 8,
            "top_set_rpe": 8,
            "total_working_sets": 3,
            "estimated_e1rm": e1rm,
        }
        for i, e1rm in enumerate(e1rms)
    ]


@pytest.mark.integration
class TestDetectEndpoint:
    """Tests for POST /plateaus/detect."""

    def test_progressing(self, client):
        response = client.post(
            "/plateaus/detect",
            json={"snapshots": _snapshots([100, 105, 110, 115]), "user_id": "user-1"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["result"]["is_plateaued"] is False
        assert data["weekly_change"] == 5.0
        assert data["alert"] is None

    def test_plateau_with_alert(self, client):
        response = client.post(
            "/plateaus/detect",
            json={"snapshots": _snapshots([120, 100, 105, 110, 115]), "user_id": "user-1"},
        )

        data = response.json()
        assert data["result"]["is_plateaued"] is True
        assert data["result"]["weeks_since_progress"] == 4
        assert data["result"]["last_progress_date"] == "2024-01-01"
        assert data["alert"]["exercise_id"] == "squat"
        assert data["alert"]["detected_at"].startswith("2024-03-01T12:00:00")
        assert data["alert"]["suggested_actions"] == data["result"]["suggestions"]

    def test_plateau_without_user_has_no_alert(self, client):
        response = client.post(
            "/plateaus/detect",
            json={"snapshots": _snapshots([120, 100, 105, 110, 115])},
        )

        assert response.json()["alert"] is None

    def test_insufficient_data(self, client):
        response = client.post("/plateaus/detect", json={"snapshots": _snapshots([100])})

        data = response.json()
        assert data["result"]["is_plateaued"] is False
        assert data["result"]["weeks_since_progress"] == 0


@pytest.mark.integration
class TestProgressScoreEndpoint:
    """Tests for POST /plateaus/progress-score."""

    def test_mixed_cohort(self, client):
        response = client.post(
            "/plateaus/progress-score",
            json={
                "snapshots_by_exercise": {
                    "squat": _snapshots([100, 105, 110, 115]),
                    "bench": _snapshots([80, 80, 80, 80], exercise_id="bench"),
                }
            },
        )

        data = response.json()
        assert data["plateaued_exercises"] == ["bench"]
        # (100 + (50 - 30)) / 2
        assert data["progress_score"] == 60
        assert set(data["results"]) == {"squat", "bench"}

    def test_empty_cohort(self, client):
        response = client.post("/plateaus/progress-score", json={"snapshots_by_exercise": {}})

        assert response.json()["progress_score"] == 100
