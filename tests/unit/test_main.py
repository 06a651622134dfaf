"""
Unit tests for backend/main.py
"""

import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from unittest.mock import patch

from backend.main import (
    create_app,
    _configure_cors,
    _configure_logging,
    _init_sentry,
    _log_engine_settings,
)
from backend.settings import Settings


EXPECTED_ROUTES = {
    "/health",
    "/progression/targets",
    "/progression/set-quality",
    "/progression/e1rm",
    "/progression/warmup",
    "/fatigue/deload-check",
    "/fatigue/deload-week",
    "/fatigue/score",
    "/fatigue/trend",
    "/fatigue/deload-frequency",
    "/fatigue/readiness",
    "/plateaus/detect",
    "/plateaus/progress-score",
    "/calibration/analyze",
    "/calibration/adjusted-rir",
    "/discomfort/patterns",
    "/discomfort/log",
}


@pytest.mark.unit
class TestCreateApp:
    """Test the create_app() factory function."""

    def test_create_app_returns_fastapi_instance(self):
        """create_app() should return a FastAPI application instance."""
        settings = Settings(environment="test", _env_file=None)
        app = create_app(settings=settings)
        assert isinstance(app, FastAPI)

    def test_create_app_uses_default_settings_when_none_provided(self):
        """create_app() should use get_settings() when no settings provided."""
        with patch("backend.main.get_settings") as mock_get_settings:
            mock_settings = Settings(environment="test", _env_file=None)
            mock_get_settings.return_value = mock_settings

            app = create_app(settings=None)

            mock_get_settings.assert_called_once()
            assert isinstance(app, FastAPI)

    def test_create_app_configures_app_metadata(self):
        """create_app() should configure app title and version."""
        settings = Settings(environment="test", _env_file=None)
        app = create_app(settings=settings)

        assert app.title == "Training Progression API"
        assert app.version == "1.0.0"

    def test_create_app_registers_all_routes(self):
        """Every calculator route should be mounted."""
        app = create_app(settings=Settings(environment="test", _env_file=None))
        paths = {route.path for route in app.routes}
        assert EXPECTED_ROUTES <= paths

    def test_create_app_serves_its_own_settings(self):
        """Routers should see the settings passed to the factory."""
        settings = Settings(environment="staging", _env_file=None)
        client = TestClient(create_app(settings=settings))

        response = client.get("/health")

        assert response.json() == {"status": "ok", "environment": "staging"}


@pytest.mark.unit
class TestInitSentry:
    """Test Sentry initialization."""

    def test_init_sentry_skipped_when_no_dsn(self):
        """Sentry should not be initialized when DSN is not set."""
        settings = Settings(sentry_dsn=None, _env_file=None)

        with patch("backend.main.sentry_sdk.init") as mock_init:
            _init_sentry(settings)
            mock_init.assert_not_called()

    def test_init_sentry_called_when_dsn_provided(self):
        """Sentry should be initialized when DSN is provided."""
        settings = Settings(
            sentry_dsn="https://test@sentry.io/123",
            environment="test",
            _env_file=None
        )

        with patch("backend.main.sentry_sdk.init") as mock_init:
            _init_sentry(settings)
            mock_init.assert_called_once_with(
                dsn="https://test@sentry.io/123",
                environment="test",
                traces_sample_rate=0.1,
                profiles_sample_rate=0.1,
                enable_tracing=True,
            )


@pytest.mark.unit
class TestConfigureCors:
    """Test CORS configuration."""

    def test_configure_cors_adds_middleware(self):
        """_configure_cors should add CORS middleware to the app."""
        app = FastAPI()
        settings = Settings(_env_file=None)

        initial_middleware_count = len(app.user_middleware)

        _configure_cors(app, settings)

        assert len(app.user_middleware) == initial_middleware_count + 1

    def test_cors_allows_configured_origin(self):
        settings = Settings(
            environment="test",
            cors_allowed_origins="https://coach.example.com",
            _env_file=None,
        )
        client = TestClient(create_app(settings=settings))

        response = client.get("/health", headers={"Origin": "https://coach.example.com"})

        assert response.headers["access-control-allow-origin"] == "https://coach.example.com"


@pytest.mark.unit
class TestLogging:
    """Test logging configuration and startup logs."""

    def test_configure_logging_sets_root_level(self):
        root = logging.getLogger()
        previous = root.level
        try:
            _configure_logging(Settings(log_level="WARNING", _env_file=None))
            assert root.level == logging.WARNING
        finally:
            root.setLevel(previous)

    def test_log_engine_settings(self, caplog):
        settings = Settings(readiness_threshold=55, _env_file=None)

        with caplog.at_level("INFO"):
            _log_engine_settings(settings)

        assert "readiness_threshold=55" in caplog.text


@pytest.mark.unit
class TestMultipleAppInstances:
    """Test that multiple app instances can be created."""

    def test_create_multiple_independent_apps(self):
        """Should be able to create multiple independent app instances."""
        settings1 = Settings(environment="test", _env_file=None)
        settings2 = Settings(environment="production", _env_file=None)

        app1 = create_app(settings=settings1)
        app2 = create_app(settings=settings2)

        assert app1 is not app2
        assert TestClient(app1).get("/health").json()["environment"] == "test"
        assert TestClient(app2).get("/health").json()["environment"] == "production"
