"""
Unit tests for backend/settings.py
"""

import pytest
from pydantic import ValidationError

from backend.settings import Settings, get_settings


# Environment variables that CI might set which we need to clear for default tests
CI_ENV_VARS = [
    "ENVIRONMENT",
    "LOG_LEVEL",
    "CORS_ALLOWED_ORIGINS",
    "READINESS_THRESHOLD",
    "CALIBRATION_STALE_DAYS",
    "DISCOMFORT_WINDOW_DAYS",
    "SENTRY_DSN",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Clear CI environment variables to test true defaults."""
    for var in CI_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.mark.unit
class TestSettingsDefaults:
    """Test that Settings applies correct defaults."""

    def test_environment_default(self, clean_env):
        """Default environment should be development."""
        settings = Settings(_env_file=None)
        assert settings.environment == "development"

    def test_log_level_default(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.log_level == "INFO"

    def test_engine_tunable_defaults(self, clean_env):
        """Engine tunables should match the reference thresholds."""
        settings = Settings(_env_file=None)
        assert settings.readiness_threshold == 60
        assert settings.calibration_stale_days == 14
        assert settings.discomfort_window_days == 14

    def test_sentry_dsn_default_to_none(self, clean_env):
        """Sentry DSN should default to None."""
        settings = Settings(_env_file=None)
        assert settings.sentry_dsn is None

    def test_cors_origins_default_empty(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.cors_origins_list == []


@pytest.mark.unit
class TestSettingsFromEnvironment:
    """Test that environment variables override defaults."""

    def test_tunables_from_env(self, clean_env, monkeypatch):
        monkeypatch.setenv("READINESS_THRESHOLD", "50")
        monkeypatch.setenv("DISCOMFORT_WINDOW_DAYS", "21")
        settings = Settings(_env_file=None)
        assert settings.readiness_threshold == 50
        assert settings.discomfort_window_days == 21

    def test_cors_origins_parsed(self, clean_env, monkeypatch):
        monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "https://a.example.com, https://b.example.com,")
        settings = Settings(_env_file=None)
        assert settings.cors_origins_list == ["https://a.example.com", "https://b.example.com"]


@pytest.mark.unit
class TestSettingsValidation:
    """Test Settings validation behavior."""

    def test_valid_environments_accepted(self):
        """Valid environment values should be accepted."""
        for env in ["development", "staging", "production", "test"]:
            settings = Settings(environment=env, _env_file=None)
            assert settings.environment == env

    def test_environment_case_insensitive(self):
        """Environment validation should be case-insensitive."""
        settings = Settings(environment="PRODUCTION", _env_file=None)
        assert settings.environment == "production"

    def test_invalid_environment_raises_error(self):
        """Invalid environment should raise ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            Settings(environment="invalid", _env_file=None)
        assert "Invalid environment" in str(exc_info.value)

    def test_log_level_normalized(self):
        assert Settings(log_level="debug", _env_file=None).log_level == "DEBUG"

    def test_invalid_log_level_raises_error(self):
        with pytest.raises(ValidationError):
            Settings(log_level="chatty", _env_file=None)

    def test_readiness_threshold_bounds(self):
        with pytest.raises(ValidationError):
            Settings(readiness_threshold=120, _env_file=None)

    def test_window_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(discomfort_window_days=0, _env_file=None)


@pytest.mark.unit
class TestSettingsProperties:
    """Test Settings computed properties."""

    def test_environment_flags(self):
        assert Settings(environment="production", _env_file=None).is_production is True
        assert Settings(environment="development", _env_file=None).is_development is True
        assert Settings(environment="test", _env_file=None).is_test is True
        assert Settings(environment="staging", _env_file=None).is_production is False


@pytest.mark.unit
class TestGetSettings:
    """Test the cached settings accessor."""

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()
