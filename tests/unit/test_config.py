"""Test settings validation"""

import pytest
from pydantic import ValidationError

from whati8.config import Settings


class TestSettings:
    """Test application settings"""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.app_name == "Whati8"
        assert settings.session_backend == "memory"
        assert settings.log_level == "INFO"

    def test_log_level_normalised(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="chatty")

    def test_invalid_redis_url(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, redis_url="http://localhost:6379")

    def test_invalid_backend(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, session_backend="postgres")

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("SESSION_BACKEND", "redis")
        monkeypatch.setenv("SESSION_TTL_SECONDS", "60")

        settings = Settings(_env_file=None)

        assert settings.session_backend == "redis"
        assert settings.session_ttl_seconds == 60
