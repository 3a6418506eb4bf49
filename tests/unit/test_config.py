"""Test Settings loading and validation."""

import pytest

from opendatalayer.core.config import Settings, load_settings
from opendatalayer.core.errors import ConfigError


class TestSettingsDefaults:
    def test_default_settings(self):
        settings = Settings()
        assert settings.source is None
        assert settings.context == {}
        assert settings.debug is False
        assert settings.observability.log_level == "INFO"
        assert settings.observability.log_format == "json"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("ODL_DEBUG", "true")
        monkeypatch.setenv("ODL_OBSERVABILITY__LOG_FORMAT", "console")
        settings = Settings()
        assert settings.debug is True
        assert settings.observability.log_format == "console"


class TestLoadSettings:
    def test_load_from_toml(self, tmp_path):
        path = tmp_path / "odl.toml"
        path.write_text(
            'debug = true\n'
            '\n'
            '[source]\n'
            'name = "shop"\n'
            'version = "3.1.0"\n'
            '\n'
            '[context.app]\n'
            'env = "staging"\n'
        )
        settings = load_settings(config_path=path)
        assert settings.debug is True
        assert settings.source.name == "shop"
        assert settings.source.version == "3.1.0"
        assert settings.context == {"app": {"env": "staging"}}

    def test_missing_file_uses_defaults(self, tmp_path):
        settings = load_settings(config_path=tmp_path / "missing.toml")
        assert settings.source is None

    def test_overrides_win(self, tmp_path):
        path = tmp_path / "odl.toml"
        path.write_text("debug = false\n")
        settings = load_settings(config_path=path, overrides={"debug": True})
        assert settings.debug is True


class TestValidateLogging:
    def test_unknown_format_rejected(self):
        with pytest.raises(ConfigError, match="log format"):
            load_settings(overrides={"observability": {"log_format": "xml"}})

    def test_unknown_level_rejected(self):
        settings = Settings(observability={"log_level": "LOUD"})
        with pytest.raises(ConfigError, match="log level"):
            settings.validate_logging()

    def test_level_is_case_insensitive(self):
        settings = Settings(observability={"log_level": "debug"})
        settings.validate_logging()  # Should not raise
