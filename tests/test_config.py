"""Tests for the configuration system."""

from __future__ import annotations

import os
from unittest import mock

import pytest

from approx_int.config import (
    ApproxIntConfig,
    ConfigLoader,
    ConfigValidationError,
    LoggingConfig,
    ValidationError,
    ValidationResult,
    get_default_config,
    load_config,
    validate_config,
)


@pytest.fixture
def no_user_config(tmp_path):
    """Path of a user config file that does not exist."""
    return tmp_path / "missing.toml"


class TestLoggingConfig:
    """Tests for LoggingConfig dataclass."""

    def test_default_values(self):
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.file is None
        assert config.console is True

    def test_to_dict(self):
        config = LoggingConfig(level="DEBUG", console=False)
        d = config.to_dict()
        assert d["level"] == "DEBUG"
        assert d["console"] is False
        assert d["file"] is None

    def test_from_dict_with_defaults(self):
        config = LoggingConfig.from_dict({"level": "ERROR"})
        assert config.level == "ERROR"
        assert config.format == LoggingConfig().format
        assert config.console is True

    def test_round_trip(self):
        config = LoggingConfig(level="DEBUG", file="/tmp/approx.log", console=False)
        assert LoggingConfig.from_dict(config.to_dict()) == config


class TestApproxIntConfig:
    """Tests for the top-level config container."""

    def test_default_config(self):
        assert ApproxIntConfig().logging == LoggingConfig()
        assert get_default_config() == ApproxIntConfig()

    def test_from_dict(self):
        config = ApproxIntConfig.from_dict({"logging": {"level": "DEBUG"}})
        assert config.logging.level == "DEBUG"

    def test_from_empty_dict(self):
        assert ApproxIntConfig.from_dict({}) == ApproxIntConfig()

    def test_to_dict(self):
        assert ApproxIntConfig().to_dict() == {"logging": LoggingConfig().to_dict()}


class TestConfigLoader:
    """Tests for ConfigLoader."""

    def test_load_default_config(self, no_user_config):
        config = ConfigLoader(user_config_path=no_user_config).load()
        assert config == get_default_config()

    def test_load_user_config(self, tmp_path):
        user = tmp_path / "user.toml"
        user.write_text('[logging]\nlevel = "WARNING"\n')

        config = load_config(user_config_path=user)
        assert config.logging.level == "WARNING"

    def test_load_project_config(self, tmp_path, no_user_config):
        project = tmp_path / "approx_int.toml"
        project.write_text('[logging]\nlevel = "DEBUG"\nconsole = false\n')

        config = load_config(project, user_config_path=no_user_config)
        assert config.logging.level == "DEBUG"
        assert config.logging.console is False

    def test_load_pyproject_tool_section(self, tmp_path, no_user_config):
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            '[project]\nname = "demo"\n\n'
            '[tool.approx_int.logging]\nlevel = "ERROR"\n'
        )

        config = load_config(pyproject, user_config_path=no_user_config)
        assert config.logging.level == "ERROR"

    def test_project_overrides_user(self, tmp_path):
        user = tmp_path / "user.toml"
        user.write_text('[logging]\nlevel = "WARNING"\nconsole = false\n')
        project = tmp_path / "project.toml"
        project.write_text('[logging]\nlevel = "DEBUG"\n')

        config = load_config(project, user_config_path=user)
        assert config.logging.level == "DEBUG"
        assert config.logging.console is False

    def test_missing_project_config(self, tmp_path, no_user_config):
        config = load_config(tmp_path / "nope.toml", user_config_path=no_user_config)
        assert config == get_default_config()

    def test_invalid_toml_falls_back_to_defaults(self, tmp_path, no_user_config):
        project = tmp_path / "broken.toml"
        project.write_text("[logging\nlevel = ")

        config = load_config(project, user_config_path=no_user_config)
        assert config == get_default_config()

    def test_non_table_logging_entry_ignored(self, tmp_path, no_user_config):
        project = tmp_path / "odd.toml"
        project.write_text('logging = "DEBUG"\n')

        config = load_config(project, user_config_path=no_user_config)
        assert config == get_default_config()

    def test_env_var_overrides(self, tmp_path, no_user_config):
        project = tmp_path / "project.toml"
        project.write_text('[logging]\nlevel = "DEBUG"\n')

        with mock.patch.dict(os.environ, {"APPROX_INT_LOGGING_LEVEL": "WARNING"}):
            config = load_config(project, user_config_path=no_user_config)

        assert config.logging.level == "WARNING"

    def test_save_round_trip(self, tmp_path, no_user_config):
        config = get_default_config()
        config.logging.level = "DEBUG"

        loader = ConfigLoader(
            tmp_path / "out" / "config.toml", user_config_path=no_user_config
        )
        written = loader.save(config)

        assert written.exists()
        # None values are omitted from TOML output
        assert "file" not in written.read_text()
        assert loader.load() == config

    def test_save_to_explicit_path(self, tmp_path, no_user_config):
        loader = ConfigLoader(user_config_path=no_user_config)
        target = tmp_path / "explicit.toml"

        assert loader.save(get_default_config(), target) == target
        assert target.exists()

    def test_save_without_path(self, no_user_config):
        loader = ConfigLoader(user_config_path=no_user_config)
        with pytest.raises(ValueError, match="No config path set"):
            loader.save(get_default_config())

    def test_save_invalid_config(self, tmp_path):
        config = get_default_config()
        config.logging.level = "LOUD"
        loader = ConfigLoader(tmp_path / "config.toml")

        with pytest.raises(ConfigValidationError) as exc_info:
            loader.save(config)

        assert exc_info.value.errors[0].key == "logging.level"
        assert "LOUD" in str(exc_info.value)
        assert not (tmp_path / "config.toml").exists()


class TestEnvVarParsing:
    """Tests for environment variable parsing."""

    def _load(self, no_user_config, env):
        with mock.patch.dict(os.environ, env):
            return ConfigLoader(user_config_path=no_user_config).load()

    def test_parse_boolean_true(self, no_user_config):
        config = self._load(no_user_config, {"APPROX_INT_LOGGING_CONSOLE": "yes"})
        assert config.logging.console is True

    def test_parse_boolean_false(self, no_user_config):
        config = self._load(no_user_config, {"APPROX_INT_LOGGING_CONSOLE": "off"})
        assert config.logging.console is False

    def test_parse_none(self, no_user_config):
        config = self._load(no_user_config, {"APPROX_INT_LOGGING_FILE": "none"})
        assert config.logging.file is None

    def test_parse_string(self, no_user_config):
        config = self._load(no_user_config, {"APPROX_INT_LOGGING_FILE": "/var/log/a.log"})
        assert config.logging.file == "/var/log/a.log"

    def test_other_prefixes_ignored(self, no_user_config):
        config = self._load(no_user_config, {"APPROX_INT_CORE_DEFAULT_INT_TYPE": "u32"})
        assert config == get_default_config()


class TestValidation:
    """Tests for configuration validation."""

    def test_validate_valid_config(self):
        result = validate_config(get_default_config())
        assert result.valid
        assert result.errors == []
        assert result.warnings == []

    def test_validate_lowercase_level(self):
        config = get_default_config()
        config.logging.level = "debug"
        assert validate_config(config).valid

    def test_validate_invalid_log_level(self):
        config = get_default_config()
        config.logging.level = "INVALID"
        result = validate_config(config)
        assert not result.valid
        assert result.errors[0].key == "logging.level"

    def test_validate_non_boolean_console(self):
        config = get_default_config()
        config.logging.console = "yes"
        result = validate_config(config)
        assert not result.valid
        assert result.errors[0].key == "logging.console"

    def test_validate_non_string_file(self):
        config = get_default_config()
        config.logging.file = 42
        result = validate_config(config)
        assert not result.valid
        assert result.errors[0].key == "logging.file"

    def test_validate_discarded_logs_warning(self):
        config = get_default_config()
        config.logging.console = False
        result = validate_config(config)
        assert result.valid
        assert [w.key for w in result.warnings] == ["logging.console"]


class TestValidationError:
    """Tests for ValidationError and ValidationResult."""

    def test_validation_error_str(self):
        error = ValidationError("logging.level", "is bad", "LOUD")
        assert str(error) == "logging.level: is bad (got: 'LOUD')"

    def test_validation_error_no_value(self):
        error = ValidationError("logging.console", "must be a boolean")
        assert str(error) == "logging.console: must be a boolean"

    def test_validation_result_bool(self):
        assert ValidationResult()
        assert not ValidationResult(errors=[ValidationError("k", "m")])
