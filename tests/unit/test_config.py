"""Unit tests for configuration loading."""

from pathlib import Path

import pytest

from custodian.constants import DISPATCHER_IDLE_TIMEOUT_SECONDS, DISPATCHER_THREAD_NAME
from custodian.core.config import ConfigLoader, CustodianSettings, load_settings


@pytest.fixture
def write_config(tmp_path: Path):
    """Write YAML text to a temporary config file and return its path."""

    def _write(text: str) -> str:
        config_path = tmp_path / "custodian.yaml"
        config_path.write_text(text)
        return str(config_path)

    return _write


class TestConfigLoading:
    """Test reading configuration files."""

    def test_missing_file_returns_empty(self, tmp_path: Path) -> None:
        """Test a missing file yields no overrides."""
        loader = ConfigLoader()
        assert loader.load_config(str(tmp_path / "absent.yaml")) == {}

    def test_empty_file_returns_empty(self, write_config) -> None:
        """Test an empty file yields no overrides."""
        assert ConfigLoader().load_config(write_config("")) == {}

    def test_env_var_selects_file(self, write_config, monkeypatch) -> None:
        """Test CUSTODIAN_CONFIG is used when no path is given."""
        path = write_config("dispatcher:\n  idle_timeout: 2\n")
        monkeypatch.setenv("CUSTODIAN_CONFIG", path)

        config = ConfigLoader().load_config()

        assert config == {"dispatcher": {"idle_timeout": 2}}

    def test_default_file_name(self, tmp_path: Path, monkeypatch) -> None:
        """Test custodian.yaml in the working directory is the fallback."""
        (tmp_path / "custodian.yaml").write_text("logging:\n  level: debug\n")
        monkeypatch.chdir(tmp_path)

        settings = load_settings()

        assert settings.log_level == "DEBUG"

    def test_interpolation_resolved(self, write_config) -> None:
        """Test OmegaConf interpolations are resolved."""
        path = write_config(
            "name: cleanup\n"
            "dispatcher:\n"
            "  thread_name: ${name}-worker\n"
        )

        config = ConfigLoader().load_config(path)

        assert config["dispatcher"]["thread_name"] == "cleanup-worker"

    def test_invalid_yaml_raises_value_error(self, write_config) -> None:
        """Test malformed YAML is reported as ValueError."""
        path = write_config("dispatcher: [unclosed\n")

        with pytest.raises(ValueError, match="Invalid YAML"):
            ConfigLoader().load_config(path)

    def test_unresolvable_interpolation_raises(self, write_config) -> None:
        """Test references to undefined keys are reported as ValueError."""
        path = write_config("dispatcher:\n  thread_name: ${missing}\n")

        with pytest.raises(ValueError):
            ConfigLoader().load_config(path)


class TestSettings:
    """Test merging and validation."""

    def test_defaults(self) -> None:
        """Test empty configuration yields built-in defaults."""
        settings = ConfigLoader().get_settings({})

        assert settings == CustodianSettings()
        assert settings.dispatcher.idle_timeout == DISPATCHER_IDLE_TIMEOUT_SECONDS
        assert settings.dispatcher.thread_name == DISPATCHER_THREAD_NAME
        assert settings.log_level == "WARNING"

    def test_partial_override_keeps_other_defaults(self) -> None:
        """Test overriding one key leaves the rest of the section intact."""
        settings = ConfigLoader().get_settings({"dispatcher": {"idle_timeout": 1}})

        assert settings.dispatcher.idle_timeout == 1.0
        assert settings.dispatcher.thread_name == DISPATCHER_THREAD_NAME

    def test_log_level_normalised(self) -> None:
        """Test log level names are upper-cased."""
        settings = ConfigLoader().get_settings({"logging": {"level": "info"}})
        assert settings.log_level == "INFO"

    def test_to_dict_round_trips_through_loader(self) -> None:
        """Test rendered settings are accepted by the loader."""
        settings = CustodianSettings()
        assert ConfigLoader().get_settings(settings.to_dict()) == settings

    @pytest.mark.parametrize(
        "config, message",
        [
            ({"dispatcher": {"idle_timeout": 0}}, "must be positive"),
            ({"dispatcher": {"idle_timeout": -3}}, "must be positive"),
            ({"dispatcher": {"idle_timeout": "soon"}}, "must be a number"),
            ({"dispatcher": {"idle_timeout": True}}, "must be a number"),
            ({"dispatcher": {"thread_name": ""}}, "thread_name"),
            ({"dispatcher": {"thread_name": 5}}, "thread_name"),
            ({"dispatcher": "fast"}, "dispatcher must be a mapping"),
            ({"logging": {"level": "LOUD"}}, "Invalid logging.level"),
            ({"logging": "debug"}, "logging must be a mapping"),
        ],
    )
    def test_invalid_values(self, config: dict, message: str) -> None:
        """Test invalid settings raise ValueError."""
        with pytest.raises(ValueError, match=message):
            ConfigLoader().get_settings(config)
