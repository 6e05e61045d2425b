"""
Tests for ngdriver configuration system.
"""

import json
from typing import Optional

import pytest
from pydantic import ValidationError

from ngdriver.config import (
    ConfigLoader,
    ConfigurationError,
    ENV_MAPPINGS,
    NgDriverOptions,
    find_config_file,
    get_env,
    get_env_key,
    load_config,
    load_env_config,
    load_file,
    merge_configs,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Make sure no NGDRIVER_* variables leak in from the environment."""
    for option in ENV_MAPPINGS:
        monkeypatch.delenv(get_env_key(option), raising=False)


class TestNgDriverOptions:
    """Tests for NgDriverOptions."""

    def test_defaults(self):
        """Test default values."""
        options = NgDriverOptions()
        assert options.root_element == "body"
        assert options.ignore_synchronization is False
        assert options.script_timeout is None
        assert options.detection_attempts == 5
        assert options.detection_interval == 1.0
        assert options.ng12_hybrid is False
        assert options.track_outstanding_timeouts is True
        assert options.blank_url == "about:blank"

    def test_detection_interval_ms(self):
        assert NgDriverOptions(detection_interval=0.5).detection_interval_ms == 500

    @pytest.mark.parametrize(
        "field, value",
        [
            ("root_element", "  "),
            ("blank_url", ""),
            ("script_timeout", -1),
            ("detection_attempts", -1),
            ("detection_interval", 0),
        ],
    )
    def test_validation(self, field, value):
        """Test invalid values are rejected."""
        with pytest.raises(ValidationError):
            NgDriverOptions(**{field: value})

    def test_from_dict(self):
        options = NgDriverOptions.from_dict({"root_element": "#app", "script_timeout": 20})
        assert options.root_element == "#app"
        assert options.script_timeout == 20

    def test_merge(self):
        """Test only explicitly set values of the other options win."""
        base = NgDriverOptions(root_element="#app", detection_attempts=10)
        merged = base.merge(NgDriverOptions(ng12_hybrid=True))
        assert merged.root_element == "#app"
        assert merged.detection_attempts == 10
        assert merged.ng12_hybrid is True

    def test_to_dict(self):
        """Test unset optional values are left out."""
        data = NgDriverOptions().to_dict()
        assert data["root_element"] == "body"
        assert "script_timeout" not in data


class TestEnvConfig:
    """Tests for environment variable configuration."""

    def test_get_env_key(self):
        assert get_env_key("root_element") == "NGDRIVER_ROOT_ELEMENT"
        assert get_env_key("script-timeout") == "NGDRIVER_SCRIPT_TIMEOUT"

    def test_get_env_typed(self, monkeypatch):
        """Test values are parsed to the requested type."""
        monkeypatch.setenv("NGDRIVER_IGNORE_SYNCHRONIZATION", "yes")
        monkeypatch.setenv("NGDRIVER_DETECTION_ATTEMPTS", "7")
        monkeypatch.setenv("NGDRIVER_DETECTION_INTERVAL", "0.5")
        monkeypatch.setenv("NGDRIVER_ROOT_ELEMENT", "#app")

        assert get_env("ignore_synchronization", bool) is True
        assert get_env("detection_attempts", int) == 7
        assert get_env("detection_interval", float) == 0.5
        assert get_env("root_element") == "#app"

    def test_get_env_unset(self):
        assert get_env("root_element") is None

    def test_get_env_optional_type(self, monkeypatch):
        monkeypatch.setenv("NGDRIVER_SCRIPT_TIMEOUT", "2.5")
        assert get_env("script_timeout", Optional[float]) == 2.5

    def test_custom_prefix(self, monkeypatch):
        """Test options can be read under another prefix."""
        monkeypatch.setenv("MYAPP_ROOT_ELEMENT", "#main")
        assert load_env_config(prefix="MYAPP_") == {"root_element": "#main"}

    def test_load_env_config(self, monkeypatch):
        """Test only variables that are set are returned, parsed."""
        monkeypatch.setenv("NGDRIVER_SCRIPT_TIMEOUT", "20")
        monkeypatch.setenv("NGDRIVER_NG12_HYBRID", "false")

        assert load_env_config() == {"script_timeout": 20.0, "ng12_hybrid": False}

    def test_load_env_config_empty(self):
        assert load_env_config() == {}


class TestLoadFile:
    """Tests for configuration file parsing."""

    def test_load_json(self, tmp_path):
        path = tmp_path / "ngdriver.config.json"
        path.write_text(json.dumps({"root_element": "#app"}))
        assert load_file(path) == {"root_element": "#app"}

    def test_load_toml_section(self, tmp_path):
        """Test the ngdriver section of a shared file is used."""
        path = tmp_path / "settings.toml"
        path.write_text('[other]\nkey = 1\n\n[ngdriver]\nscript_timeout = 15\n')
        assert load_file(path) == {"script_timeout": 15}

    def test_load_yaml(self, tmp_path):
        pytest.importorskip("yaml")
        path = tmp_path / "ngdriver.config.yaml"
        path.write_text("ngdriver:\n  ng12_hybrid: true\n")
        assert load_file(path) == {"ng12_hybrid": True}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_file(tmp_path / "missing.json")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "ngdriver.ini"
        path.write_text("[ngdriver]\n")
        with pytest.raises(ConfigurationError, match="Unsupported"):
            load_file(path)

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError, match="Could not parse"):
            load_file(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_file(path)


class TestFindConfigFile:
    """Tests for config file discovery."""

    def test_found(self, tmp_path):
        path = tmp_path / "ngdriver.config.toml"
        path.write_text("")
        assert find_config_file(search_paths=[str(tmp_path)]) == path

    def test_not_found(self, tmp_path):
        assert find_config_file(search_paths=[str(tmp_path)]) is None


class TestMergeConfigs:
    def test_later_wins(self):
        assert merge_configs({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_deep_merge(self):
        merged = merge_configs({"x": {"a": 1}}, {"x": {"b": 2}})
        assert merged == {"x": {"a": 1, "b": 2}}


class TestConfigLoader:
    """Tests for loading options from all sources."""

    def test_priority(self, tmp_path, monkeypatch):
        """Test overrides beat environment, which beats the file."""
        path = tmp_path / "ngdriver.config.json"
        path.write_text(json.dumps({
            "root_element": "#file",
            "script_timeout": 5,
            "detection_attempts": 2,
        }))
        monkeypatch.setenv("NGDRIVER_SCRIPT_TIMEOUT", "10")
        monkeypatch.setenv("NGDRIVER_DETECTION_ATTEMPTS", "3")

        options = load_config(path, overrides={"detection_attempts": 4})

        assert options.root_element == "#file"
        assert options.script_timeout == 10
        assert options.detection_attempts == 4

    def test_env_ignored_when_disabled(self, monkeypatch):
        monkeypatch.setenv("NGDRIVER_ROOT_ELEMENT", "#env")
        options = load_config(load_env=False, auto_find=False)
        assert options.root_element == "body"

    def test_auto_find(self, tmp_path):
        """Test a config file in the search paths is picked up."""
        (tmp_path / "ngdriver.config.json").write_text(json.dumps({"ng12_hybrid": True}))
        loader = ConfigLoader(search_paths=[str(tmp_path)], load_env=False)
        assert loader.load().ng12_hybrid is True

    def test_malformed_env_value(self, monkeypatch):
        """Test an unparseable variable surfaces as ConfigurationError."""
        monkeypatch.setenv("NGDRIVER_DETECTION_ATTEMPTS", "many")
        with pytest.raises(ConfigurationError, match="Invalid"):
            load_config(auto_find=False)

    def test_invalid_values(self):
        """Test validation errors surface as ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Invalid"):
            load_config(overrides={"detection_interval": 0}, auto_find=False)

    def test_unknown_keys_ignored(self):
        options = load_config(overrides={"not_an_option": 1}, auto_find=False)
        assert options == NgDriverOptions()
