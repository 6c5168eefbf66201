"""Tests for configuration file loading and environment overrides."""
import json
import os
from unittest.mock import patch

import pytest

from patternkit.config.loader import ConfigurationLoader
from patternkit.domain.exceptions import ConfigurationError


@pytest.fixture
def loader():
    return ConfigurationLoader()


class TestLoadFromFile:
    """Test reading YAML and JSON files."""

    def test_yaml(self, loader, tmp_path):
        path = tmp_path / "patternkit.yaml"
        path.write_text("logging:\n  level: debug\noutput:\n  format: table\n", encoding="utf-8")

        data = loader.load_from_file(str(path))

        assert data == {"logging": {"level": "debug"}, "output": {"format": "table"}}

    def test_json(self, loader, tmp_path):
        path = tmp_path / "patternkit.json"
        path.write_text(json.dumps({"command": {"history_length": 5}}), encoding="utf-8")
        assert loader.load_from_file(str(path)) == {"command": {"history_length": 5}}

    def test_empty_file(self, loader, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert loader.load_from_file(str(path)) == {}

    def test_env_vars_expanded(self, loader, tmp_path):
        path = tmp_path / "patternkit.yaml"
        path.write_text("logging:\n  file_path: $LOG_ROOT/pk.log\n", encoding="utf-8")
        with patch.dict(os.environ, {"LOG_ROOT": "/var/log"}):
            data = loader.load_from_file(str(path))
        assert data["logging"]["file_path"] == "/var/log/pk.log"

    def test_missing_file(self, loader, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            loader.load_from_file(str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, loader, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("logging: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Cannot parse"):
            loader.load_from_file(str(path))

    def test_undecodable_bytes(self, loader, tmp_path):
        path = tmp_path / "binary.yaml"
        path.write_bytes(b"\xff\xfe logging: {}\n")
        with pytest.raises(ConfigurationError, match="Cannot parse"):
            loader.load_from_file(str(path))

    def test_unreadable_file(self, loader, tmp_path):
        path = tmp_path / "locked.yaml"
        path.write_text("logging: {}\n", encoding="utf-8")
        with patch("pathlib.Path.open", side_effect=PermissionError("denied")):
            with pytest.raises(ConfigurationError, match="Cannot parse"):
                loader.load_from_file(str(path))

    def test_non_mapping(self, loader, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="mapping"):
            loader.load_from_file(str(path))


class TestLoadConfiguration:
    """Test discovery of the configuration file."""

    def test_explicit_file_from_environment(self, loader, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("output:\n  format: yaml\n", encoding="utf-8")
        with patch.dict(os.environ, {"PATTERNKIT_CONFIG": str(path)}):
            assert loader.load_configuration() == {"output": {"format": "yaml"}}

    def test_file_in_working_directory(self, loader, tmp_path, monkeypatch):
        (tmp_path / "patternkit.yml").write_text("mediator:\n  strict: true\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        assert loader.load_configuration() == {"mediator": {"strict": True}}


class TestEnvironmentOverrides:
    """Test PATTERNKIT_* overrides."""

    def test_nested_override_with_typed_value(self, loader):
        environ = {"PATTERNKIT_COMMAND__HISTORY_LENGTH": "7", "PATTERNKIT_MEDIATOR__STRICT": "true"}

        result = loader.apply_environment_overrides({"command": {"history_length": 100}}, environ)

        assert result == {"command": {"history_length": 7}, "mediator": {"strict": True}}

    def test_input_not_modified(self, loader):
        config = {"logging": {"level": "INFO"}}
        loader.apply_environment_overrides(config, {"PATTERNKIT_LOGGING__LEVEL": "DEBUG"})
        assert config == {"logging": {"level": "INFO"}}

    def test_unrelated_variables_ignored(self, loader):
        environ = {"HOME": "/root", "PATTERNKIT_CONFIG": "/etc/pk.yaml"}
        assert loader.apply_environment_overrides({}, environ) == {}

    def test_reads_process_environment_by_default(self, loader):
        with patch.dict(os.environ, {"PATTERNKIT_OUTPUT__FORMAT": "table"}):
            result = loader.apply_environment_overrides({})
        assert result == {"output": {"format": "table"}}
