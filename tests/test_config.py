"""Tests for apimeta.config module."""

import pytest
from pydantic import ValidationError

from apimeta.config import find_config_file, load_config
from apimeta.openapi import V3_0, V3_1


class TestLoadConfig:
    """Test loading the configuration from files and the environment."""

    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert find_config_file() is None
        config = load_config()
        assert config.default_version == "3.1"
        assert config.version == V3_1
        assert config.max_depth == 64
        assert config.log_level == "WARNING"

    def test_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "apimeta.yml").write_text("default_version: '3.0.3'\nlog_level: debug\n")
        config = load_config()
        assert config.default_version == "3.0"
        assert config.version == V3_0
        assert config.log_level == "DEBUG"

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.yml"
        path.write_text("max_depth: 32\n")
        monkeypatch.setenv("APIMETA_CONFIG", str(path))
        monkeypatch.setenv("APIMETA_MAX_DEPTH", "16")
        monkeypatch.setenv("APIMETA_LOG_LEVEL", "info")
        config = load_config()
        assert config.max_depth == 16
        assert config.log_level == "INFO"

    def test_config_is_immutable(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = load_config()
        with pytest.raises(ValidationError):
            config.max_depth = 1

    @pytest.mark.parametrize(
        "content",
        ["max_depth: 0\n", "default_version: '4.0'\n", "colour: blue\n", "log_level: loud\n"],
    )
    def test_invalid(self, tmp_path, content):
        path = tmp_path / "apimeta.yml"
        path.write_text(content)
        with pytest.raises(ValueError, match="Config validation error"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "apimeta.yml"
        path.write_text("- 3.1\n")
        with pytest.raises(ValueError, match="must contain a mapping"):
            load_config(path)

    def test_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("APIMETA_CONFIG", str(tmp_path / "missing.yml"))
        with pytest.raises(FileNotFoundError):
            load_config()
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yml")
