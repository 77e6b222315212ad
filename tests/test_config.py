"""
Tests for configuration and helper utilities.
"""

import json
import tempfile
from pathlib import Path

import pytest

from eventlog_checker.exceptions import ConfigurationError
from eventlog_checker.utils.config import (
    STATE_SUBDIR,
    WORKDIR_ENV,
    AppConfig,
    ConfigManager,
    LoggingConfig,
    default_state_dir,
)
from eventlog_checker.utils.helpers import FormatHelper, StateFileHelper


class TestDefaultStateDir:
    """Test cases for the default state directory."""

    def test_workdir_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv(WORKDIR_ENV, str(tmp_path))

        assert default_state_dir() == tmp_path / STATE_SUBDIR

    def test_temp_dir_fallback(self, monkeypatch):
        monkeypatch.delenv(WORKDIR_ENV, raising=False)

        assert default_state_dir() == Path(tempfile.gettempdir()) / "check-windows-eventlog"


class TestConfigManager:
    """Test cases for ConfigManager."""

    def test_defaults_without_file(self):
        config = ConfigManager().config

        assert config.check_name == "Event Log"
        assert config.state_dir is None
        assert config.logging.level == "WARNING"

    def test_missing_file_uses_defaults(self, tmp_path):
        assert ConfigManager(str(tmp_path / "missing.yaml")).config == AppConfig()

    def test_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "check_name: Security Log\n"
            "state_dir: /var/lib/eventlog\n"
            "logging:\n"
            "  level: debug\n"
        )

        config = ConfigManager(str(path)).config

        assert config.check_name == "Security Log"
        assert config.state_dir == "/var/lib/eventlog"
        assert config.logging.level == "DEBUG"

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("")

        assert ConfigManager(str(path)).config == AppConfig()

    def test_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"logging": {"file_path": "check.log"}}))

        assert ConfigManager(str(path)).config.logging.file_path == "check.log"

    def test_invalid_level(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("logging:\n  level: LOUD\n")

        with pytest.raises(ConfigurationError):
            ConfigManager(str(path))

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("logging: [unclosed\n")

        with pytest.raises(ConfigurationError):
            ConfigManager(str(path))

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "config.ini"
        path.write_text("[section]\n")

        with pytest.raises(ConfigurationError):
            ConfigManager(str(path))

    def test_state_dir_precedence(self, tmp_path, monkeypatch):
        monkeypatch.setenv(WORKDIR_ENV, str(tmp_path / "work"))
        path = tmp_path / "config.yaml"
        path.write_text(f"state_dir: {tmp_path / 'configured'}\n")

        assert ConfigManager().get_state_dir() == tmp_path / "work" / STATE_SUBDIR
        assert ConfigManager(str(path)).get_state_dir() == tmp_path / "configured"
        assert ConfigManager(str(path)).get_state_dir(str(tmp_path / "explicit")) == tmp_path / "explicit"

    def test_logging_level_normalized(self):
        assert LoggingConfig(level="info").level == "INFO"


class TestFormatHelper:
    """Test cases for FormatHelper."""

    def test_content_line(self):
        assert FormatHelper.format_content_line("App", "line one\nline two") == "App:line oneline two"

    def test_format_number(self):
        assert FormatHelper.format_number(1234567) == "1,234,567"

    def test_truncate_string(self):
        assert FormatHelper.truncate_string("short", 10) == "short"
        assert FormatHelper.truncate_string("a" * 20, 10) == "aaaaaaa..."


class TestStateFileHelper:
    """Test cases for StateFileHelper."""

    def test_missing_dir(self, tmp_path):
        assert StateFileHelper.list_state_files(tmp_path / "missing") == []

    def test_lists_nested_files(self, tmp_path):
        (tmp_path / "Application-abc").write_text("42")
        (tmp_path / "C").mkdir()
        (tmp_path / "C" / "logs-def").write_text("bad")

        entries = StateFileHelper.list_state_files(tmp_path)

        assert [entry['file'] for entry in entries] == ["Application-abc", str(Path("C") / "logs-def")]
        assert entries[0]['offset'] == "42"
        assert entries[1]['offset'] is None
        assert entries[0]['modified'].endswith("UTC")
