"""
Tests for persisted scan offsets.
"""

import os

import pytest

from eventlog_checker.core.state import StateStore, fingerprint, sanitize_log_name
from eventlog_checker.exceptions import StateError


class TestFingerprint:
    """Test cases for argument fingerprints."""

    def test_md5_of_joined_args(self):
        assert fingerprint([]) == "d41d8cd98f00b204e9800998ecf8427e"
        assert fingerprint(["a", "b"]) == fingerprint(["a b"])

    def test_stable(self):
        args = ["--log", "System", "--type", "Error"]

        assert fingerprint(args) == fingerprint(list(args))

    def test_threshold_changes_fingerprint(self):
        assert fingerprint(["--log", "System", "-c", "1"]) != fingerprint(["--log", "System", "-c", "2"])


class TestSanitizeLogName:
    """Test cases for log name sanitization."""

    def test_plain_name_unchanged(self):
        assert sanitize_log_name("Application") == "Application"

    def test_drive_prefix(self):
        assert sanitize_log_name("C:\\Logs\\app.evtx") == "C" + os.sep + "Logs\\app.evtx"
        assert sanitize_log_name("D:/logs/app.evtx") == "D" + os.sep + "logs/app.evtx"

    def test_lowercase_drive_unchanged(self):
        assert sanitize_log_name("c:\\logs") == "c:\\logs"


class TestStateStore:
    """Test cases for StateStore."""

    def test_path_for(self, tmp_path):
        store = StateStore(tmp_path)

        path = store.path_for("Application", ["--log", "Application"])

        assert path == tmp_path / ("Application-" + fingerprint(["--log", "Application"]))

    def test_path_differs_by_args(self, tmp_path):
        store = StateStore(tmp_path)

        assert store.path_for("System", ["-w", "1"]) != store.path_for("System", ["-w", "2"])

    def test_round_trip(self, tmp_path):
        store = StateStore(tmp_path)
        path = store.path_for("Application", [])

        store.save(path, 12345)

        assert path.read_text() == "12345"
        assert store.load(path) == 12345

    def test_save_creates_directories(self, tmp_path):
        store = StateStore(tmp_path / "nested" / "state")
        path = store.path_for("C:\\Logs\\app.evtx", [])

        store.save(path, 7)

        assert store.load(path) == 7
        assert (tmp_path / "nested" / "state" / "C").is_dir()

    def test_missing_file(self, tmp_path):
        assert StateStore(tmp_path).load(tmp_path / "missing") is None

    def test_surrounding_whitespace_ignored(self, tmp_path):
        path = tmp_path / "state"
        path.write_bytes(b" 42\r\n")

        assert StateStore(tmp_path).load(path) == 42

    @pytest.mark.parametrize("content", ["", "abc", "12 34", "1.5"])
    def test_corrupt_file(self, tmp_path, content):
        path = tmp_path / "state"
        path.write_text(content)

        with pytest.raises(StateError):
            StateStore(tmp_path).load(path)

    def test_unreadable_file(self, tmp_path):
        """A directory where the state file should be cannot be read."""
        path = tmp_path / "state"
        path.mkdir()

        with pytest.raises(StateError):
            StateStore(tmp_path).load(path)

    def test_save_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = StateStore(blocker)

        with pytest.raises(StateError):
            store.save(store.path_for("Application", []), 1)
