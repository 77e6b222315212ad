"""Shared fixtures for eventlog_checker tests."""

from datetime import datetime, timezone

import pytest
from loguru import logger

from eventlog_checker.core.log_source import MemoryLogSource
from eventlog_checker.core.resolver import StaticMessageResolver
from eventlog_checker.models.events import EventRecord, EventType
from eventlog_checker.models.query import LogQuery


# Numeric EventType values as stored in EVENTLOGRECORD
ERROR = 0x0001
WARNING = 0x0002
INFORMATION = 0x0004
AUDIT_SUCCESS = 0x0008
AUDIT_FAILURE = 0x0010

# Byte offset of StringOffset within the EVENTLOGRECORD header
STRING_OFFSET_FIELD = 36


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep loguru output away from captured stdout."""
    logger.remove()
    yield
    logger.remove()


@pytest.fixture
def memory_source():
    return MemoryLogSource()


@pytest.fixture
def resolver():
    return StaticMessageResolver({
        ("App", 1000): "Application failed: %1",
        ("App", 1001): "Disk %1 is almost full",
        ("Disk", 7): "The device %1 has a bad block.",
        ("Multi", 42): "first line\r\nsecond line\r\n",
    })


@pytest.fixture
def state_dir(tmp_path):
    return tmp_path / "state"


@pytest.fixture
def make_query(state_dir):
    def _make(**options):
        options.setdefault('state_dir', state_dir)
        return LogQuery.from_options(**options)

    return _make


@pytest.fixture
def make_record():
    def _make(**fields):
        when = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        values = dict(
            record_number=1,
            time_generated=when,
            time_written=when,
            event_id=1000,
            event_type=EventType.ERROR,
            source_name="App",
            computer_name="HOST",
        )
        values.update(fields)
        return EventRecord(**values)

    return _make
