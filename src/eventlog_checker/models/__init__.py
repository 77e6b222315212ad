"""Models package for eventlog_checker."""

from .events import EventRecord, EventType
from .query import IDRange, LogQuery, parse_id_ranges
from .reports import CheckResult, CheckStatus, ScanPhase, ScanResult

__all__ = [
    "EventRecord",
    "EventType",
    "IDRange",
    "LogQuery",
    "parse_id_ranges",
    "CheckResult",
    "CheckStatus",
    "ScanPhase",
    "ScanResult",
]
