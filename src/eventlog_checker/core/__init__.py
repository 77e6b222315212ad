"""Core package for eventlog_checker."""

from .aggregator import Aggregator
from .check import EventLogCheck
from .decoder import decode_record, encode_record
from .filters import EventFilter, match_event_id
from .log_source import LogSource, MemoryLogSource, WindowsLogSource, create_log_source
from .resolver import MessageResolver, StaticMessageResolver, WindowsMessageResolver
from .scanner import LogScanner
from .state import StateStore

__all__ = [
    "Aggregator",
    "EventLogCheck",
    "decode_record",
    "encode_record",
    "EventFilter",
    "match_event_id",
    "LogSource",
    "MemoryLogSource",
    "WindowsLogSource",
    "create_log_source",
    "MessageResolver",
    "StaticMessageResolver",
    "WindowsMessageResolver",
    "LogScanner",
    "StateStore",
]
