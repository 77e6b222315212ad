"""
Exception hierarchy for eventlog_checker.

Every failure raised while scanning derives from EventLogCheckError so the
check orchestration can turn it into a single UNKNOWN result.
"""

from typing import Optional


class EventLogCheckError(Exception):
    """Base class for all check errors."""


class ConfigurationError(EventLogCheckError):
    """Invalid option, pattern or event ID specification."""


class LogOpenError(EventLogCheckError):
    """The event log could not be opened or its bounds queried."""

    def __init__(self, log_name: str, reason: str):
        self.log_name = log_name
        self.reason = reason
        super().__init__(f"cannot open event log '{log_name}': {reason}")


class LogReadError(EventLogCheckError):
    """Reading a record failed for a reason other than end of data."""

    def __init__(self, message: str, winerror: Optional[int] = None):
        self.winerror = winerror
        super().__init__(message)


class InsufficientBufferError(LogReadError):
    """The read buffer is smaller than the next record."""

    def __init__(self, required: int):
        self.required = required
        super().__init__(f"read buffer too small, {required} bytes required")


class EndOfLogError(LogReadError):
    """No record is available at the requested position."""


class DecodeError(EventLogCheckError):
    """A raw record buffer is truncated or malformed."""


class StateError(EventLogCheckError):
    """The state file could not be read, parsed or written."""


class MessageResolutionError(EventLogCheckError):
    """No message resource is registered for an event source."""
