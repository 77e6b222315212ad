"""
eventlog-checker - Windows Event Log monitoring check plugin.

Reads the records appended to one or more Windows event logs since the last
run, filters them, and reports OK/WARNING/CRITICAL against thresholds.
"""

__version__ = "1.0.0"
__author__ = "Security Team"
__email__ = "security@pentestforge.com"

from .core.check import EventLogCheck
from .core.log_source import MemoryLogSource, WindowsLogSource
from .core.scanner import LogScanner
from .models.query import LogQuery
from .models.reports import CheckResult, CheckStatus

__all__ = [
    "EventLogCheck",
    "LogScanner",
    "MemoryLogSource",
    "WindowsLogSource",
    "LogQuery",
    "CheckResult",
    "CheckStatus",
]
