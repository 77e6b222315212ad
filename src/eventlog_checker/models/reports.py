"""
Result models for event log checks.

This module contains Pydantic models for the per-log scan result and the
overall check result reported to the monitoring agent.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class CheckStatus(str, Enum):
    """Monitoring plugin status levels."""

    OK = "OK"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"
    UNKNOWN = "UNKNOWN"

    @property
    def exit_code(self) -> int:
        """Conventional monitoring plugin exit code."""
        return _EXIT_CODES[self]


_EXIT_CODES = {
    CheckStatus.OK: 0,
    CheckStatus.WARNING: 1,
    CheckStatus.CRITICAL: 2,
    CheckStatus.UNKNOWN: 3,
}


class ScanPhase(str, Enum):
    """Phases of a single log scan."""

    BOOTSTRAP = "bootstrap"
    SCANNING = "scanning"
    DONE = "done"


class ScanResult(BaseModel):
    """Model for the outcome of scanning one event log."""

    log_name: str = Field(..., description="Scanned event log")
    phase: ScanPhase = Field(ScanPhase.SCANNING, description="Last phase reached")
    warning_count: int = Field(0, ge=0, description="Matched warning records")
    critical_count: int = Field(0, ge=0, description="Matched error and audit failure records")
    content_lines: List[str] = Field(default_factory=list, description="Matched record lines")
    records_read: int = Field(0, ge=0, description="Records pulled from the log")
    new_offset: Optional[int] = Field(None, description="Record number persisted for the next run")

    @property
    def bootstrapped(self) -> bool:
        return self.phase == ScanPhase.BOOTSTRAP

    @property
    def content(self) -> str:
        return "".join(line + "\n" for line in self.content_lines)


class CheckResult(BaseModel):
    """Model for the overall check outcome."""

    name: str = Field("Event Log", description="Check name shown in the output")
    status: CheckStatus = Field(..., description="Overall status")
    message: str = Field("", description="Summary line and optional content")

    @property
    def exit_code(self) -> int:
        return self.status.exit_code

    def format(self) -> str:
        """Render the plugin output line."""
        return f"{self.name} {self.status.value}: {self.message}"
