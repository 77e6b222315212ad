"""
Event models for Windows event log records.

This module contains the Pydantic model for a decoded EVENTLOGRECORD and the
event type enumeration used by the type filter and the severity tally.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


EVENT_CODE_MASK = 0x0000FFFF


class EventType(str, Enum):
    """Event types as named by the Event Viewer."""

    SUCCESS = "Success"
    ERROR = "Error"
    WARNING = "Warning"
    INFORMATION = "Information"
    AUDIT_SUCCESS = "Audit Success"
    AUDIT_FAILURE = "Audit Failure"
    UNKNOWN = "Unknown"

    @classmethod
    def from_code(cls, code: int) -> "EventType":
        """Map the numeric EventType field of a record to its name."""
        return _TYPE_CODES.get(code, cls.UNKNOWN)

    @property
    def is_critical(self) -> bool:
        return self in (EventType.ERROR, EventType.AUDIT_FAILURE)

    @property
    def is_warning(self) -> bool:
        return self is EventType.WARNING


_TYPE_CODES = {
    0x0000: EventType.SUCCESS,
    0x0001: EventType.ERROR,
    0x0002: EventType.WARNING,
    0x0004: EventType.INFORMATION,
    0x0008: EventType.AUDIT_SUCCESS,
    0x0010: EventType.AUDIT_FAILURE,
}


class EventRecord(BaseModel):
    """Model for a single decoded event log record."""

    model_config = ConfigDict(validate_assignment=True)

    record_number: int = Field(..., ge=0, description="Record number within the log")
    time_generated: datetime = Field(..., description="Time the event was generated (UTC)")
    time_written: datetime = Field(..., description="Time the event was written (UTC)")
    event_id: int = Field(..., ge=0, le=0xFFFFFFFF, description="Raw 32-bit event identifier")
    event_type: EventType = Field(..., description="Event type")
    event_category: int = Field(0, description="Source-specific category")
    source_name: str = Field(..., description="Event source name")
    computer_name: str = Field("", description="Computer where event occurred")
    strings: List[str] = Field(default_factory=list, description="Insertion strings")
    data: bytes = Field(b"", description="Binary event data")
    message: Optional[str] = Field(None, description="Resolved message text")

    @field_validator('time_generated', 'time_written')
    @classmethod
    def validate_timezone(cls, v):
        """Timestamps are stored as aware UTC datetimes."""
        if v.tzinfo is None:
            raise ValueError('Timestamps must be timezone-aware')
        return v

    @property
    def event_code(self) -> int:
        """Event ID with severity, customer and facility bits masked off."""
        return self.event_id & EVENT_CODE_MASK

    def summary(self) -> str:
        """One-line description used in verbose logging."""
        return (
            f"RecordNumber={self.record_number} EventID={self.event_id} "
            f"EventType={self.event_type.value} Source={self.source_name} "
            f"Computer={self.computer_name} TimeGenerated={self.time_generated.isoformat()}"
        )
