"""
Filter pipeline for decoded event records.

A record must pass every configured stage: event ID ranges, event type,
source name, and message text. The message stage is last because it needs
the message resolved first.
"""

from typing import Callable, Optional, Sequence

from loguru import logger

from ..models.events import EventRecord
from ..models.query import IDRange, LogQuery


def match_event_id(event_code: int, id_ranges: Sequence[IDRange]) -> bool:
    """
    Evaluate ID ranges in order against a masked event code.

    Positive ranges can only turn a match on. A negated range that contains
    the code turns it off; one that does not contain it turns it on, but only
    while no positive range has been seen yet. So ``!7`` alone accepts every
    other ID, while ``1-10,!5`` accepts 1-10 except 5.
    """
    found = False
    saw_positive = False
    for id_range in id_ranges:
        if not id_range.negated:
            saw_positive = True
            if id_range.contains(event_code):
                found = True
        elif id_range.contains(event_code):
            found = False
        elif not saw_positive:
            found = True
    return found


class EventFilter:
    """Applies the filters of a LogQuery to decoded records."""

    def __init__(self, query: LogQuery):
        self.query = query

    def match_id(self, record: EventRecord) -> bool:
        if self.query.id_ranges is None:
            return True
        return match_event_id(record.event_code, self.query.id_ranges)

    def match_type(self, record: EventRecord) -> bool:
        if not self.query.event_types:
            return True
        return record.event_type.value in self.query.event_types

    def match_source(self, record: EventRecord) -> bool:
        pattern, exclude = self.query.source_pattern, self.query.source_exclude
        if pattern is not None and not pattern.search(record.source_name):
            return False
        if exclude is not None and exclude.search(record.source_name):
            return False
        return True

    def match_message(self, message: str) -> bool:
        pattern, exclude = self.query.message_pattern, self.query.message_exclude
        if pattern is not None and not pattern.search(message):
            return False
        if exclude is not None and exclude.search(message):
            return False
        return True

    def accepts(self, record: EventRecord, resolve: Optional[Callable[[EventRecord], str]] = None) -> bool:
        """
        Run the whole pipeline against a record.

        Args:
            record: Decoded record
            resolve: Called at most once to fill ``record.message`` when a
                message filter is configured

        Returns:
            True if the record passes every configured stage
        """
        if not self.match_id(record):
            logger.debug(f"Record {record.record_number} rejected by event ID {record.event_code}")
            return False
        if not self.match_type(record):
            logger.debug(f"Record {record.record_number} rejected by type {record.event_type.value}")
            return False
        if not self.match_source(record):
            logger.debug(f"Record {record.record_number} rejected by source {record.source_name}")
            return False

        if self.query.message_pattern is None and self.query.message_exclude is None:
            return True
        if record.message is None and resolve is not None:
            record.message = resolve(record)
        if not self.match_message(record.message or ""):
            logger.debug(f"Record {record.record_number} rejected by message")
            return False
        return True
