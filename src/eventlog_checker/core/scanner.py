"""
Incremental scan of a single event log.

The scanner picks up where the previous run stopped, using the offset kept
by StateStore. On the first run it only records a baseline unless the query
asks for the existing records to be counted. scan() never writes state;
offsets are persisted separately by commit().
"""

from typing import Optional

from loguru import logger

from ..exceptions import DecodeError, MessageResolutionError, StateError
from ..models.events import EventRecord
from ..models.query import LogQuery
from ..models.reports import ScanPhase, ScanResult
from ..utils.helpers import FormatHelper
from .decoder import decode_record
from .filters import EventFilter
from .log_source import LogSource
from .resolver import NO_MESSAGE_PLACEHOLDER, MessageResolver
from .state import StateStore


class LogScanner:
    """Scans one log at a time for records added since the last run."""

    def __init__(
        self,
        query: LogQuery,
        source: LogSource,
        resolver: MessageResolver,
        store: Optional[StateStore] = None,
    ):
        self.query = query
        self.source = source
        self.resolver = resolver
        self.store = store or StateStore(query.state_dir)
        self.filter = EventFilter(query)

    def _resolve(self, log_name: str, record: EventRecord) -> str:
        try:
            return self.resolver.resolve(log_name, record.source_name, record.event_id, record.strings)
        except MessageResolutionError as e:
            logger.debug(f"{log_name}: {e}")
            return ""

    def commit(self, result: ScanResult) -> None:
        """Persist the offset reached by a scan; failures are only logged."""
        if self.query.no_state or result.new_offset is None:
            return
        path = self.store.path_for(result.log_name, self.query.orig_args)
        try:
            self.store.save(path, result.new_offset)
        except StateError as e:
            logger.warning(f"Failed to save offset, next run will rescan: {e}")

    def scan(self, log_name: str) -> ScanResult:
        """
        Scan one log.

        Returns:
            ScanResult with counts, matched lines and the offset to commit

        Raises:
            LogOpenError: if the log cannot be opened or its bounds read
            LogReadError: if a record read fails for a non-benign reason
            StateError: if an existing state file cannot be read
        """
        query = self.query
        state_path = self.store.path_for(log_name, query.orig_args)
        last: Optional[int] = None
        if not query.no_state:
            last = self.store.load(state_path)

        result = ScanResult(log_name=log_name)

        with self.source.open(log_name) as log:
            oldest, count = log.bounds()
            end = oldest + count
            newest = max(end - 1, 0)
            logger.debug(f"{log_name}: oldest={oldest} count={count} last={last}")

            if last is None and not query.no_state and not query.fail_first:
                logger.info(f"{log_name}: first run, recording baseline offset {newest}")
                result.phase = ScanPhase.BOOTSTRAP
                result.new_offset = newest
                return result

            if last is not None and oldest <= last <= newest:
                start = last + 1
            else:
                if last is not None:
                    logger.info(
                        f"{log_name}: offset {last} outside [{oldest}, {newest}], "
                        f"log was cleared or wrapped; restarting at {oldest}"
                    )
                start = oldest

            last_visited = last
            for number in range(start, end):
                raw = log.read_at(number)
                if raw is None:
                    logger.info(f"{log_name}: log ended at record {number}, stopping")
                    break
                result.records_read += 1
                last_visited = number

                try:
                    record = decode_record(raw)
                except DecodeError as e:
                    logger.warning(f"{log_name}: skipping record {number}: {e}")
                    continue
                last_visited = record.record_number
                if query.verbose:
                    logger.debug(f"{log_name}: {record.summary()}")

                if not self.filter.accepts(record, lambda r: self._resolve(log_name, r)):
                    continue

                if query.return_content:
                    if record.message is None:
                        record.message = self._resolve(log_name, record)
                    message = record.message or NO_MESSAGE_PLACEHOLDER
                    result.content_lines.append(FormatHelper.format_content_line(record.source_name, message))

                if record.event_type.is_critical:
                    result.critical_count += 1
                elif record.event_type.is_warning:
                    result.warning_count += 1

        result.phase = ScanPhase.DONE
        result.new_offset = last_visited
        logger.info(
            f"{log_name}: read {result.records_read} records, "
            f"{result.warning_count} warnings, {result.critical_count} criticals"
        )
        return result
