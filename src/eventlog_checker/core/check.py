"""
Event log check orchestration.

Runs the scanner over every configured log in order and reduces the results
to one check outcome. Any failure on any log makes the whole check UNKNOWN
and leaves every state file untouched; offsets are committed only once all
logs have been scanned.
"""

from typing import Optional

from loguru import logger

from ..exceptions import EventLogCheckError
from ..models.query import LogQuery
from ..models.reports import CheckResult, CheckStatus
from .aggregator import Aggregator
from .log_source import LogSource, create_log_source
from .resolver import MessageResolver, create_message_resolver
from .scanner import LogScanner
from .state import StateStore


class EventLogCheck:
    """Monitoring check over one or more Windows event logs."""

    def __init__(
        self,
        query: LogQuery,
        source: Optional[LogSource] = None,
        resolver: Optional[MessageResolver] = None,
        store: Optional[StateStore] = None,
        name: str = "Event Log",
    ):
        self.query = query
        self.name = name
        self.scanner = LogScanner(
            query,
            source or create_log_source(),
            resolver or create_message_resolver(),
            store,
        )

    def run(self) -> CheckResult:
        """Scan each log, aggregate, then commit offsets; errors become an UNKNOWN result."""
        aggregator = Aggregator(
            warning_over=self.query.warning_over,
            critical_over=self.query.critical_over,
            return_content=self.query.return_content,
            name=self.name,
        )
        for log_name in self.query.log_names:
            try:
                aggregator.add(self.scanner.scan(log_name))
            except EventLogCheckError as e:
                logger.error(f"Scan of '{log_name}' failed: {e}")
                return CheckResult(name=self.name, status=CheckStatus.UNKNOWN, message=str(e))

        for scanned in aggregator.results:
            self.scanner.commit(scanned)

        result = aggregator.result()
        logger.info(f"Check finished with status {result.status.value}")
        return result
