"""
Tests for threshold aggregation.
"""

from eventlog_checker.core.aggregator import Aggregator
from eventlog_checker.models.reports import CheckStatus, ScanResult


def scan(log_name="Application", warnings=0, criticals=0, lines=()):
    return ScanResult(
        log_name=log_name,
        warning_count=warnings,
        critical_count=criticals,
        content_lines=list(lines),
    )


class TestAggregator:
    """Test cases for Aggregator."""

    def test_ok_when_nothing_matched(self):
        aggregator = Aggregator()
        aggregator.add(scan())

        result = aggregator.result()

        assert result.status == CheckStatus.OK
        assert result.message == "0 warnings, 0 criticals."

    def test_thresholds_are_strict(self):
        aggregator = Aggregator(warning_over=2, critical_over=1)
        aggregator.add(scan(warnings=2, criticals=1))

        assert aggregator.status() == CheckStatus.OK

        aggregator.add(scan(warnings=1))
        assert aggregator.status() == CheckStatus.WARNING

        aggregator.add(scan(criticals=1))
        assert aggregator.status() == CheckStatus.CRITICAL

    def test_single_match_over_zero(self):
        aggregator = Aggregator()
        aggregator.add(scan(warnings=1))

        assert aggregator.status() == CheckStatus.WARNING

    def test_critical_wins(self):
        aggregator = Aggregator()
        aggregator.add(scan(warnings=5, criticals=1))

        assert aggregator.status() == CheckStatus.CRITICAL

    def test_counts_summed_across_logs(self):
        aggregator = Aggregator()
        aggregator.extend([scan("Application", 1, 2), scan("System", 3, 4)])

        assert aggregator.warning_count == 4
        assert aggregator.critical_count == 6
        assert aggregator.result().message == "4 warnings, 6 criticals."

    def test_content_appended_in_log_order(self):
        aggregator = Aggregator(return_content=True)
        aggregator.extend([
            scan("Application", criticals=1, lines=["App:failed"]),
            scan("System", warnings=1, lines=["Disk:slow"]),
        ])

        assert aggregator.result().message == "1 warnings, 1 criticals.\nApp:failed\nDisk:slow\n"

    def test_content_omitted_unless_requested(self):
        aggregator = Aggregator()
        aggregator.add(scan(criticals=1, lines=["App:failed"]))

        assert aggregator.result().message == "0 warnings, 1 criticals."

    def test_no_content_section_when_nothing_matched(self):
        aggregator = Aggregator(return_content=True)
        aggregator.add(scan())

        assert aggregator.result().message == "0 warnings, 0 criticals."

    def test_name(self):
        aggregator = Aggregator(name="Security Log")

        assert aggregator.result().format() == "Security Log OK: 0 warnings, 0 criticals."
