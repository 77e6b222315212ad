"""Threshold aggregation of per-log scan results."""

from typing import Iterable, List

from ..models.reports import CheckResult, CheckStatus, ScanResult


class Aggregator:
    """Sums counts across logs and decides the overall status."""

    def __init__(self, warning_over: int = 0, critical_over: int = 0,
                 return_content: bool = False, name: str = "Event Log"):
        self.warning_over = warning_over
        self.critical_over = critical_over
        self.return_content = return_content
        self.name = name
        self.results: List[ScanResult] = []

    def add(self, result: ScanResult) -> None:
        self.results.append(result)

    def extend(self, results: Iterable[ScanResult]) -> None:
        for result in results:
            self.add(result)

    @property
    def warning_count(self) -> int:
        return sum(r.warning_count for r in self.results)

    @property
    def critical_count(self) -> int:
        return sum(r.critical_count for r in self.results)

    @property
    def content(self) -> str:
        return "".join(r.content for r in self.results)

    def status(self) -> CheckStatus:
        """Thresholds are exceeded strictly; critical wins over warning."""
        if self.critical_count > self.critical_over:
            return CheckStatus.CRITICAL
        if self.warning_count > self.warning_over:
            return CheckStatus.WARNING
        return CheckStatus.OK

    def result(self) -> CheckResult:
        message = f"{self.warning_count} warnings, {self.critical_count} criticals."
        if self.return_content and self.content:
            message += "\n" + self.content
        return CheckResult(name=self.name, status=self.status(), message=message)
