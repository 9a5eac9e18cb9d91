"""Pass/fail aggregation over a run."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from diagnostics.models import ProbeCategory, ProbeResult


@dataclass(frozen=True)
class RunSummary:
    """Pass/fail counts and the failed subset of a run."""

    passed_count: int
    failed_count: int
    failed: tuple[ProbeResult, ...]

    @property
    def total(self) -> int:
        return self.passed_count + self.failed_count

    @property
    def failed_categories(self) -> frozenset[ProbeCategory]:
        return frozenset(result.category for result in self.failed)


def summarize(results: Iterable[ProbeResult] | None) -> RunSummary:
    """Partition results into passed and failed.

    An empty or missing run summarizes to zero passed and zero failed.
    """

    passed = 0
    failed: list[ProbeResult] = []
    for result in results or ():
        if result.success:
            passed += 1
        else:
            failed.append(result)
    return RunSummary(passed_count=passed, failed_count=len(failed), failed=tuple(failed))
