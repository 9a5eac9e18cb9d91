"""Tests for run aggregation."""

from __future__ import annotations

from diagnostics.aggregate import summarize
from diagnostics.models import ProbeCategory, ProbeResult, Run


def _result(category: ProbeCategory, success: bool) -> ProbeResult:
    return ProbeResult(category=category, success=success, detail="test")


def test_summarize_counts_add_up_to_run_length() -> None:
    run = Run(
        results=(
            _result(ProbeCategory.ADAPTER_STATE, True),
            _result(ProbeCategory.GATEWAY_REACHABILITY, False),
            _result(ProbeCategory.EXTERNAL_IP, True),
            _result(ProbeCategory.DNS_RESOLUTION, False),
            _result(ProbeCategory.WEB_ACCESS, True),
        )
    )

    summary = summarize(run)

    assert summary.passed_count == 3
    assert summary.failed_count == 2
    assert summary.passed_count + summary.failed_count == len(run)
    assert [result.category for result in summary.failed] == [
        ProbeCategory.GATEWAY_REACHABILITY,
        ProbeCategory.DNS_RESOLUTION,
    ]
    assert summary.failed_categories == frozenset(
        {ProbeCategory.GATEWAY_REACHABILITY, ProbeCategory.DNS_RESOLUTION}
    )


def test_summarize_empty_run_is_zero() -> None:
    summary = summarize(Run())

    assert summary.passed_count == 0
    assert summary.failed_count == 0
    assert summary.failed == ()


def test_summarize_accepts_none() -> None:
    assert summarize(None).total == 0
