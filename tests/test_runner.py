"""Tests for the probe runner."""

from __future__ import annotations

import threading

import pytest

from diagnostics.aggregate import summarize
from diagnostics.models import ProbeCategory, ProbeResult, TestProfile
from diagnostics.runner import ProbeRunner, format_results, run_diagnostics


class _RecordingProbes:
    def __init__(self, failing: set[ProbeCategory] | None = None) -> None:
        self.failing = failing or set()
        self.calls: list[tuple[ProbeCategory, str]] = []
        self._lock = threading.Lock()

    def table(self) -> dict[ProbeCategory, object]:
        return {category: self._make(category) for category in ProbeCategory}

    def _make(self, category: ProbeCategory):
        def _probe(domain: str) -> ProbeResult:
            with self._lock:
                self.calls.append((category, domain))
            return ProbeResult(
                category=category,
                success=category not in self.failing,
                detail="fake",
                target=domain,
            )

        return _probe


def test_full_profile_runs_every_category_in_order() -> None:
    probes = _RecordingProbes()
    runner = ProbeRunner(probes.table())

    run = runner.run(TestProfile.FULL, "example.com")

    assert [result.category for result in run] == list(TestProfile.FULL.categories)
    assert [call[0] for call in probes.calls] == list(TestProfile.FULL.categories)
    assert run.profile is TestProfile.FULL
    assert run.domain == "example.com"
    assert run.finished_at >= run.started_at


def test_basic_profile_runs_subset() -> None:
    probes = _RecordingProbes()
    runner = ProbeRunner(probes.table())

    run = runner.run("Basic", "example.com")

    assert [result.category for result in run] == [
        ProbeCategory.GATEWAY_REACHABILITY,
        ProbeCategory.EXTERNAL_IP,
        ProbeCategory.DNS_RESOLUTION,
    ]


@pytest.mark.parametrize("domain", [None, "", "   "])
def test_blank_domain_uses_default(domain) -> None:
    probes = _RecordingProbes()
    runner = ProbeRunner(probes.table())

    run = runner.run(TestProfile.BASIC, domain)

    assert run.domain == "google.com"
    assert {call[1] for call in probes.calls} == {"google.com"}


def test_parallel_run_matches_sequential_outcomes() -> None:
    failing = {ProbeCategory.DNS_RESOLUTION, ProbeCategory.WEB_ACCESS}
    sequential = ProbeRunner(_RecordingProbes(failing).table()).run(TestProfile.FULL, "example.com")
    parallel = ProbeRunner(_RecordingProbes(failing).table()).run(
        TestProfile.FULL, "example.com", parallel=True
    )

    assert [(r.category, r.success) for r in parallel] == [(r.category, r.success) for r in sequential]
    assert summarize(parallel).failed_categories == summarize(sequential).failed_categories


def test_raising_probe_becomes_failure_result() -> None:
    table = _RecordingProbes().table()

    def _broken(domain: str) -> ProbeResult:
        raise RuntimeError("socket exploded")

    table[ProbeCategory.EXTERNAL_IP] = _broken
    run = ProbeRunner(table).run(TestProfile.BASIC, "example.com")

    external = run.results[1]
    assert external.category is ProbeCategory.EXTERNAL_IP
    assert external.success is False
    assert "socket exploded" in external.detail
    assert len(run) == 3


def test_unknown_profile_is_rejected() -> None:
    with pytest.raises(ValueError):
        ProbeRunner(_RecordingProbes().table()).run("Extended", "example.com")


def test_missing_probe_aborts_before_running() -> None:
    probes = _RecordingProbes()
    table = probes.table()
    del table[ProbeCategory.WEB_ACCESS]

    with pytest.raises(ValueError):
        ProbeRunner(table).run(TestProfile.FULL, "example.com")
    assert probes.calls == []


def test_each_run_is_a_new_value() -> None:
    runner = ProbeRunner(_RecordingProbes().table())

    first = runner.run(TestProfile.BASIC, "a.example")
    second = runner.run(TestProfile.BASIC, "b.example")

    assert first is not second
    assert first.domain == "a.example"
    assert second.domain == "b.example"


def test_from_config_reads_diagnostics_section() -> None:
    runner = ProbeRunner.from_config({"diagnostics": {"default_domain": "example.org", "parallel": True}})

    assert runner.default_domain == "example.org"
    assert runner.resolve_domain(" ") == "example.org"


def test_run_diagnostics_and_format_results() -> None:
    results = run_diagnostics(
        [
            (
                ProbeCategory.ADAPTER_STATE,
                lambda: ProbeResult(category=ProbeCategory.ADAPTER_STATE, success=True, detail="eth0 up"),
            ),
        ]
    )

    report = format_results(results)
    assert "[PASS] AdapterState" in report
    assert "Passed: 1  Failed: 0" in report
