"""Tests for diagnostics result models."""

from __future__ import annotations

import dataclasses

import pytest

from diagnostics.models import ProbeCategory, ProbeResult, Run, TestProfile


def test_probe_result_rejects_unknown_category() -> None:
    with pytest.raises(TypeError):
        ProbeResult(category="DnsResolution", success=True, detail="ok")  # type: ignore[arg-type]


def test_probe_result_rejects_non_bool_success() -> None:
    with pytest.raises(TypeError):
        ProbeResult(category=ProbeCategory.WEB_ACCESS, success=1, detail="ok")  # type: ignore[arg-type]


def test_probe_result_is_immutable_and_timestamped() -> None:
    result = ProbeResult(category=ProbeCategory.EXTERNAL_IP, success=False, detail="nope")

    assert result.target == "None"
    assert result.timestamp.tzinfo is not None
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.success = True  # type: ignore[misc]


def test_run_stores_results_as_tuple() -> None:
    results = [
        ProbeResult(category=ProbeCategory.ADAPTER_STATE, success=True, detail="up"),
        ProbeResult(category=ProbeCategory.WEB_ACCESS, success=False, detail="down"),
    ]
    run = Run(results=results, profile=TestProfile.FULL, domain="example.com")

    results.clear()
    assert isinstance(run.results, tuple)
    assert len(run) == 2
    assert [result.category for result in run] == [
        ProbeCategory.ADAPTER_STATE,
        ProbeCategory.WEB_ACCESS,
    ]


def test_profiles_keep_fixed_category_order() -> None:
    assert TestProfile.FULL.categories == (
        ProbeCategory.ADAPTER_STATE,
        ProbeCategory.GATEWAY_REACHABILITY,
        ProbeCategory.EXTERNAL_IP,
        ProbeCategory.DNS_RESOLUTION,
        ProbeCategory.WEB_ACCESS,
    )
    assert TestProfile.BASIC.categories == (
        ProbeCategory.GATEWAY_REACHABILITY,
        ProbeCategory.EXTERNAL_IP,
        ProbeCategory.DNS_RESOLUTION,
    )
