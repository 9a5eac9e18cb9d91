"""Tests for HTML report export."""

from __future__ import annotations

from diagnostics.models import ProbeCategory, ProbeResult, Run, TestProfile
from reporting.html_report import HtmlReportExporter, export_html


def _run() -> Run:
    return Run(
        results=(
            ProbeResult(category=ProbeCategory.DNS_RESOLUTION, success=True, detail="Resolved", target="example.com"),
            ProbeResult(
                category=ProbeCategory.WEB_ACCESS,
                success=False,
                detail="GET failed: <urlopen error refused>",
                target="https://example.com",
            ),
        ),
        profile=TestProfile.FULL,
        domain="example.com",
    )


def test_export_writes_escaped_table(tmp_path) -> None:
    path = export_html(_run(), tmp_path / "reports" / "run.html")

    html = path.read_text(encoding="utf-8")
    assert html.startswith("<!DOCTYPE html>")
    assert "Passed: 1" in html
    assert "Failed: 1" in html
    assert "&lt;urlopen error refused&gt;" in html
    assert "<urlopen" not in html
    assert html.count("<tr class=") == 2


def test_empty_run_renders_placeholder() -> None:
    html = HtmlReportExporter(Run()).export()

    assert "No results." in html
    assert "Profile: Custom" in html
