"""Export a diagnostics run as a standalone HTML page."""

from __future__ import annotations

from html import escape
from pathlib import Path

from diagnostics.aggregate import summarize
from diagnostics.models import Run

_STYLE = """
body { font-family: Segoe UI, Helvetica, Arial, sans-serif; margin: 2em; color: #222; }
h1 { font-size: 1.5em; }
table { border-collapse: collapse; width: 100%; }
th, td { border: 1px solid #ccc; padding: 6px 10px; text-align: left; vertical-align: top; }
th { background: #f0f0f0; }
tr.pass td.status { color: #1a7f37; font-weight: bold; }
tr.fail td.status { color: #cf222e; font-weight: bold; }
.summary span { margin-right: 2em; }
"""


class HtmlReportExporter:
    """Render a run as an HTML document built from independent sections."""

    def __init__(self, run: Run, *, title: str = "Network Diagnostics Report") -> None:
        self.run = run
        self.title = title

    def export(self) -> str:
        sections = [
            self._header(),
            self._summary_section(),
            self._results_table(),
            self._footer(),
        ]
        return "\n".join(filter(None, sections))

    def _header(self) -> str:
        return (
            "<!DOCTYPE html>\n"
            "<html lang=\"en\">\n<head>\n<meta charset=\"utf-8\">\n"
            f"<title>{escape(self.title)}</title>\n<style>{_STYLE}</style>\n"
            "</head>\n<body>\n"
            f"<h1>{escape(self.title)}</h1>"
        )

    def _summary_section(self) -> str:
        summary = summarize(self.run)
        profile = self.run.profile.value if self.run.profile is not None else "Custom"
        return (
            "<div class=\"summary\">\n"
            f"<span>Profile: {escape(profile)}</span>\n"
            f"<span>Domain: {escape(self.run.domain)}</span>\n"
            f"<span>Started: {escape(self.run.started_at.isoformat(timespec='seconds'))}</span>\n"
            f"<span>Passed: {summary.passed_count}</span>\n"
            f"<span>Failed: {summary.failed_count}</span>\n"
            "</div>"
        )

    def _results_table(self) -> str:
        if len(self.run) == 0:
            return "<p>No results.</p>"
        rows = []
        for result in self.run:
            css = "pass" if result.success else "fail"
            rows.append(
                f"<tr class=\"{css}\">"
                f"<td>{escape(result.category.value)}</td>"
                f"<td class=\"status\">{result.status_label}</td>"
                f"<td>{escape(result.target)}</td>"
                f"<td>{escape(result.detail)}</td>"
                f"<td>{escape(result.timestamp.isoformat(timespec='seconds'))}</td>"
                "</tr>"
            )
        return (
            "<table>\n<thead><tr><th>Test</th><th>Status</th><th>Target</th>"
            "<th>Details</th><th>Time</th></tr></thead>\n<tbody>\n"
            + "\n".join(rows)
            + "\n</tbody>\n</table>"
        )

    def _footer(self) -> str:
        return "<p><small>Generated by netdiag</small></p>\n</body>\n</html>\n"


def export_html(run: Run, output_path: Path | str) -> Path:
    """Write ``run`` as HTML to ``output_path`` and return the resolved path."""

    path = Path(output_path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(HtmlReportExporter(run).export(), encoding="utf-8")
    return path
