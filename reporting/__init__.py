"""Report rendering for diagnostics runs."""

from reporting.html_report import HtmlReportExporter, export_html

__all__ = ["HtmlReportExporter", "export_html"]
