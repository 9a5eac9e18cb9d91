"""Network diagnostics: result models, aggregation and the probe runner."""

from diagnostics.aggregate import RunSummary, summarize
from diagnostics.models import ProbeCategory, ProbeResult, Run, TestProfile
from diagnostics.runner import ProbeRunner, format_results, run_diagnostics

__all__ = [
    "ProbeCategory",
    "ProbeResult",
    "ProbeRunner",
    "Run",
    "RunSummary",
    "TestProfile",
    "format_results",
    "run_diagnostics",
    "summarize",
]
