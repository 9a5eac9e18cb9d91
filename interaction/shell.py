"""Interactive menu around the diagnostics core."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from core.logging import LogLevel, log_event, logger
from diagnostics.aggregate import summarize
from diagnostics.models import Run, TestProfile
from diagnostics.runner import ProbeRunner, format_results
from remediation.executor import RemediationExecutor
from remediation.models import ActionOutcome, PlanStatus
from remediation.rules import RuleEngine
from reporting.html_report import export_html

MENU = """
Network Diagnostics
  1) Full test
  2) Basic test
  3) Auto-Fix (based on last run)
  4) Export last run to HTML
  5) Show last results
  0) Exit
"""


@dataclass(frozen=True)
class MenuOption:
    """A single menu entry."""

    key: str
    label: str
    handler: Callable[[], None]


class DiagnosticShell:
    """Menu loop holding the most recent run.

    The shell owns no diagnostic logic: it picks a profile, collects the
    domain, and hands the last :class:`Run` to the rule engine or the report
    exporter. Any error raised by a menu action is logged and the loop keeps
    going.
    """

    def __init__(
        self,
        runner: ProbeRunner,
        rule_engine: RuleEngine,
        executor: RemediationExecutor,
        *,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
        report_dir: Path = Path("reports"),
    ) -> None:
        self.runner = runner
        self.rule_engine = rule_engine
        self.executor = executor
        self._input = input_func
        self._output = output_func
        self._report_dir = report_dir
        self.last_run: Run | None = None
        self._options = {
            option.key: option
            for option in (
                MenuOption("1", "Full test", lambda: self.run_profile(TestProfile.FULL)),
                MenuOption("2", "Basic test", lambda: self.run_profile(TestProfile.BASIC)),
                MenuOption("3", "Auto-Fix", self.auto_fix),
                MenuOption("4", "Export HTML", self.export_report),
                MenuOption("5", "Show last results", self.show_last_results),
            )
        }

    def loop(self) -> None:
        """Run the menu until the user exits or input ends."""

        while True:
            self._output(MENU)
            try:
                choice = self._input("Select an option: ").strip()
            except EOFError:
                break
            if choice in {"0", "q", "quit", "exit"}:
                break
            option = self._options.get(choice)
            if option is None:
                self._output(f"Unknown option: {choice!r}")
                continue
            try:
                option.handler()
            except Exception as exc:  # noqa: BLE001 - keep the session alive
                logger.exception("Menu action %s failed", option.label)
                self._output(f"{option.label} failed: {exc}")

    def _ask(self, prompt: str) -> str:
        try:
            return self._input(prompt)
        except EOFError:
            return ""

    def run_profile(self, profile: TestProfile) -> Run:
        domain = self._ask(f"Domain to test [{self.runner.default_domain}]: ")
        run = self.runner.run(profile, domain)
        self.last_run = run
        self._output(format_results(run))

        if summarize(run).failed_count:
            answer = self._ask("Failures detected. Run Auto-Fix now? [y/N]: ").strip().lower()
            if answer in {"y", "yes"}:
                self.auto_fix()
        return run

    def auto_fix(self) -> list[ActionOutcome]:
        plan = self.rule_engine.plan(self.last_run)
        for warning in plan.warnings:
            log_event(warning, LogLevel.WARNING)
            self._output(f"Warning: {warning}")
        self._output(plan.message)
        if plan.status is not PlanStatus.READY:
            return []

        outcomes = self.executor.execute(plan)
        for outcome in outcomes:
            if outcome.success:
                self._output(f"[OK] {outcome.action.value}: {outcome.detail}")
            else:
                self._output(f"[FAILED] {outcome.action.value}: {outcome.error}")
        self._output("Run the test again to confirm the fixes.")
        return outcomes

    def export_report(self) -> Path | None:
        if self.last_run is None:
            self._output("No prior run to export.")
            return None
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        default_path = self._report_dir / f"netdiag_{stamp}.html"
        answer = self._ask(f"Report path [{default_path}]: ").strip()
        path = export_html(self.last_run, Path(answer) if answer else default_path)
        log_event(f"Report written to {path}")
        self._output(f"Report written to {path}")
        return path

    def show_last_results(self) -> None:
        if self.last_run is None:
            self._output("No prior run.")
            return
        self._output(format_results(self.last_run))
