"""Command-line entry point for netdiag."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

from config import ConfigController
from core.logging import LogLevel, enable_file_logging, log_event, logger, set_level
from diagnostics.aggregate import summarize
from diagnostics.models import TestProfile
from diagnostics.runner import ProbeRunner, format_results
from interaction.shell import DiagnosticShell
from remediation.executor import RemediationExecutor
from remediation.models import PlanStatus
from remediation.rules import RuleEngine
from reporting.html_report import export_html

_PROFILES = {"full": TestProfile.FULL, "basic": TestProfile.BASIC}


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Raw command-line arguments.

    Returns:
        Parsed arguments namespace.
    """

    parser = argparse.ArgumentParser(
        description="Run network connectivity diagnostics and optional Auto-Fix."
    )
    parser.add_argument(
        "--profile",
        choices=sorted(_PROFILES),
        help="Run this test profile once and exit (default: interactive menu).",
    )
    parser.add_argument("--domain", type=str, default=None, help="Domain for DNS and web checks.")
    parser.add_argument(
        "--parallel",
        action="store_true",
        default=None,
        help="Run probes concurrently.",
    )
    parser.add_argument("--fix", action="store_true", help="Apply Auto-Fix after the run.")
    parser.add_argument("--report", type=Path, default=None, help="Write an HTML report here.")
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Start the interactive menu even when --profile is given.",
    )
    parser.add_argument("--log-file", type=Path, default=None, help="Also log to this file.")
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Directory holding default.yaml and override.yaml.",
    )
    return parser.parse_args(argv)


def run_once(
    args: argparse.Namespace,
    runner: ProbeRunner,
    rule_engine: RuleEngine,
    executor: RemediationExecutor,
) -> int:
    """Run a single profile non-interactively and return an exit code."""

    run = runner.run(_PROFILES[args.profile], args.domain, parallel=args.parallel)
    print(format_results(run))

    if args.report is not None:
        try:
            path = export_html(run, args.report)
        except OSError as exc:
            log_event(f"Report export failed: {exc}", LogLevel.ERROR)
        else:
            log_event(f"Report written to {path}")

    if args.fix:
        plan = rule_engine.plan(run)
        for warning in plan.warnings:
            log_event(warning, LogLevel.WARNING)
        print(plan.message)
        if plan.status is PlanStatus.READY:
            for outcome in executor.execute(plan):
                status = "OK" if outcome.success else "FAILED"
                print(f"[{status}] {outcome.action.value}: {outcome.error or outcome.detail}")

    return 1 if summarize(run).failed_count else 0


def main(argv: list[str] | None = None) -> int:
    """Application entry point.

    Args:
        argv: Optional list of command-line arguments.

    Returns:
        Process exit code.
    """

    if argv is None:
        argv = sys.argv[1:]

    args = parse_args(argv)
    config = ConfigController.get_instance(args.config_dir).get_config()
    set_level(config.get("logging_level", "INFO"))

    log_file = args.log_file or config.get("log_file")
    if log_file:
        enable_file_logging(Path(log_file))
        logger.info("Writing logs to %s", log_file)

    runner = ProbeRunner.from_config(config)
    rule_engine = RuleEngine.from_config(config)
    executor = RemediationExecutor.from_config(config)

    if args.profile and not args.interactive:
        return run_once(args, runner, rule_engine, executor)

    shell = DiagnosticShell(runner, rule_engine, executor)
    try:
        shell.loop()
    except KeyboardInterrupt:
        logger.info("Program terminated by user")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
