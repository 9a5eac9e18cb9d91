"""Tests for the interactive diagnostics shell."""

from __future__ import annotations

import subprocess

from diagnostics.models import ProbeCategory, ProbeResult
from diagnostics.runner import ProbeRunner
from interaction.shell import DiagnosticShell
from remediation.executor import RemediationExecutor
from remediation.models import RemediationAction
from remediation.rules import RuleEngine


def _probes(failing: set[ProbeCategory]):
    def _make(category: ProbeCategory):
        return lambda domain: ProbeResult(
            category=category,
            success=category not in failing,
            detail="fake",
            target=domain,
        )

    return {category: _make(category) for category in ProbeCategory}


def _shell(answers: list[str], failing: set[ProbeCategory] | None = None, commands=None):
    output: list[str] = []
    ran: list[list[str]] = []
    replies = iter(answers)

    def _input(prompt: str) -> str:
        try:
            return next(replies)
        except StopIteration:
            raise EOFError from None

    def _run_command(command):
        ran.append(list(command))
        return subprocess.CompletedProcess(list(command), 0, stdout="", stderr="")

    shell = DiagnosticShell(
        ProbeRunner(_probes(failing or set())),
        RuleEngine(),
        RemediationExecutor(
            commands if commands is not None else {RemediationAction.FLUSH_AND_REREGISTER_DNS: [["flush"]]},
            run_command=_run_command,
        ),
        input_func=_input,
        output_func=output.append,
    )
    return shell, output, ran


def test_auto_fix_without_run_reports_no_prior_run() -> None:
    shell, output, ran = _shell(["3", "0"])

    shell.loop()

    assert any("No prior run" in line for line in output)
    assert ran == []


def test_full_test_with_dns_failure_then_auto_fix() -> None:
    shell, output, ran = _shell(["1", "", "y", "0"], failing={ProbeCategory.DNS_RESOLUTION})

    shell.loop()

    assert shell.last_run is not None
    assert shell.last_run.domain == "google.com"
    assert len(shell.last_run) == 5
    assert ran == [["flush"]]
    assert any("[OK] FlushAndReregisterDns" in line for line in output)


def test_clean_run_then_auto_fix_has_nothing_to_remediate() -> None:
    shell, output, ran = _shell(["2", "example.com", "3", "0"])

    shell.loop()

    assert shell.last_run.domain == "example.com"
    assert any("Nothing to remediate" in line for line in output)
    assert ran == []


def test_new_run_replaces_previous_run() -> None:
    shell, _output, _ran = _shell(["1", "a.example", "2", "b.example", "0"])

    shell.loop()

    assert shell.last_run.domain == "b.example"
    assert len(shell.last_run) == 3


def test_failing_action_does_not_end_session(monkeypatch) -> None:
    shell, output, _ran = _shell(["2", "", "5", "0"])

    def _broken(*args, **kwargs):
        raise RuntimeError("runner crashed")

    monkeypatch.setattr(shell.runner, "run", _broken)
    shell.loop()

    assert any("runner crashed" in line for line in output)
    assert any("No prior run." == line for line in output)


def test_export_report_writes_html(tmp_path) -> None:
    report_path = tmp_path / "out.html"
    shell, output, _ran = _shell(["2", "", "4", str(report_path), "0"])

    shell.loop()

    assert report_path.exists()
    assert any(str(report_path) in line for line in output)
