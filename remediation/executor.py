"""Apply remediation plans one action at a time."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
import subprocess
import sys

from core.logging import LogLevel, log_event
from remediation.models import ActionOutcome, RemediationAction, RemediationPlan
from services.network_tools import interface_states

Command = Sequence[str]
CommandRunner = Callable[[Command], subprocess.CompletedProcess]

ADAPTER_RESTART_ADVICE = (
    "Network adapter is down: disable and re-enable it, or check the cable or "
    "Wi-Fi connection"
)

_WINDOWS_COMMANDS: dict[RemediationAction, list[list[str]]] = {
    RemediationAction.FLUSH_AND_REREGISTER_DNS: [
        ["ipconfig", "/flushdns"],
        ["ipconfig", "/registerdns"],
    ],
    RemediationAction.RENEW_IP_CONFIGURATION: [
        ["ipconfig", "/release"],
        ["ipconfig", "/renew"],
    ],
}

_DARWIN_COMMANDS: dict[RemediationAction, list[list[str]]] = {
    RemediationAction.FLUSH_AND_REREGISTER_DNS: [
        ["dscacheutil", "-flushcache"],
        ["killall", "-HUP", "mDNSResponder"],
    ],
}

_LINUX_COMMANDS: dict[RemediationAction, list[list[str]]] = {
    RemediationAction.FLUSH_AND_REREGISTER_DNS: [
        ["resolvectl", "flush-caches"],
    ],
    RemediationAction.RENEW_IP_CONFIGURATION: [
        ["dhclient", "-r"],
        ["dhclient"],
    ],
}


def darwin_dhcp_interface() -> str:
    """Return the first active ``en*`` interface, falling back to ``en0``."""

    for state in interface_states():
        if state.is_up and state.name.startswith("en"):
            return state.name
    return "en0"


def platform_commands(platform: str | None = None) -> dict[RemediationAction, list[list[str]]]:
    """Return the default command table for ``platform`` (``sys.platform``)."""

    platform = platform or sys.platform
    if platform.startswith("win"):
        table = _WINDOWS_COMMANDS
    elif platform == "darwin":
        table = dict(_DARWIN_COMMANDS)
        table[RemediationAction.RENEW_IP_CONFIGURATION] = [
            ["ipconfig", "set", darwin_dhcp_interface(), "DHCP"],
        ]
    else:
        table = _LINUX_COMMANDS
    return {action: [list(command) for command in commands] for action, commands in table.items()}


def _run_command(command: Command) -> subprocess.CompletedProcess:
    return subprocess.run(list(command), capture_output=True, text=True)


class RemediationExecutor:
    """Run each planned action in order, never letting one failure stop the rest."""

    def __init__(
        self,
        commands: Mapping[RemediationAction, Sequence[Command]] | None = None,
        *,
        run_command: CommandRunner = _run_command,
    ) -> None:
        self._commands = dict(commands) if commands is not None else platform_commands()
        self._run_command = run_command

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> "RemediationExecutor":
        commands = platform_commands()
        remediation_cfg = config.get("remediation") if isinstance(config, Mapping) else None
        overrides = remediation_cfg.get("commands") if isinstance(remediation_cfg, Mapping) else None
        for action in RemediationAction:
            if isinstance(overrides, Mapping) and action.config_key in overrides:
                commands[action] = [list(command) for command in overrides[action.config_key]]
        return cls(commands)

    def execute(self, plan: RemediationPlan) -> list[ActionOutcome]:
        outcomes: list[ActionOutcome] = []
        for action in plan.actions:
            outcome = self.apply(action)
            outcomes.append(outcome)
            if outcome.success:
                log_event(f"{action.value}: {outcome.detail}", LogLevel.INFO)
            else:
                log_event(f"{action.value} failed: {outcome.error}", LogLevel.ERROR)
        return outcomes

    def apply(self, action: RemediationAction) -> ActionOutcome:
        """Apply a single action and capture its outcome."""

        if action is RemediationAction.ADVISE_ADAPTER_RESTART:
            return ActionOutcome(action=action, success=True, detail=ADAPTER_RESTART_ADVICE)

        commands = self._commands.get(action) or []
        if not commands:
            return ActionOutcome(
                action=action,
                success=False,
                error=f"No commands configured for {action.value}",
            )

        completed_steps: list[str] = []
        for command in commands:
            command_text = " ".join(command)
            try:
                completed = self._run_command(command)
            except Exception as exc:  # noqa: BLE001 - one bad command must not stop the batch
                return ActionOutcome(
                    action=action,
                    success=False,
                    error=f"{command_text}: {exc}",
                    detail="; ".join(completed_steps),
                )
            if completed.returncode != 0:
                output = (completed.stderr or completed.stdout or "").strip()
                reason = output.splitlines()[0] if output else f"exit code {completed.returncode}"
                return ActionOutcome(
                    action=action,
                    success=False,
                    error=f"{command_text}: {reason}",
                    detail="; ".join(completed_steps),
                )
            completed_steps.append(command_text)

        return ActionOutcome(action=action, success=True, detail="ran " + "; ".join(completed_steps))
