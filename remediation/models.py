"""Models for remediation plans and outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RemediationAction(str, Enum):
    """Automated fixes, listed in the order they are applied."""

    FLUSH_AND_REREGISTER_DNS = "FlushAndReregisterDns"
    RENEW_IP_CONFIGURATION = "RenewIpConfiguration"
    ADVISE_ADAPTER_RESTART = "AdviseAdapterRestart"

    @property
    def config_key(self) -> str:
        return ACTION_CONFIG_KEYS[self]


ACTION_CONFIG_KEYS: dict[RemediationAction, str] = {
    RemediationAction.FLUSH_AND_REREGISTER_DNS: "flush_and_reregister_dns",
    RemediationAction.RENEW_IP_CONFIGURATION: "renew_ip_configuration",
    RemediationAction.ADVISE_ADAPTER_RESTART: "advise_adapter_restart",
}


class PlanStatus(str, Enum):
    """Why a plan does or does not contain actions."""

    NO_PRIOR_RUN = "NoPriorRun"
    NOTHING_TO_REMEDIATE = "NothingToRemediate"
    READY = "Ready"


@dataclass(frozen=True)
class RemediationPlan:
    """Ordered actions selected for the failures of one run."""

    status: PlanStatus
    actions: tuple[RemediationAction, ...] = ()
    warnings: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "actions", tuple(self.actions))
        object.__setattr__(self, "warnings", tuple(self.warnings))

    @property
    def message(self) -> str:
        if self.status is PlanStatus.NO_PRIOR_RUN:
            return "No prior run: run a test before Auto-Fix"
        if self.status is PlanStatus.NOTHING_TO_REMEDIATE:
            return "Nothing to remediate: no remediable failures"
        return "Planned actions: " + ", ".join(action.value for action in self.actions)


@dataclass(frozen=True)
class ActionOutcome:
    """Result of applying one remediation action."""

    action: RemediationAction
    success: bool
    error: str | None = None
    detail: str = ""
