"""Rule engine mapping failed probe categories to remediation actions."""

from __future__ import annotations

from collections.abc import Mapping

from diagnostics.aggregate import summarize
from diagnostics.models import ProbeCategory, Run
from remediation.models import PlanStatus, RemediationAction, RemediationPlan

GATEWAY_POLICIES = ("strict", "lenient")

# Each rule fires when any of its categories failed. Order is plan order.
RULES: tuple[tuple[RemediationAction, frozenset[ProbeCategory]], ...] = (
    (
        RemediationAction.FLUSH_AND_REREGISTER_DNS,
        frozenset({ProbeCategory.DNS_RESOLUTION, ProbeCategory.WEB_ACCESS}),
    ),
    (
        RemediationAction.RENEW_IP_CONFIGURATION,
        frozenset(
            {
                ProbeCategory.GATEWAY_REACHABILITY,
                ProbeCategory.EXTERNAL_IP,
                ProbeCategory.WEB_ACCESS,
            }
        ),
    ),
    (
        RemediationAction.ADVISE_ADAPTER_RESTART,
        frozenset({ProbeCategory.ADAPTER_STATE}),
    ),
)


def failure_flags(failed: frozenset[ProbeCategory]) -> dict[ProbeCategory, bool]:
    """Return one flag per category, True when that category failed."""

    return {category: category in failed for category in ProbeCategory}


class RuleEngine:
    """Derive an ordered remediation plan from the failures of a run.

    ``gateway_failure_policy`` decides how an unreachable gateway is treated:
    ``"strict"`` lets it trigger IP renewal, ``"lenient"`` reports it as a
    warning only, since many working networks block ICMP to the gateway.
    """

    def __init__(self, *, gateway_failure_policy: str = "strict") -> None:
        if gateway_failure_policy not in GATEWAY_POLICIES:
            raise ValueError(f"Unknown gateway_failure_policy: {gateway_failure_policy!r}")
        self._gateway_failure_policy = gateway_failure_policy

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> "RuleEngine":
        remediation_cfg = config.get("remediation") if isinstance(config, Mapping) else None
        if not isinstance(remediation_cfg, Mapping):
            return cls()
        policy = str(remediation_cfg.get("gateway_failure_policy") or "strict")
        return cls(gateway_failure_policy=policy)

    @property
    def gateway_failure_policy(self) -> str:
        return self._gateway_failure_policy

    def plan(self, run: Run | None) -> RemediationPlan:
        if run is None or len(run) == 0:
            return RemediationPlan(status=PlanStatus.NO_PRIOR_RUN)

        summary = summarize(run)
        if summary.failed_count == 0:
            return RemediationPlan(status=PlanStatus.NOTHING_TO_REMEDIATE)

        failed = set(summary.failed_categories)
        warnings: list[str] = []
        if self._gateway_failure_policy == "lenient" and ProbeCategory.GATEWAY_REACHABILITY in failed:
            failed.discard(ProbeCategory.GATEWAY_REACHABILITY)
            warnings.append(
                "Gateway did not answer ICMP echo; treated as a warning "
                "(some networks block ping to the gateway)"
            )

        flags = failure_flags(frozenset(failed))
        actions = tuple(
            action
            for action, categories in RULES
            if any(flags[category] for category in categories)
        )
        if not actions:
            return RemediationPlan(status=PlanStatus.NOTHING_TO_REMEDIATE, warnings=tuple(warnings))
        return RemediationPlan(status=PlanStatus.READY, actions=actions, warnings=tuple(warnings))
