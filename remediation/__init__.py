"""Auto-Fix: remediation planning and execution."""

from remediation.executor import RemediationExecutor
from remediation.models import ActionOutcome, PlanStatus, RemediationAction, RemediationPlan
from remediation.rules import RuleEngine

__all__ = [
    "ActionOutcome",
    "PlanStatus",
    "RemediationAction",
    "RemediationExecutor",
    "RemediationPlan",
    "RuleEngine",
]
