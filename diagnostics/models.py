"""Models for network diagnostics results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Iterator


class ProbeCategory(str, Enum):
    """Connectivity check categories, in run order."""

    ADAPTER_STATE = "AdapterState"
    GATEWAY_REACHABILITY = "GatewayReachability"
    EXTERNAL_IP = "ExternalIP"
    DNS_RESOLUTION = "DnsResolution"
    WEB_ACCESS = "WebAccess"


class TestProfile(str, Enum):
    """Named selection of probe categories."""

    __test__ = False

    FULL = "Full"
    BASIC = "Basic"

    @property
    def categories(self) -> tuple[ProbeCategory, ...]:
        return PROFILE_CATEGORIES[self]


PROFILE_CATEGORIES: dict[TestProfile, tuple[ProbeCategory, ...]] = {
    TestProfile.FULL: tuple(ProbeCategory),
    TestProfile.BASIC: (
        ProbeCategory.GATEWAY_REACHABILITY,
        ProbeCategory.EXTERNAL_IP,
        ProbeCategory.DNS_RESOLUTION,
    ),
}

NOT_APPLICABLE = "None"
DEFAULT_DOMAIN = "google.com"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ProbeResult:
    """Result for a single probe invocation."""

    category: ProbeCategory
    success: bool
    detail: str
    target: str = NOT_APPLICABLE
    timestamp: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if not isinstance(self.category, ProbeCategory):
            raise TypeError(f"Unknown probe category: {self.category!r}")
        if not isinstance(self.success, bool):
            raise TypeError(f"success must be a bool, got {type(self.success).__name__}")

    @property
    def status_label(self) -> str:
        return "PASS" if self.success else "FAIL"


@dataclass(frozen=True)
class Run:
    """Ordered results from one invocation of the probe runner."""

    results: tuple[ProbeResult, ...] = ()
    profile: TestProfile | None = None
    domain: str = ""
    started_at: datetime = field(default_factory=utc_now)
    finished_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        # Accept any iterable but always store a tuple.
        object.__setattr__(self, "results", tuple(self.results))

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[ProbeResult]:
        return iter(self.results)

    @property
    def duration_s(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()
