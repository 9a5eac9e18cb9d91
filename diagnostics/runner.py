"""Diagnostics runner utilities."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
import concurrent.futures
import functools

from core.logging import LogLevel, log_event, logger as LOGGER
from diagnostics.aggregate import summarize
from diagnostics.models import (
    DEFAULT_DOMAIN,
    NOT_APPLICABLE,
    ProbeCategory,
    ProbeResult,
    Run,
    TestProfile,
    utc_now,
)
from services import network_probes

CategoryProbe = Callable[[str], ProbeResult]


def format_results(results: Iterable[ProbeResult]) -> str:
    """Return a human-friendly diagnostics report."""

    results = list(results)
    summary = summarize(results)
    lines = ["Network diagnostics report", "-" * 60]
    for result in results:
        lines.append(f"[{result.status_label}] {result.category.value} ({result.target}): {result.detail}")
    lines.append("-" * 60)
    lines.append(f"Passed: {summary.passed_count}  Failed: {summary.failed_count}")
    return "\n".join(lines)


def run_diagnostics(probes: Iterable[tuple[ProbeCategory, Callable[[], ProbeResult]]]) -> list[ProbeResult]:
    """Run diagnostics probes and return results."""

    results: list[ProbeResult] = []
    for category, probe in probes:
        results.append(_invoke(category, probe))
    return results


def _invoke(category: ProbeCategory, probe: Callable[[], ProbeResult]) -> ProbeResult:
    try:
        result = probe()
    except Exception as exc:  # noqa: BLE001 - diagnostics must keep running
        LOGGER.exception("Probe failed: %s", category.value)
        result = ProbeResult(
            category=category,
            success=False,
            detail=f"Probe raised exception: {exc}",
            target=NOT_APPLICABLE,
        )
    log_event(
        f"{category.value} probe {'passed' if result.success else 'failed'}",
        LogLevel.INFO if result.success else LogLevel.WARNING,
        [result],
    )
    return result


def default_probes(settings: Mapping[str, object] | None = None) -> dict[ProbeCategory, CategoryProbe]:
    """Build the probe table for each category from diagnostics settings."""

    settings = settings or {}
    timeouts = dict(settings.get("timeouts") or {})  # type: ignore[arg-type]
    ip_cfg = dict(settings.get("external_ip") or {})  # type: ignore[arg-type]
    attempts = int(settings.get("gateway_echo_attempts", 2))  # type: ignore[arg-type]

    def adapter(_domain: str) -> ProbeResult:
        return network_probes.probe_adapter_state()

    def gateway(_domain: str) -> ProbeResult:
        return network_probes.probe_gateway_reachability(
            attempts=attempts,
            timeout_s=float(timeouts.get("ping_s", 2.0)),
        )

    def external_ip(_domain: str) -> ProbeResult:
        return network_probes.probe_external_ip(
            primary_url=str(ip_cfg.get("primary_url", network_probes.DEFAULT_PRIMARY_IP_URL)),
            fallback_url=str(ip_cfg.get("fallback_url", network_probes.DEFAULT_FALLBACK_IP_URL)),
            timeout_s=float(timeouts.get("external_ip_s", 5.0)),
        )

    def dns(domain: str) -> ProbeResult:
        return network_probes.probe_dns_resolution(
            domain,
            timeout_s=float(timeouts.get("dns_s", 3.0)),
        )

    def web(domain: str) -> ProbeResult:
        return network_probes.probe_web_access(
            network_probes.web_url_for(domain),
            head_timeout_s=float(timeouts.get("head_s", 5.0)),
            get_timeout_s=float(timeouts.get("get_s", 10.0)),
        )

    return {
        ProbeCategory.ADAPTER_STATE: adapter,
        ProbeCategory.GATEWAY_REACHABILITY: gateway,
        ProbeCategory.EXTERNAL_IP: external_ip,
        ProbeCategory.DNS_RESOLUTION: dns,
        ProbeCategory.WEB_ACCESS: web,
    }


class ProbeRunner:
    """Execute a test profile and collect its results into a :class:`Run`."""

    def __init__(
        self,
        probes: Mapping[ProbeCategory, CategoryProbe] | None = None,
        *,
        default_domain: str = DEFAULT_DOMAIN,
        parallel: bool = False,
    ) -> None:
        self._probes = dict(probes) if probes is not None else default_probes()
        self._default_domain = default_domain.strip() or DEFAULT_DOMAIN
        self._parallel = parallel

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> "ProbeRunner":
        diag_cfg = config.get("diagnostics") if isinstance(config, Mapping) else None
        if not isinstance(diag_cfg, Mapping):
            return cls()
        return cls(
            default_probes(diag_cfg),
            default_domain=str(diag_cfg.get("default_domain") or DEFAULT_DOMAIN),
            parallel=bool(diag_cfg.get("parallel", False)),
        )

    @property
    def default_domain(self) -> str:
        return self._default_domain

    def resolve_domain(self, domain: str | None) -> str:
        if domain is None or not domain.strip():
            return self._default_domain
        return domain.strip()

    def run(
        self,
        profile: TestProfile | str,
        domain: str | None = None,
        *,
        parallel: bool | None = None,
    ) -> Run:
        """Run every probe of ``profile`` in the fixed category order."""

        profile = TestProfile(profile)
        categories = profile.categories
        missing = [category.value for category in categories if category not in self._probes]
        if missing:
            raise ValueError(f"No probe registered for categories: {', '.join(missing)}")

        domain = self.resolve_domain(domain)
        parallel = self._parallel if parallel is None else parallel
        calls = [
            (category, functools.partial(self._probes[category], domain))
            for category in categories
        ]

        log_event(f"Starting {profile.value} test for {domain}")
        started_at = utc_now()
        if parallel and len(calls) > 1:
            with concurrent.futures.ThreadPoolExecutor(max_workers=len(calls)) as executor:
                results = list(executor.map(lambda call: _invoke(*call), calls))
        else:
            results = run_diagnostics(calls)

        run = Run(
            results=tuple(results),
            profile=profile,
            domain=domain,
            started_at=started_at,
            finished_at=utc_now(),
        )
        summary = summarize(run)
        log_event(
            f"{profile.value} test finished: {summary.passed_count} passed, {summary.failed_count} failed",
            LogLevel.INFO if summary.failed_count == 0 else LogLevel.WARNING,
        )
        return run
