"""Connectivity probes producing one :class:`ProbeResult` each."""

from __future__ import annotations

from collections.abc import Callable, Sequence
import functools
from typing import Any, TypeVar
from urllib.parse import urlsplit

from diagnostics.models import DEFAULT_DOMAIN, NOT_APPLICABLE, ProbeCategory, ProbeResult
from services.network_tools import (
    DnsRecord,
    InterfaceState,
    default_gateways,
    fetch_text,
    http_status,
    interface_states,
    ping_host,
    resolve_records,
)

DEFAULT_PRIMARY_IP_URL = "https://api.ipify.org"
DEFAULT_FALLBACK_IP_URL = "https://ifconfig.me/ip"

ProbeFunc = TypeVar("ProbeFunc", bound=Callable[..., ProbeResult])


def total_probe(category: ProbeCategory) -> Callable[[ProbeFunc], ProbeFunc]:
    """Convert any exception escaping a probe into a failure result."""

    def decorator(func: ProbeFunc) -> ProbeFunc:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> ProbeResult:
            try:
                return func(*args, **kwargs)
            except Exception as exc:  # noqa: BLE001 - probe should not raise
                target = args[0] if args else kwargs.get("domain", kwargs.get("url"))
                if not isinstance(target, str) or not target:
                    target = NOT_APPLICABLE
                return ProbeResult(
                    category=category,
                    success=False,
                    detail=f"Probe raised exception: {exc}",
                    target=target,
                )

        return wrapper  # type: ignore[return-value]

    return decorator


def web_url_for(domain: str) -> str:
    """Return the URL checked by the web access probe for a domain."""

    if "://" in domain:
        return domain
    return f"https://{domain}"


@total_probe(ProbeCategory.ADAPTER_STATE)
def probe_adapter_state(
    *,
    interfaces: Callable[[], Sequence[InterfaceState]] = interface_states,
) -> ProbeResult:
    """Probe local network adapters for at least one active interface."""

    states = list(interfaces())
    if not states:
        return ProbeResult(
            category=ProbeCategory.ADAPTER_STATE,
            success=False,
            detail="No network interfaces found",
        )

    active = [state.name for state in states if state.is_up]
    if active:
        return ProbeResult(
            category=ProbeCategory.ADAPTER_STATE,
            success=True,
            detail=f"Active adapters: {', '.join(active)}",
            target=", ".join(active),
        )

    listing = ", ".join(f"{state.name}={'up' if state.is_up else 'down'}" for state in states)
    return ProbeResult(
        category=ProbeCategory.ADAPTER_STATE,
        success=False,
        detail=f"No active adapters: {listing}",
        target=", ".join(state.name for state in states),
    )


@total_probe(ProbeCategory.GATEWAY_REACHABILITY)
def probe_gateway_reachability(
    *,
    gateways: Callable[[], Sequence[str]] = default_gateways,
    ping: Callable[[str, float], bool] = ping_host,
    attempts: int = 2,
    timeout_s: float = 2.0,
) -> ProbeResult:
    """Probe every default gateway with up to ``attempts`` echo requests."""

    configured = list(dict.fromkeys(gateways()))
    if not configured:
        return ProbeResult(
            category=ProbeCategory.GATEWAY_REACHABILITY,
            success=False,
            detail="No default gateway configured",
        )

    reachability: dict[str, bool] = {}
    for gateway in configured:
        reachability[gateway] = any(ping(gateway, timeout_s) for _ in range(max(1, attempts)))

    target = ", ".join(configured)
    if all(reachability.values()):
        return ProbeResult(
            category=ProbeCategory.GATEWAY_REACHABILITY,
            success=True,
            detail=f"All gateways reachable: {target}",
            target=target,
        )

    listing = ", ".join(f"{gateway}={reachable}" for gateway, reachable in reachability.items())
    return ProbeResult(
        category=ProbeCategory.GATEWAY_REACHABILITY,
        success=False,
        detail=f"Gateway reachability: {listing}",
        target=target,
    )


@total_probe(ProbeCategory.EXTERNAL_IP)
def probe_external_ip(
    *,
    primary_url: str = DEFAULT_PRIMARY_IP_URL,
    fallback_url: str = DEFAULT_FALLBACK_IP_URL,
    fetch: Callable[[str, float], str] = fetch_text,
    timeout_s: float = 5.0,
) -> ProbeResult:
    """Look up the public IP, trying one fallback service after the primary."""

    for url in (primary_url, fallback_url):
        try:
            address = (fetch(url, timeout_s) or "").strip()
        except Exception:  # noqa: BLE001 - try the fallback service
            continue
        if address:
            service = urlsplit(url).hostname or url
            return ProbeResult(
                category=ProbeCategory.EXTERNAL_IP,
                success=True,
                detail=f"External IP: {address} (via {service})",
                target=address,
            )

    return ProbeResult(
        category=ProbeCategory.EXTERNAL_IP,
        success=False,
        detail="Unable to retrieve external IP.",
    )


@total_probe(ProbeCategory.DNS_RESOLUTION)
def probe_dns_resolution(
    domain: str = DEFAULT_DOMAIN,
    *,
    resolver: Callable[[str, float], Sequence[DnsRecord]] = resolve_records,
    timeout_s: float = 3.0,
) -> ProbeResult:
    """Resolve ``domain`` and pass when at least one A/AAAA record comes back."""

    records = list(resolver(domain, timeout_s))
    addresses = [record.value for record in records if record.is_address]
    if addresses:
        return ProbeResult(
            category=ProbeCategory.DNS_RESOLUTION,
            success=True,
            detail=f"Resolved to {', '.join(addresses)}",
            target=domain,
        )

    if records:
        types = ", ".join(sorted({record.record_type for record in records}))
        detail = f"No address records returned (got non-address records: {types})"
    else:
        detail = "No records returned"
    return ProbeResult(
        category=ProbeCategory.DNS_RESOLUTION,
        success=False,
        detail=detail,
        target=domain,
    )


def _in_success_range(status: int) -> bool:
    return 200 <= status < 400


@total_probe(ProbeCategory.WEB_ACCESS)
def probe_web_access(
    url: str = web_url_for(DEFAULT_DOMAIN),
    *,
    fetch: Callable[[str, str, float], int] = http_status,
    head_timeout_s: float = 5.0,
    get_timeout_s: float = 10.0,
) -> ProbeResult:
    """HEAD the URL, falling back to a single GET when HEAD does not succeed."""

    head_note = ""
    try:
        status = fetch(url, "HEAD", head_timeout_s)
        if _in_success_range(status):
            return ProbeResult(
                category=ProbeCategory.WEB_ACCESS,
                success=True,
                detail=f"HTTP {status} (HEAD)",
                target=url,
            )
        head_note = f"HEAD returned {status}"
    except Exception as exc:  # noqa: BLE001 - fall back to GET
        head_note = f"HEAD failed: {exc}"

    try:
        status = fetch(url, "GET", get_timeout_s)
    except Exception as exc:  # noqa: BLE001 - probe should not raise
        return ProbeResult(
            category=ProbeCategory.WEB_ACCESS,
            success=False,
            detail=f"{head_note}; GET failed: {exc}",
            target=url,
        )

    return ProbeResult(
        category=ProbeCategory.WEB_ACCESS,
        success=_in_success_range(status),
        detail=f"HTTP {status} (GET); {head_note}",
        target=url,
    )
