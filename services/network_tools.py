"""Low-level network primitives used by the connectivity probes.

Every function here does exactly one bounded operation against the OS or the
network and raises on failure; converting failures into probe results is the
job of :mod:`services.network_probes`.
"""

from __future__ import annotations

from dataclasses import dataclass
import ipaddress
from pathlib import Path
import shutil
import socket
import struct
import subprocess
import sys
import threading
from typing import Any
from urllib import error, request

import psutil

USER_AGENT = "netdiag/1.0"
PROC_ROUTE_PATH = Path("/proc/net/route")

_LOOPBACK_PREFIXES = ("lo", "loopback")
_ADDRESS_FAMILIES = {socket.AF_INET: "A", socket.AF_INET6: "AAAA"}


@dataclass(frozen=True)
class InterfaceState:
    """Operational state of one local network interface."""

    name: str
    is_up: bool


@dataclass(frozen=True)
class DnsRecord:
    """A single resolved record."""

    record_type: str
    value: str

    @property
    def is_address(self) -> bool:
        return self.record_type in {"A", "AAAA"}


def interface_states() -> list[InterfaceState]:
    """Return the state of every non-loopback interface, sorted by name."""

    stats = psutil.net_if_stats()
    states = [
        InterfaceState(name=name, is_up=bool(stat.isup))
        for name, stat in stats.items()
        if not name.lower().startswith(_LOOPBACK_PREFIXES)
    ]
    return sorted(states, key=lambda state: state.name)


def _parse_proc_route(text: str) -> list[str]:
    gateways: list[str] = []
    for line in text.splitlines()[1:]:
        fields = line.split()
        if len(fields) < 4:
            continue
        destination, gateway_hex, flags = fields[1], fields[2], int(fields[3], 16)
        # RTF_UP | RTF_GATEWAY
        if destination != "00000000" or flags & 0x3 != 0x3:
            continue
        gateways.append(socket.inet_ntoa(struct.pack("<L", int(gateway_hex, 16))))
    return gateways


def _parse_netstat(text: str) -> list[str]:
    gateways: list[str] = []
    for line in text.splitlines():
        fields = line.split()
        if not fields:
            continue
        if fields[0] == "default" and len(fields) >= 2:
            candidate = fields[1]
        elif fields[0] == "0.0.0.0" and len(fields) >= 3 and fields[1] == "0.0.0.0":
            # Windows route table: destination, netmask, gateway, interface, metric
            candidate = fields[2]
        else:
            continue
        try:
            ipaddress.ip_address(candidate.split("%")[0])
        except ValueError:
            continue
        gateways.append(candidate)
    return gateways


def default_gateways(timeout_s: float = 5.0) -> list[str]:
    """Return configured default gateways, deduplicated in table order."""

    if PROC_ROUTE_PATH.exists():
        gateways = _parse_proc_route(PROC_ROUTE_PATH.read_text(encoding="utf-8"))
    else:
        netstat = shutil.which("netstat")
        if netstat is None:
            raise FileNotFoundError("netstat not available to read the routing table")
        completed = subprocess.run(
            [netstat, "-rn"],
            capture_output=True,
            text=True,
            timeout=timeout_s,
            check=True,
        )
        gateways = _parse_netstat(completed.stdout)
    return list(dict.fromkeys(gateways))


def ping_command(host: str, timeout_s: float) -> list[str]:
    if sys.platform.startswith("win"):
        return ["ping", "-n", "1", "-w", str(int(timeout_s * 1000)), host]
    if sys.platform == "darwin":
        return ["ping", "-c", "1", "-t", str(max(1, int(timeout_s))), host]
    return ["ping", "-c", "1", "-W", str(max(1, int(timeout_s))), host]


def ping_host(host: str, timeout_s: float = 2.0) -> bool:
    """Send one ICMP echo via the system ping; True when a reply arrived."""

    try:
        completed = subprocess.run(
            ping_command(host, timeout_s),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=timeout_s + 1.0,
        )
    except subprocess.TimeoutExpired:
        return False
    return completed.returncode == 0


def http_status(url: str, method: str = "GET", timeout_s: float = 5.0) -> int:
    """Issue a request and return the final status code.

    Redirects are followed. 4xx/5xx answers are returned as status codes
    rather than raised; transport errors propagate.
    """

    req = request.Request(url, method=method, headers={"User-Agent": USER_AGENT})
    try:
        with request.urlopen(req, timeout=timeout_s) as response:
            return int(response.status)
    except error.HTTPError as exc:
        return int(exc.code)


def fetch_text(url: str, timeout_s: float = 5.0) -> str:
    """GET a URL and return the stripped body text."""

    req = request.Request(url, headers={"User-Agent": USER_AGENT})
    with request.urlopen(req, timeout=timeout_s) as response:
        return response.read().decode("utf-8", errors="replace").strip()


def _getaddrinfo_records(domain: str) -> list[DnsRecord]:
    records: list[DnsRecord] = []
    for family, _type, _proto, canonname, sockaddr in socket.getaddrinfo(
        domain, None, proto=socket.IPPROTO_TCP, flags=socket.AI_CANONNAME
    ):
        record_type = _ADDRESS_FAMILIES.get(family)
        if record_type is None:
            records.append(DnsRecord(record_type=str(family), value=str(sockaddr)))
        else:
            records.append(DnsRecord(record_type=record_type, value=str(sockaddr[0])))
        if canonname and canonname != domain:
            records.append(DnsRecord(record_type="CNAME", value=canonname))
    return list(dict.fromkeys(records))


def resolve_records(domain: str, timeout_s: float = 3.0) -> list[DnsRecord]:
    """Resolve a domain, waiting at most ``timeout_s`` seconds.

    The system resolver has no timeout of its own, so the lookup runs on a
    daemon thread. A timed-out lookup raises :class:`TimeoutError` and the
    thread is abandoned without holding up interpreter exit.
    """

    outcome: dict[str, Any] = {}

    def _lookup() -> None:
        try:
            outcome["records"] = _getaddrinfo_records(domain)
        except Exception as exc:  # noqa: BLE001 - re-raised on the caller's thread
            outcome["error"] = exc

    worker = threading.Thread(target=_lookup, name=f"dns-{domain}", daemon=True)
    worker.start()
    worker.join(timeout_s)
    if worker.is_alive():
        raise TimeoutError(f"DNS lookup for {domain} timed out after {timeout_s:g}s")
    if "error" in outcome:
        raise outcome["error"]
    return outcome["records"]
