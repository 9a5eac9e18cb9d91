"""Connectivity probes and the network primitives they use."""

from services.network_probes import (
    probe_adapter_state,
    probe_dns_resolution,
    probe_external_ip,
    probe_gateway_reachability,
    probe_web_access,
)

__all__ = [
    "probe_adapter_state",
    "probe_dns_resolution",
    "probe_external_ip",
    "probe_gateway_reachability",
    "probe_web_access",
]
