"""Configuration controller for YAML-based settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from remediation.models import ACTION_CONFIG_KEYS


@dataclass(frozen=True)
class ConfigPaths:
    """Filesystem paths for configuration files."""

    config_dir: Path
    config_file: Path
    override_file: Path


class ConfigController:
    """Singleton controller for loading configuration."""

    _instance: "ConfigController | None" = None

    def __init__(self, config_file: str = "default.yaml", config_dir: Path | None = None) -> None:
        if ConfigController._instance is not None:
            raise RuntimeError("You cannot create another ConfigController class")

        config_dir = Path(config_dir) if config_dir is not None else Path("config")
        self.paths = ConfigPaths(
            config_dir=config_dir,
            config_file=config_dir / config_file,
            override_file=config_dir / "override.yaml",
        )
        self.config: dict[str, Any] = {}
        self.load_config()

    @classmethod
    def get_instance(cls, config_dir: Path | None = None) -> "ConfigController":
        """Return the singleton instance of the controller.

        ``config_dir`` only applies when the instance is first created.
        """

        if cls._instance is None:
            cls._instance = cls(config_dir=config_dir)
        return cls._instance

    def load_config(self) -> None:
        """Load configuration from default and override YAML files."""

        config: dict[str, Any] = {}
        if self.paths.config_file.exists():
            with self.paths.config_file.open("r", encoding="utf-8") as file:
                config = yaml.safe_load(file) or {}

        if self.paths.override_file.exists():
            with self.paths.override_file.open("r", encoding="utf-8") as file:
                override_config = yaml.safe_load(file) or {}
            if override_config:
                config = self._deep_merge(config, override_config)

        self.config = self._normalize_config(config)

    def get_config(self) -> dict[str, Any]:
        """Return the currently loaded configuration."""

        return dict(self.config)

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge dictionaries, overriding base values with override values."""

        merged = dict(base)
        for key, value in override.items():
            if (
                key in merged
                and isinstance(merged[key], dict)
                and isinstance(value, dict)
            ):
                merged[key] = self._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _normalize_config(self, config: dict[str, Any]) -> dict[str, Any]:
        """Fill in defaults and coerce types for the diagnostics settings."""

        normalized = dict(config)
        normalized["logging_level"] = str(normalized.get("logging_level") or "INFO").upper()
        log_file = normalized.get("log_file")
        normalized["log_file"] = str(log_file) if log_file else None

        diag_cfg = dict(normalized.get("diagnostics") or {})
        timeouts_cfg = dict(diag_cfg.get("timeouts") or {})
        ip_cfg = dict(diag_cfg.get("external_ip") or {})

        diag_cfg["default_domain"] = str(diag_cfg.get("default_domain") or "google.com").strip()
        diag_cfg["parallel"] = bool(diag_cfg.get("parallel", False))
        diag_cfg["gateway_echo_attempts"] = max(1, int(diag_cfg.get("gateway_echo_attempts", 2)))

        timeouts_cfg["ping_s"] = float(timeouts_cfg.get("ping_s", 2.0))
        timeouts_cfg["dns_s"] = float(timeouts_cfg.get("dns_s", 3.0))
        timeouts_cfg["head_s"] = float(timeouts_cfg.get("head_s", 5.0))
        timeouts_cfg["get_s"] = float(timeouts_cfg.get("get_s", 10.0))
        timeouts_cfg["external_ip_s"] = float(timeouts_cfg.get("external_ip_s", 5.0))

        ip_cfg["primary_url"] = str(ip_cfg.get("primary_url") or "https://api.ipify.org")
        ip_cfg["fallback_url"] = str(ip_cfg.get("fallback_url") or "https://ifconfig.me/ip")

        diag_cfg["timeouts"] = timeouts_cfg
        diag_cfg["external_ip"] = ip_cfg
        normalized["diagnostics"] = diag_cfg

        remediation_cfg = dict(normalized.get("remediation") or {})
        policy = str(remediation_cfg.get("gateway_failure_policy") or "strict").lower()
        if policy not in {"strict", "lenient"}:
            raise ValueError(f"Unknown gateway_failure_policy: {policy!r}")
        remediation_cfg["gateway_failure_policy"] = policy
        commands = remediation_cfg.get("commands") or {}
        if not isinstance(commands, dict):
            raise ValueError("remediation.commands must be a mapping of action to command lists")
        remediation_cfg["commands"] = {
            str(action): self._normalize_command_list(str(action), command_list)
            for action, command_list in commands.items()
        }
        normalized["remediation"] = remediation_cfg
        return normalized

    @staticmethod
    def _normalize_command_list(action: str, command_list: Any) -> list[list[str]]:
        """Validate one action's override: a list of argv lists."""

        if action not in ACTION_CONFIG_KEYS.values():
            known = ", ".join(sorted(ACTION_CONFIG_KEYS.values()))
            raise ValueError(f"Unknown remediation action {action!r} (expected one of: {known})")
        if command_list is None:
            return []
        if isinstance(command_list, str) or not isinstance(command_list, list):
            raise ValueError(f"remediation.commands.{action} must be a list of commands")
        normalized: list[list[str]] = []
        for command in command_list:
            if isinstance(command, str) or not isinstance(command, list):
                raise ValueError(
                    f"remediation.commands.{action}: command {command!r} must be a list of "
                    "arguments, e.g. [resolvectl, flush-caches]"
                )
            if not command:
                raise ValueError(f"remediation.commands.{action}: empty command")
            normalized.append([str(part) for part in command])
        return normalized
