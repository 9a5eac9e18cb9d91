"""YAML configuration for netdiag: defaults, overrides and normalization."""

from config.controller import ConfigController, ConfigPaths

__all__ = ["ConfigController", "ConfigPaths"]
