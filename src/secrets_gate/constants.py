"""Stable constants shared across the gate, loader, and CLI."""

from __future__ import annotations

from typing import Final

# Default file names and environment prefixes.
DEFAULT_CONFIG_FILE: Final[str] = "secrets_gate.toml"
SETTINGS_ENV_PREFIX: Final[str] = "SECRETS_GATE_"

# Section names inside a gate config file.
SETTINGS_SECTION: Final[str] = "gate"
REQUIRED_SECRETS_SECTION: Final[str] = "required_secrets"

# Placeholder rendered in place of secret values when redaction is on.
REDACTED_VALUE: Final[str] = "***REDACTED***"

# Logger namespace owned by this package.
LOGGER_NAME: Final[str] = "secrets_gate"

YAML_SUFFIXES: Final[frozenset[str]] = frozenset({".yaml", ".yml"})

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "LOGGER_NAME",
    "REDACTED_VALUE",
    "REQUIRED_SECRETS_SECTION",
    "SETTINGS_ENV_PREFIX",
    "SETTINGS_SECTION",
    "YAML_SUFFIXES",
]
