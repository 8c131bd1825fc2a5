"""
secrets-gate config package public API.

File: src/secrets_gate/config/__init__.py

Purpose
- Export gate settings validation, file-declared schema parsing, and loaders.

Functional requirements
- Support loading from ``secrets_gate.toml`` (or YAML) + ``SECRETS_GATE_`` env overrides.
- Fail fast with clear structured validation/load errors.
"""

from secrets_gate.config.loader import (
    ConfigLoadError,
    GateConfig,
    candidate_from_environ,
    coerce_env_value,
    load_candidate_file,
    load_gate_config,
)
from secrets_gate.config.schema import (
    DEFAULT_SETTINGS,
    LOG_FORMATS,
    LOG_LEVELS,
    TYPE_TAGS,
    GateConfigError,
    GateConfigIssue,
    GateSettings,
    default_settings,
    merge_settings,
    parse_required_secrets,
    validate_settings,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "LOG_FORMATS",
    "LOG_LEVELS",
    "TYPE_TAGS",
    "ConfigLoadError",
    "GateConfig",
    "GateConfigError",
    "GateConfigIssue",
    "GateSettings",
    "candidate_from_environ",
    "coerce_env_value",
    "default_settings",
    "load_candidate_file",
    "load_gate_config",
    "merge_settings",
    "parse_required_secrets",
    "validate_settings",
]
