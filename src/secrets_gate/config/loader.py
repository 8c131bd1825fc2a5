"""
secrets-gate — config and candidate loader.

File: src/secrets_gate/config/loader.py

Purpose
- Load gate settings and the required-secrets table from a TOML or YAML file.
- Build candidate mappings from the process environment or a typed file.

What should be included in this file
- Settings precedence: CLI > env (``SECRETS_GATE_``) > file ``[gate]`` > defaults.
- TOML via ``tomllib``; YAML via ``PyYAML`` selected by file suffix.
- Optional coercion of environment strings to declared int/float/bool tags.

Functional requirements
- Fail with ``ConfigLoadError`` on unreadable or unparseable files.
- A failed coercion keeps the raw string so the check reports the mismatch.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

import yaml

from secrets_gate.config.schema import (
    GateSettings,
    merge_settings,
    parse_required_secrets,
    validate_settings,
)
from secrets_gate.constants import (
    DEFAULT_CONFIG_FILE,
    REQUIRED_SECRETS_SECTION,
    SETTINGS_ENV_PREFIX,
    SETTINGS_SECTION,
    YAML_SUFFIXES,
)
from secrets_gate.validation.requirements import ExactType, Requirement

_BOOLEAN_TRUE: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_BOOLEAN_FALSE: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})
_SETTING_KINDS: Final[Mapping[str, type]] = {
    "env_prefix": str,
    "coerce_env": bool,
    "log_level": str,
    "log_format": str,
    "redact_values": bool,
}


class ConfigLoadError(ValueError):
    """Raised when a file cannot be loaded or an override cannot be coerced."""


@dataclass(frozen=True, slots=True)
class GateConfig:
    """Effective settings plus the required-secrets schema from one file."""

    settings: GateSettings
    required_secrets: dict[str, Requirement]
    source: Path


def load_gate_config(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    cli_overrides: Mapping[str, object] | None = None,
) -> GateConfig:
    """Load settings and schema with precedence CLI > env > file > defaults."""

    resolved = _resolve_config_path(config_path)
    payload = _load_document(resolved)

    file_settings = payload.get(SETTINGS_SECTION, {})
    if not isinstance(file_settings, Mapping):
        raise ConfigLoadError(f"[{SETTINGS_SECTION}] must be a table in {resolved}")

    env_map = os.environ if environ is None else environ
    merged = merge_settings(file_settings, _collect_env_overrides(env_map))
    merged = merge_settings(
        merged, {key: value for key, value in (cli_overrides or {}).items() if value is not None}
    )
    settings = validate_settings(merged)

    if REQUIRED_SECRETS_SECTION not in payload:
        raise ConfigLoadError(f"[{REQUIRED_SECRETS_SECTION}] table is missing in {resolved}")
    required = parse_required_secrets(payload[REQUIRED_SECRETS_SECTION])

    return GateConfig(settings=settings, required_secrets=required, source=resolved)


def load_candidate_file(path: str | Path) -> dict[str, Any]:
    """Load typed candidate values from a TOML or YAML file."""

    resolved = Path(path).expanduser().resolve()
    payload = _load_document(resolved)
    for key in payload:
        if not isinstance(key, str):
            raise ConfigLoadError(f"secret names must be strings in {resolved}: {key!r}")
    return payload


def candidate_from_environ(
    environ: Mapping[str, str] | None = None,
    *,
    prefix: str = "",
    required: Mapping[str, object] | None = None,
    coerce: bool = False,
) -> dict[str, object]:
    """Select ``prefix``-ed variables, strip the prefix, and optionally coerce."""

    env_map = os.environ if environ is None else environ
    candidate: dict[str, object] = {}
    for name in sorted(env_map):
        if prefix and not name.startswith(prefix):
            continue
        key = name[len(prefix) :]
        if not key:
            continue
        raw = env_map[name]
        spec = required.get(key) if required is not None else None
        candidate[key] = coerce_env_value(raw, spec) if coerce else raw
    return candidate


def coerce_env_value(raw: str, spec: object) -> object:
    """Coerce ``raw`` to the exact type ``spec`` declares, when it declares one."""

    if isinstance(spec, ExactType):
        target: object = spec.type_
    else:
        target = spec

    value = raw.strip()
    if target is int:
        try:
            return int(value)
        except ValueError:
            return raw
    if target is float:
        try:
            return float(value)
        except ValueError:
            return raw
    if target is bool:
        lowered = value.lower()
        if lowered in _BOOLEAN_TRUE:
            return True
        if lowered in _BOOLEAN_FALSE:
            return False
    return raw


def _resolve_config_path(config_path: str | Path | None) -> Path:
    if config_path is None:
        return (Path.cwd() / DEFAULT_CONFIG_FILE).resolve()
    return Path(config_path).expanduser().resolve()


def _load_document(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigLoadError(f"config file not found: {path}")

    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            with path.open("r", encoding="utf-8") as handle:
                parsed = yaml.safe_load(handle)
        else:
            with path.open("rb") as handle:
                parsed = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"invalid YAML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read file {path}: {exc}") from exc

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ConfigLoadError(f"document root must be an object: {path}")
    return parsed


def _collect_env_overrides(environ: Mapping[str, str]) -> dict[str, object]:
    overrides: dict[str, object] = {}
    for key in sorted(_SETTING_KINDS):
        env_name = f"{SETTINGS_ENV_PREFIX}{key.upper()}"
        raw = environ.get(env_name)
        if raw is None:
            continue
        if _SETTING_KINDS[key] is bool:
            lowered = raw.strip().lower()
            if lowered in _BOOLEAN_TRUE:
                overrides[key] = True
            elif lowered in _BOOLEAN_FALSE:
                overrides[key] = False
            else:
                raise ConfigLoadError(
                    f"{env_name} must be a boolean (true/false/1/0/yes/no/on/off)"
                )
            continue
        overrides[key] = raw.strip()
    return overrides


__all__ = [
    "ConfigLoadError",
    "GateConfig",
    "candidate_from_environ",
    "coerce_env_value",
    "load_candidate_file",
    "load_gate_config",
]
