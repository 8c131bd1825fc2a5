"""
secrets-gate — gate settings and file-declared schema validation.

File: src/secrets_gate/config/schema.py

Purpose
- Define defaults and strict validation for the ``[gate]`` settings table.
- Convert a ``[required_secrets]`` table from TOML/YAML into requirement specs.

Functional requirements
- Report every problem as a structured issue (dotted path + message).
- Unknown type names, bad regexes, and unknown keys are rejected up front;
  a file cannot express a malformed spec.

Non-functional requirements
- Deterministic issue ordering for the same payload.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, Literal, TypedDict

from secrets_gate.constants import REQUIRED_SECRETS_SECTION, SETTINGS_SECTION
from secrets_gate.validation.requirements import ExactType, Requirement, matches, one_of

TYPE_TAGS: Final[Mapping[str, type]] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "list": list,
    "dict": dict,
}
LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR")
LOG_FORMATS: Final[tuple[str, ...]] = ("json", "text")

_ENV_PREFIX_PATTERN = re.compile(r"^[A-Z0-9_]*$")
_SPEC_TABLE_KEYS: Final[frozenset[str]] = frozenset({"type", "pattern", "one_of"})


class GateSettings(TypedDict):
    env_prefix: str
    coerce_env: bool
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"]
    log_format: Literal["json", "text"]
    redact_values: bool


DEFAULT_SETTINGS: Final[GateSettings] = {
    "env_prefix": "",
    "coerce_env": True,
    "log_level": "WARNING",
    "log_format": "text",
    "redact_values": False,
}


@dataclass(frozen=True, slots=True)
class GateConfigIssue:
    """Single structured validation failure."""

    path: str
    message: str


class GateConfigError(ValueError):
    """Raised when gate settings or a file-declared schema are invalid."""

    def __init__(self, issues: Sequence[GateConfigIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid gate config:\n{rendered}")


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[GateConfigIssue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(GateConfigIssue(path=path, message=message))

    def items(self) -> tuple[GateConfigIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def default_settings() -> GateSettings:
    """Return a copy of the built-in settings defaults."""

    return copy.deepcopy(DEFAULT_SETTINGS)


def merge_settings(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Return ``base`` with every key of ``overlay`` applied on top."""

    merged = dict(base)
    for key in sorted(overlay):
        merged[key] = overlay[key]
    return merged


def validate_settings(payload: Mapping[str, object] | object) -> GateSettings:
    """Validate a ``[gate]`` table merged over defaults; raise on any issue."""

    issues = _IssueCollector()
    if not isinstance(payload, Mapping):
        raise GateConfigError(
            (GateConfigIssue(SETTINGS_SECTION, f"expected object, got {_type_name(payload)}"),)
        )

    _reject_unknown_keys(payload, set(DEFAULT_SETTINGS), SETTINGS_SECTION, issues)
    merged = merge_settings(DEFAULT_SETTINGS, payload)

    prefix = merged["env_prefix"]
    if not isinstance(prefix, str):
        issues.add(
            _join(SETTINGS_SECTION, "env_prefix"), f"expected string, got {_type_name(prefix)}"
        )
    elif not _ENV_PREFIX_PATTERN.fullmatch(prefix):
        issues.add(
            _join(SETTINGS_SECTION, "env_prefix"),
            "must contain only uppercase letters, digits, and underscores",
        )

    for key in ("coerce_env", "redact_values"):
        if not isinstance(merged[key], bool):
            issues.add(
                _join(SETTINGS_SECTION, key), f"expected boolean, got {_type_name(merged[key])}"
            )

    level = merged["log_level"]
    if isinstance(level, str):
        level = level.strip().upper()
        merged["log_level"] = level
    if level not in LOG_LEVELS:
        issues.add(
            _join(SETTINGS_SECTION, "log_level"),
            f"must be one of {', '.join(LOG_LEVELS)}",
        )

    if merged["log_format"] not in LOG_FORMATS:
        issues.add(
            _join(SETTINGS_SECTION, "log_format"),
            f"must be one of {', '.join(LOG_FORMATS)}",
        )

    if issues.has_issues:
        raise GateConfigError(issues.items())

    return {
        "env_prefix": merged["env_prefix"],
        "coerce_env": merged["coerce_env"],
        "log_level": merged["log_level"],
        "log_format": merged["log_format"],
        "redact_values": merged["redact_values"],
    }


def parse_required_secrets(payload: Mapping[str, object] | object) -> dict[str, Requirement]:
    """Convert a file's ``[required_secrets]`` table into requirement specs.

    Accepted entry forms::

        PORT = "int"
        API_TOKEN = { pattern = "^tok_[a-z0-9]+$" }
        LOG_LEVEL = { one_of = ["DEBUG", "INFO"] }
        TIMEOUT = { type = "float" }
    """

    issues = _IssueCollector()
    if not isinstance(payload, Mapping):
        raise GateConfigError(
            (
                GateConfigIssue(
                    REQUIRED_SECRETS_SECTION, f"expected object, got {_type_name(payload)}"
                ),
            )
        )

    out: dict[str, Requirement] = {}
    for key, raw in payload.items():
        if not isinstance(key, str) or not key:
            issues.add(REQUIRED_SECRETS_SECTION, f"secret names must be non-empty strings: {key!r}")
            continue
        parsed = _parse_spec(raw, _join(REQUIRED_SECRETS_SECTION, key), issues)
        if parsed is not None:
            out[key] = parsed

    if issues.has_issues:
        raise GateConfigError(issues.items())
    return out


def _parse_spec(raw: object, path: str, issues: _IssueCollector) -> Requirement | None:
    if isinstance(raw, str):
        return _parse_type_tag(raw, path, issues)

    if not isinstance(raw, Mapping):
        issues.add(path, f"expected type name or table, got {_type_name(raw)}")
        return None

    _reject_unknown_keys(raw, _SPEC_TABLE_KEYS, path, issues)
    present = sorted(_SPEC_TABLE_KEYS.intersection(raw))
    if len(present) != 1:
        issues.add(path, "exactly one of type, pattern, one_of is required")
        return None

    kind = present[0]
    value = raw[kind]
    if kind == "type":
        if not isinstance(value, str):
            issues.add(_join(path, "type"), f"expected string, got {_type_name(value)}")
            return None
        return _parse_type_tag(value, _join(path, "type"), issues)

    if kind == "pattern":
        if not isinstance(value, str):
            issues.add(_join(path, "pattern"), f"expected string, got {_type_name(value)}")
            return None
        try:
            return matches(value)
        except re.error as exc:
            issues.add(_join(path, "pattern"), f"invalid regular expression: {exc}")
            return None

    if not isinstance(value, list) or not value:
        issues.add(_join(path, "one_of"), "expected non-empty list")
        return None
    return one_of(value)


def _parse_type_tag(raw: str, path: str, issues: _IssueCollector) -> ExactType | None:
    type_ = TYPE_TAGS.get(raw.strip())
    if type_ is None:
        issues.add(path, f"unknown type {raw!r}; expected one of {', '.join(TYPE_TAGS)}")
        return None
    return ExactType(type_)


def _reject_unknown_keys(
    payload: Mapping[object, object],
    allowed: set[str] | frozenset[str],
    path: str,
    issues: _IssueCollector,
) -> None:
    for key in sorted(str(item) for item in payload):
        if key not in allowed:
            issues.add(_join(path, key), "unknown key")


def _join(path: str, key: str) -> str:
    if not path:
        return key
    return f"{path}.{key}"


def _type_name(value: object) -> str:
    if value is None:
        return "null"
    return type(value).__name__


__all__ = [
    "DEFAULT_SETTINGS",
    "LOG_FORMATS",
    "LOG_LEVELS",
    "TYPE_TAGS",
    "GateConfigError",
    "GateConfigIssue",
    "GateSettings",
    "default_settings",
    "merge_settings",
    "parse_required_secrets",
    "validate_settings",
]
