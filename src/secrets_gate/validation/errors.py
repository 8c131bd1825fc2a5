"""
secrets-gate — validation error model.

Every failed check raises exactly one ``SecretsValidationError`` subclass.
Each carries an ordered tuple of ``SecretTuple`` entries so callers can
inspect failures programmatically; the rendered message is presentational
only and never changes the structured data.

Detection priority follows ``ErrorKind`` declaration order.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum
from typing import Any, Final, NamedTuple, Protocol, runtime_checkable

from secrets_gate.constants import REDACTED_VALUE

_UNDECLARED: Final[str] = "undeclared"
_LAMBDA_NAME: Final[str] = "<lambda>"


class _MissingType:
    """Marker for a key with no value in the candidate mapping."""

    __slots__ = ()
    _instance: _MissingType | None = None

    def __new__(cls) -> _MissingType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "<missing>"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Final[Any] = _MissingType()


class SecretTuple(NamedTuple):
    """``(key, required, given)`` triple used by every error kind."""

    key: str
    required: object
    given: object = MISSING

    @property
    def has_value(self) -> bool:
        return self.given is not MISSING


class ErrorKind(StrEnum):
    SCHEMA_NOT_CONFIGURED = "schema_not_configured"
    SECRETS_MISSING = "secrets_missing"
    EXTRA_SECRETS = "extra_secrets"
    INVALID_REQUIRED_SECRET_VALUE = "invalid_required_secret_value"
    MISMATCHED_SECRET_TYPE = "mismatched_secret_type"


@runtime_checkable
class _Describable(Protocol):
    def describe(self) -> str: ...


def describe_requirement(required: object) -> str:
    """Return the display form of a requirement spec."""

    if required is None:
        return _UNDECLARED
    if isinstance(required, _Describable) and not isinstance(required, type):
        return required.describe()
    if isinstance(required, type):
        return required.__name__
    if callable(required):
        if getattr(required, "__name__", None) == _LAMBDA_NAME:
            return _LAMBDA_NAME
        name = getattr(required, "__qualname__", None) or getattr(required, "__name__", None)
        if isinstance(name, str) and name:
            return name
    return repr(required)


def render_secret_list(secrets: Iterable[SecretTuple], *, redact: bool = False) -> str:
    """Render one line per tuple: ``<key> of type <required>[ was given <value>]``."""

    lines: list[str] = []
    for item in secrets:
        line = f"{item.key} of type {describe_requirement(item.required)}"
        if item.has_value:
            shown = REDACTED_VALUE if redact else repr(item.given)
            line += f" was given {shown}"
        lines.append(line + "\n")
    return "".join(lines)


class SecretsValidationError(ValueError):
    """Base class for every failure raised by ``SecretsValidator.check_secrets``."""

    kind: ErrorKind
    header: str = "invalid secrets"

    def __init__(self, secrets: Iterable[SecretTuple] = ()) -> None:
        self.secrets: tuple[SecretTuple, ...] = tuple(secrets)
        super().__init__(self.render())

    def __reduce__(self) -> tuple[Any, ...]:
        # Rebuilt from the tuples, never from the rendered message.
        return (type(self), (self.secrets,))

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(item.key for item in self.secrets)

    def error_list(self, *, redact: bool = False) -> str:
        return render_secret_list(self.secrets, redact=redact)

    def render(self, *, redact: bool = False) -> str:
        return f"{self.header}:\n{self.error_list(redact=redact)}"

    def to_dict(self, *, redact: bool = False) -> dict[str, object]:
        entries: list[dict[str, object]] = []
        for item in self.secrets:
            given: str | None
            if not item.has_value:
                given = None
            elif redact:
                given = REDACTED_VALUE
            else:
                given = repr(item.given)
            entries.append(
                {
                    "key": item.key,
                    "required": describe_requirement(item.required),
                    "given": given,
                }
            )
        return {
            "kind": self.kind.value,
            "message": self.render(redact=redact),
            "secrets": entries,
        }


class SchemaNotConfigured(SecretsValidationError):
    kind = ErrorKind.SCHEMA_NOT_CONFIGURED

    def __init__(self) -> None:
        super().__init__(())

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), ())

    def render(self, *, redact: bool = False) -> str:
        return "no required secrets schema configured; call configure() before check_secrets()"


class SecretsMissing(SecretsValidationError):
    kind = ErrorKind.SECRETS_MISSING
    header = "Missing secrets"


class ExtraSecrets(SecretsValidationError):
    kind = ErrorKind.EXTRA_SECRETS
    header = "Secrets not included in required secrets list"


class InvalidRequiredSecretValue(SecretsValidationError):
    kind = ErrorKind.INVALID_REQUIRED_SECRET_VALUE
    header = "Invalid required secret"


class MismatchedSecretType(SecretsValidationError):
    kind = ErrorKind.MISMATCHED_SECRET_TYPE
    header = "Invalid secrets given"


__all__ = [
    "MISSING",
    "ErrorKind",
    "ExtraSecrets",
    "InvalidRequiredSecretValue",
    "MismatchedSecretType",
    "SchemaNotConfigured",
    "SecretTuple",
    "SecretsMissing",
    "SecretsValidationError",
    "describe_requirement",
    "render_secret_list",
]
