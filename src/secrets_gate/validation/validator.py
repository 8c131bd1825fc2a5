"""
secrets-gate — the secrets validator.

``SecretsValidator`` holds one required-secrets schema and checks candidate
mappings against it:

1. schema presence (``SchemaNotConfigured``)
2. missing keys, reported before anything else (``SecretsMissing``)
3. extra keys (``ExtraSecrets``)
4. assertion construction, first malformed spec wins
   (``InvalidRequiredSecretValue``)
5. assertion execution, every failing key aggregated
   (``MismatchedSecretType``)

A check either returns ``None`` or raises exactly one of the above. Nothing
is retained between calls. The schema slot is single-writer: register it at
startup before any concurrent checks run.

Decisions are logged through ``structlog``. Secret values never reach the log.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, TypeAlias

import structlog

from secrets_gate.validation.errors import (
    ExtraSecrets,
    MismatchedSecretType,
    SchemaNotConfigured,
    SecretsMissing,
    SecretsValidationError,
)
from secrets_gate.validation.requirements import build_assertions, run_assertions, secret_tuple

RequiredSchema: TypeAlias = Mapping[str, object]


class SchemaBuilder:
    """Collects requirement specs for ``SecretsValidator.configure``.

    No validation happens here; malformed specs surface when a check
    reaches the offending key.
    """

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: dict[str, object] = {}

    def require(self, key: str, spec: object) -> SchemaBuilder:
        self._items[key] = spec
        return self

    def require_all(self, specs: Mapping[str, object]) -> SchemaBuilder:
        for key, spec in specs.items():
            self._items[key] = spec
        return self

    def build(self) -> RequiredSchema:
        return MappingProxyType(dict(self._items))


SchemaSource: TypeAlias = Callable[[SchemaBuilder], object] | Mapping[str, object]


def _default_logger() -> Any:
    """structlog logger bound to the stdlib ``secrets_gate`` logger tree.

    Events obey stdlib levels and handlers, so an unconfigured host only
    sees WARNING and above.
    """

    return structlog.wrap_logger(
        logging.getLogger(__name__),
        processors=[structlog.stdlib.render_to_log_kwargs],
        wrapper_class=structlog.stdlib.BoundLogger,
    )


class SecretsValidator:
    """Explicit validator handle; construct once and pass it to call sites."""

    def __init__(
        self,
        required_secrets: Mapping[str, object] | None = None,
        *,
        logger: Any | None = None,
    ) -> None:
        self._required: RequiredSchema | None = None
        self._logger = logger if logger is not None else _default_logger()
        if required_secrets is not None:
            self.configure(required_secrets)

    @property
    def required_secrets(self) -> RequiredSchema | None:
        return self._required

    @property
    def is_configured(self) -> bool:
        return self._required is not None

    def configure(self, source: SchemaSource) -> RequiredSchema:
        """Register the required-secrets schema, replacing any previous one.

        ``source`` is either a callable that fills in a ``SchemaBuilder`` or a
        plain mapping of key to requirement spec.
        """

        builder = SchemaBuilder()
        if isinstance(source, Mapping):
            builder.require_all(source)
        elif callable(source):
            source(builder)
        else:
            raise TypeError(
                f"configure() expects a mapping or a builder callable, got {type(source).__name__}"
            )
        self._required = builder.build()
        return self._required

    def check_secrets(self, candidate: Mapping[str, object]) -> None:
        """Validate ``candidate`` against the registered schema."""

        try:
            self._check(candidate)
        except SecretsValidationError as exc:
            self._logger.info(
                "secrets_check_failed",
                kind=exc.kind.value,
                keys=list(exc.keys),
            )
            raise
        self._logger.info("secrets_check_passed", key_count=len(candidate))

    def _check(self, candidate: Mapping[str, object]) -> None:
        required = self._required
        if required is None:
            raise SchemaNotConfigured()

        missing_keys = [key for key in required if key not in candidate]
        if missing_keys:
            raise SecretsMissing(secret_tuple(key, required, candidate) for key in missing_keys)

        extra_keys = [key for key in candidate if key not in required]
        if extra_keys:
            raise ExtraSecrets(secret_tuple(key, required, candidate) for key in extra_keys)

        existing_keys = list(candidate)
        assertions = build_assertions(required, candidate, existing_keys)
        failed_keys = run_assertions(candidate, existing_keys, assertions)
        if failed_keys:
            raise MismatchedSecretType(
                secret_tuple(key, required, candidate) for key in failed_keys
            )


__all__ = [
    "RequiredSchema",
    "SchemaBuilder",
    "SchemaSource",
    "SecretsValidator",
]
