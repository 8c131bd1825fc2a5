"""
secrets-gate — requirement specs and assertion building.

A requirement spec is either a type tag (exact runtime type) or a predicate
``(value) -> bool``. Programmatic schemas may hold raw types and callables;
they are classified into ``ExactType`` / ``Predicate`` lazily, per key, when
a check builds its assertions. A spec of any other shape is reported as
``InvalidRequiredSecretValue`` for the first offending key.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import TypeAlias

from secrets_gate.validation.errors import (
    MISSING,
    InvalidRequiredSecretValue,
    SecretTuple,
    describe_requirement,
)

PredicateFn: TypeAlias = Callable[[object], object]


@dataclass(frozen=True, slots=True)
class ExactType:
    """Passes only when ``type(value) is type_`` (subclasses are rejected)."""

    type_: type

    def check(self, value: object) -> bool:
        return type(value) is self.type_

    def describe(self) -> str:
        return self.type_.__name__


@dataclass(frozen=True, slots=True)
class Predicate:
    """Caller-supplied predicate; any truthy result passes."""

    func: PredicateFn
    name: str | None = None

    def check(self, value: object) -> bool:
        return bool(self.func(value))

    def describe(self) -> str:
        if self.name:
            return self.name
        return describe_requirement(self.func)


Requirement: TypeAlias = ExactType | Predicate


def secret_tuple(
    key: str, required: Mapping[str, object], candidate: Mapping[str, object]
) -> SecretTuple:
    """Build the canonical ``(key, required, given)`` tuple for ``key``."""

    return SecretTuple(key, required.get(key), candidate.get(key, MISSING))


def classify_requirement(key: str, spec: object, given: object = MISSING) -> Requirement:
    """Turn one schema entry into an assertion or raise for a malformed entry."""

    if isinstance(spec, (ExactType, Predicate)):
        return spec
    # Classes are callable too; the type check has to come first.
    if isinstance(spec, type):
        return ExactType(spec)
    if callable(spec):
        return Predicate(spec)
    raise InvalidRequiredSecretValue([SecretTuple(key, spec, given)])


def build_assertions(
    required: Mapping[str, object],
    candidate: Mapping[str, object],
    keys: Iterable[str],
) -> list[Requirement]:
    return [
        classify_requirement(key, required[key], candidate.get(key, MISSING)) for key in keys
    ]


def run_assertions(
    candidate: Mapping[str, object],
    keys: Sequence[str],
    assertions: Sequence[Requirement],
) -> list[str]:
    """Return every key whose assertion fails, in ``keys`` order.

    Exceptions raised by predicates are not caught.
    """

    if len(keys) != len(assertions):
        raise ValueError("keys and assertions must have the same length")
    return [
        key
        for key, assertion in zip(keys, assertions, strict=True)
        if not assertion.check(candidate[key])
    ]


def matches(pattern: str | re.Pattern[str]) -> Predicate:
    """Predicate for string values that fully match ``pattern``."""

    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

    def _matches(value: object) -> bool:
        return isinstance(value, str) and compiled.fullmatch(value) is not None

    return Predicate(_matches, name=f"str matching {compiled.pattern!r}")


def one_of(values: Iterable[object]) -> Predicate:
    """Predicate for values equal to one of ``values`` with the same exact type."""

    choices = tuple(values)
    if not choices:
        raise ValueError("one_of requires at least one value")

    def _one_of(value: object) -> bool:
        return any(type(value) is type(choice) and value == choice for choice in choices)

    rendered = ", ".join(repr(choice) for choice in choices)
    return Predicate(_one_of, name=f"one of [{rendered}]")


__all__ = [
    "ExactType",
    "Predicate",
    "PredicateFn",
    "Requirement",
    "build_assertions",
    "classify_requirement",
    "matches",
    "one_of",
    "run_assertions",
    "secret_tuple",
]
