"""
secrets-gate — unit tests for the secrets validator

File: tests/unit/validation/test_validator.py

Purpose
- Validate the check pipeline: schema presence, missing/extra reconciliation,
  assertion construction, and aggregated type mismatches.

What this test file should cover
- Concrete startup scenarios (success, missing, extra, mismatch, malformed spec).
- Detection priority between error kinds.
- Property-based reconciliation and idempotence checks.
- Structured decision logging without secret values.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest
import structlog
from hypothesis import given, settings
from hypothesis import strategies as st

from secrets_gate.validation import (
    MISSING,
    ErrorKind,
    ExtraSecrets,
    InvalidRequiredSecretValue,
    MismatchedSecretType,
    SchemaBuilder,
    SchemaNotConfigured,
    SecretsMissing,
    SecretsValidator,
    SecretTuple,
)


@dataclass(slots=True)
class RecordingLogger:
    events: list[tuple[str, dict[str, object]]] = field(default_factory=list)

    def info(self, event: str, **kwargs: object) -> None:
        self.events.append((event, dict(kwargs)))


def _validator(schema: dict[str, object] | None = None) -> SecretsValidator:
    return SecretsValidator(schema, logger=RecordingLogger())


@pytest.mark.unit
def test_matching_candidate_passes_silently() -> None:
    validator = _validator({"PORT": int})

    assert validator.check_secrets({"PORT": 8080}) is None


@pytest.mark.unit
def test_default_logger_writes_nothing_without_logging_setup(
    capsys: pytest.CaptureFixture[str],
) -> None:
    structlog.reset_defaults()
    validator = SecretsValidator({"PORT": int})

    validator.check_secrets({"PORT": 1})
    with pytest.raises(MismatchedSecretType):
        validator.check_secrets({"PORT": "1"})

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


@pytest.mark.unit
def test_check_before_configure_raises_schema_not_configured() -> None:
    validator = _validator()

    with pytest.raises(SchemaNotConfigured) as excinfo:
        validator.check_secrets({"PORT": 8080})

    assert excinfo.value.kind is ErrorKind.SCHEMA_NOT_CONFIGURED
    assert excinfo.value.secrets == ()
    assert not validator.is_configured


@pytest.mark.unit
def test_missing_secret_is_reported_with_missing_given() -> None:
    validator = _validator({"PORT": int, "HOST": str})

    with pytest.raises(SecretsMissing) as excinfo:
        validator.check_secrets({"PORT": 8080})

    assert excinfo.value.secrets == (SecretTuple("HOST", str, MISSING),)
    assert excinfo.value.secrets[0].given is MISSING


@pytest.mark.unit
def test_extra_secret_is_reported_without_requirement() -> None:
    validator = _validator({"PORT": int})

    with pytest.raises(ExtraSecrets) as excinfo:
        validator.check_secrets({"PORT": 8080, "DEBUG": True})

    assert excinfo.value.secrets == (SecretTuple("DEBUG", None, True),)


@pytest.mark.unit
def test_wrong_type_is_reported_as_mismatch() -> None:
    validator = _validator({"PORT": int})

    with pytest.raises(MismatchedSecretType) as excinfo:
        validator.check_secrets({"PORT": "8080"})

    assert excinfo.value.secrets == (SecretTuple("PORT", int, "8080"),)


@pytest.mark.unit
def test_spec_that_is_neither_type_nor_callable_is_invalid() -> None:
    validator = _validator({"KEY": 42})

    with pytest.raises(InvalidRequiredSecretValue) as excinfo:
        validator.check_secrets({"KEY": "x"})

    assert excinfo.value.secrets == (SecretTuple("KEY", 42, "x"),)


@pytest.mark.unit
def test_missing_wins_over_extra() -> None:
    validator = _validator({"PORT": int, "HOST": str})

    with pytest.raises(SecretsMissing) as excinfo:
        validator.check_secrets({"PORT": 8080, "DEBUG": True})

    assert excinfo.value.keys == ("HOST",)


@pytest.mark.unit
def test_invalid_spec_aborts_before_any_predicate_runs() -> None:
    calls: list[object] = []

    def record(value: object) -> bool:
        calls.append(value)
        return True

    validator = _validator({"A": record, "B": "not-a-spec"})

    with pytest.raises(InvalidRequiredSecretValue) as excinfo:
        validator.check_secrets({"A": 1, "B": 2})

    assert excinfo.value.keys == ("B",)
    assert calls == []


@pytest.mark.unit
def test_first_malformed_spec_in_candidate_order_is_reported() -> None:
    validator = _validator({"A": 1, "B": 2})

    with pytest.raises(InvalidRequiredSecretValue) as excinfo:
        validator.check_secrets({"B": "b", "A": "a"})

    assert excinfo.value.secrets == (SecretTuple("B", 2, "b"),)


@pytest.mark.unit
def test_mismatches_are_aggregated() -> None:
    validator = _validator(
        {
            "PORT": int,
            "HOST": str,
            "WORKERS": lambda value: isinstance(value, int) and value > 0,
        }
    )

    with pytest.raises(MismatchedSecretType) as excinfo:
        validator.check_secrets({"PORT": "80", "HOST": "localhost", "WORKERS": 0})

    assert set(excinfo.value.keys) == {"PORT", "WORKERS"}
    by_key = {item.key: item for item in excinfo.value.secrets}
    assert by_key["PORT"] == SecretTuple("PORT", int, "80")
    assert by_key["WORKERS"].given == 0


@pytest.mark.unit
def test_type_tags_require_exact_type() -> None:
    validator = _validator({"ENABLED": int})

    with pytest.raises(MismatchedSecretType):
        validator.check_secrets({"ENABLED": True})


@pytest.mark.unit
def test_predicate_truthiness_decides() -> None:
    validator = _validator({"NAME": len})

    validator.check_secrets({"NAME": "svc"})
    with pytest.raises(MismatchedSecretType):
        validator.check_secrets({"NAME": ""})


@pytest.mark.unit
def test_predicate_exceptions_propagate_unchanged() -> None:
    def explode(value: object) -> bool:
        raise RuntimeError("predicate failure")

    validator = _validator({"KEY": explode})

    with pytest.raises(RuntimeError, match="predicate failure"):
        validator.check_secrets({"KEY": "value"})


@pytest.mark.unit
def test_configure_with_builder_replaces_previous_schema() -> None:
    validator = _validator({"OLD": str})

    schema = validator.configure(lambda builder: builder.require("PORT", int).require("HOST", str))

    assert dict(schema) == {"PORT": int, "HOST": str}
    assert validator.required_secrets is schema
    validator.check_secrets({"PORT": 1, "HOST": "h"})
    with pytest.raises(ExtraSecrets):
        validator.check_secrets({"PORT": 1, "HOST": "h", "OLD": "x"})


@pytest.mark.unit
def test_configure_accepts_mapping_and_stores_read_only_copy() -> None:
    source: dict[str, object] = {"PORT": int}
    validator = _validator()

    schema = validator.configure(source)
    source["HOST"] = str

    assert dict(schema) == {"PORT": int}
    with pytest.raises(TypeError):
        schema["HOST"] = str  # type: ignore[index]


@pytest.mark.unit
def test_configure_does_not_validate_specs() -> None:
    validator = _validator()

    validator.configure({"KEY": object()})

    assert validator.is_configured


@pytest.mark.unit
def test_configure_rejects_unsupported_source() -> None:
    validator = _validator()

    with pytest.raises(TypeError, match="configure"):
        validator.configure(42)  # type: ignore[arg-type]


@pytest.mark.unit
def test_schema_builder_require_all_keeps_order() -> None:
    schema = SchemaBuilder().require("A", int).require_all({"B": str, "C": float}).build()

    assert list(schema) == ["A", "B", "C"]


@pytest.mark.unit
def test_candidate_is_not_mutated() -> None:
    validator = _validator({"PORT": int})
    candidate: dict[str, object] = {"PORT": "8080"}

    with pytest.raises(MismatchedSecretType):
        validator.check_secrets(candidate)

    assert candidate == {"PORT": "8080"}


@pytest.mark.unit
def test_checks_are_logged_without_values() -> None:
    logger = RecordingLogger()
    validator = SecretsValidator({"PORT": int, "TOKEN": str}, logger=logger)

    validator.check_secrets({"PORT": 1, "TOKEN": "tok_live"})
    with pytest.raises(MismatchedSecretType):
        validator.check_secrets({"PORT": "1", "TOKEN": "tok_live"})

    assert logger.events == [
        ("secrets_check_passed", {"key_count": 2}),
        ("secrets_check_failed", {"kind": "mismatched_secret_type", "keys": ["PORT"]}),
    ]
    assert "tok_live" not in repr(logger.events)


_KEYS = st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ_", min_size=1, max_size=8)


@pytest.mark.unit
@settings(max_examples=50, deadline=None)
@given(st.dictionaries(_KEYS, st.integers(), max_size=8))
def test_property_matching_keys_and_types_pass(values: dict[str, int]) -> None:
    validator = _validator({key: int for key in values})

    validator.check_secrets(values)


@pytest.mark.unit
@settings(max_examples=50, deadline=None)
@given(
    st.sets(_KEYS, min_size=1, max_size=8),
    st.sets(_KEYS, max_size=8),
)
def test_property_missing_keys_are_exactly_schema_minus_candidate(
    required: set[str], present: set[str]
) -> None:
    validator = _validator({key: int for key in sorted(required)})
    candidate = {key: 1 for key in sorted(present)}
    missing = required - present

    if not missing:
        return
    with pytest.raises(SecretsMissing) as excinfo:
        validator.check_secrets(candidate)

    assert set(excinfo.value.keys) == missing
    assert all(item.given is MISSING for item in excinfo.value.secrets)


@pytest.mark.unit
@settings(max_examples=50, deadline=None)
@given(
    st.sets(_KEYS, max_size=6),
    st.sets(_KEYS, min_size=1, max_size=6),
)
def test_property_extra_keys_are_exactly_candidate_minus_schema(
    required: set[str], additional: set[str]
) -> None:
    extra = additional - required
    if not extra:
        return
    validator = _validator({key: int for key in sorted(required)})
    candidate = {key: 1 for key in sorted(required | extra)}

    with pytest.raises(ExtraSecrets) as excinfo:
        validator.check_secrets(candidate)

    assert set(excinfo.value.keys) == extra
    assert all(item.required is None for item in excinfo.value.secrets)


@pytest.mark.unit
@settings(max_examples=50, deadline=None)
@given(st.dictionaries(_KEYS, st.one_of(st.integers(), st.text(max_size=4)), min_size=1))
def test_property_mismatches_are_exactly_failing_keys_and_idempotent(
    values: dict[str, object],
) -> None:
    validator = _validator({key: int for key in values})
    failing = {key for key, value in values.items() if type(value) is not int}

    outcomes = []
    for _ in range(2):
        try:
            validator.check_secrets(values)
        except MismatchedSecretType as exc:
            outcomes.append((exc.kind, exc.secrets))
        else:
            outcomes.append(None)

    assert outcomes[0] == outcomes[1]
    if not failing:
        assert outcomes[0] is None
    else:
        assert outcomes[0] is not None
        assert {item.key for item in outcomes[0][1]} == failing
