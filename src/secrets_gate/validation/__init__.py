"""Required-secrets validation engine: schema registration, checks, and errors."""

from secrets_gate.validation.errors import (
    MISSING,
    ErrorKind,
    ExtraSecrets,
    InvalidRequiredSecretValue,
    MismatchedSecretType,
    SchemaNotConfigured,
    SecretsMissing,
    SecretsValidationError,
    SecretTuple,
    describe_requirement,
    render_secret_list,
)
from secrets_gate.validation.requirements import (
    ExactType,
    Predicate,
    Requirement,
    build_assertions,
    classify_requirement,
    matches,
    one_of,
    run_assertions,
    secret_tuple,
)
from secrets_gate.validation.validator import (
    RequiredSchema,
    SchemaBuilder,
    SchemaSource,
    SecretsValidator,
)

__all__ = [
    "MISSING",
    "ErrorKind",
    "ExactType",
    "ExtraSecrets",
    "InvalidRequiredSecretValue",
    "MismatchedSecretType",
    "Predicate",
    "RequiredSchema",
    "Requirement",
    "SchemaBuilder",
    "SchemaNotConfigured",
    "SchemaSource",
    "SecretTuple",
    "SecretsMissing",
    "SecretsValidationError",
    "SecretsValidator",
    "build_assertions",
    "classify_requirement",
    "describe_requirement",
    "matches",
    "one_of",
    "render_secret_list",
    "run_assertions",
    "secret_tuple",
]
