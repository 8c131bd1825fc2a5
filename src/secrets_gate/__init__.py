"""
secrets-gate — fail-fast startup validation of required secrets.

Register a schema of required keys (type tags or predicates) on a
``SecretsValidator`` and call ``check_secrets`` with the candidate mapping,
typically the process environment, before the application starts serving::

    validator = SecretsValidator()
    validator.configure(lambda schema: schema.require("PORT", int).require("HOST", str))
    validator.check_secrets({"PORT": 8080, "HOST": "0.0.0.0"})

A failed check raises exactly one ``SecretsValidationError`` subclass.

Importing the package has no side effects (no config loading, no logging init).
"""

from secrets_gate.validation import (
    MISSING,
    ErrorKind,
    ExactType,
    ExtraSecrets,
    InvalidRequiredSecretValue,
    MismatchedSecretType,
    Predicate,
    SchemaBuilder,
    SchemaNotConfigured,
    SecretsMissing,
    SecretsValidationError,
    SecretsValidator,
    SecretTuple,
    matches,
    one_of,
)

__version__ = "0.1.0"

__all__ = [
    "MISSING",
    "ErrorKind",
    "ExactType",
    "ExtraSecrets",
    "InvalidRequiredSecretValue",
    "MismatchedSecretType",
    "Predicate",
    "SchemaBuilder",
    "SchemaNotConfigured",
    "SecretTuple",
    "SecretsMissing",
    "SecretsValidationError",
    "SecretsValidator",
    "__version__",
    "matches",
    "one_of",
]
