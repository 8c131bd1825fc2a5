"""Command-line interface router for secrets-gate."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from secrets_gate.config import (
    LOG_FORMATS,
    LOG_LEVELS,
    GateConfig,
    candidate_from_environ,
    load_candidate_file,
    load_gate_config,
)
from secrets_gate.observability import setup_logging
from secrets_gate.ui.render import CLIRenderer, create_renderer
from secrets_gate.validation import SecretsValidationError, SecretsValidator, describe_requirement


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = 2

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router."""

    parser = argparse.ArgumentParser(
        prog="secrets-gate",
        description=(
            "secrets-gate — fail-fast startup check for required secrets.\n\n"
            "Common workflows:\n"
            "  secrets-gate check --prefix APP_          Check APP_* environment variables\n"
            "  secrets-gate check --secrets-file s.yaml  Check typed values from a file\n"
            "  secrets-gate schema                       List declared secrets\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to the gate TOML/YAML config (default: ./secrets_gate.toml).",
    )
    common.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=None,
        help="Override [gate].log_level.",
    )
    common.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=None,
        help="Override [gate].log_format.",
    )
    common.add_argument("--json", action="store_true", help="Emit deterministic JSON output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # check ---------------------------------------------------------------
    check_parser = subparsers.add_parser(
        "check",
        parents=[common],
        help="Validate secrets against [required_secrets]",
        description=(
            "Validate the environment (or a typed secrets file) against the declared schema.\n"
            "Without a prefix every environment variable is a candidate, so undeclared\n"
            "variables are reported as extra secrets."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    check_parser.add_argument(
        "--secrets-file",
        default=None,
        help="Read typed candidate values from a TOML/YAML file instead of the environment.",
    )
    check_parser.add_argument(
        "--prefix",
        default=None,
        help="Only consider environment variables with this prefix (stripped before checking).",
    )
    check_parser.add_argument(
        "--no-coerce",
        action="store_true",
        help="Do not coerce environment strings to declared int/float/bool types.",
    )
    check_parser.add_argument(
        "--redact",
        action="store_true",
        help="Hide given values in failure output.",
    )
    check_parser.set_defaults(handler=_cmd_check)

    # schema --------------------------------------------------------------
    schema_parser = subparsers.add_parser(
        "schema",
        parents=[common],
        help="List declared secrets and their requirements",
    )
    schema_parser.set_defaults(handler=_cmd_schema)

    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return 2

    try:
        result = handler(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_check(args: argparse.Namespace) -> int:
    if args.secrets_file is not None and args.prefix is not None:
        raise CLIError("--prefix only applies to environment candidates, not --secrets-file")

    gate = _load_gate(args)
    settings = gate.settings
    setup_logging(settings["log_level"], log_format=settings["log_format"])

    if args.secrets_file is not None:
        candidate = load_candidate_file(args.secrets_file)
    else:
        candidate = candidate_from_environ(
            prefix=settings["env_prefix"],
            required=gate.required_secrets,
            coerce=settings["coerce_env"],
        )

    validator = SecretsValidator(gate.required_secrets)
    redact = settings["redact_values"]
    try:
        validator.check_secrets(candidate)
    except SecretsValidationError as exc:
        if _flag(args, "json"):
            _emit_json(
                {
                    "command": "check",
                    "ok": False,
                    "source": gate.source.as_posix(),
                    "error": exc.to_dict(redact=redact),
                }
            )
        else:
            _get_renderer().fail(exc.kind.value, exc.render(redact=redact))
        return 1

    if _flag(args, "json"):
        _emit_json(
            {
                "command": "check",
                "ok": True,
                "source": gate.source.as_posix(),
                "checked": sorted(candidate),
            }
        )
        return 0

    _get_renderer().ok(f"{len(candidate)} secrets match {gate.source.name}")
    return 0


def _cmd_schema(args: argparse.Namespace) -> int:
    gate = _load_gate(args)
    setup_logging(gate.settings["log_level"], log_format=gate.settings["log_format"])
    rows = [(key, describe_requirement(spec)) for key, spec in gate.required_secrets.items()]

    if _flag(args, "json"):
        _emit_json(
            {
                "command": "schema",
                "source": gate.source.as_posix(),
                "required_secrets": {key: rendered for key, rendered in rows},
            }
        )
        return 0

    renderer = _get_renderer()
    renderer.kv("Schema", gate.source.as_posix())
    if not rows:
        renderer.text("  (no secrets declared)")
        return 0
    renderer.table(("Secret", "Requirement"), rows)
    return 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_gate(args: argparse.Namespace) -> GateConfig:
    overrides: dict[str, object] = {
        "log_level": getattr(args, "log_level", None),
        "log_format": getattr(args, "log_format", None),
        "env_prefix": getattr(args, "prefix", None),
    }
    if _flag(args, "no_coerce"):
        overrides["coerce_env"] = False
    if _flag(args, "redact"):
        overrides["redact_values"] = True
    return load_gate_config(getattr(args, "config_path", None), cli_overrides=overrides)


def _flag(args: argparse.Namespace, name: str) -> bool:
    return bool(getattr(args, name, False))


def _emit_json(payload: Mapping[str, object]) -> None:
    """Emit a JSON payload to stdout with deterministic formatting."""

    print(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))


def _get_renderer() -> CLIRenderer:
    return create_renderer()


__all__ = ["CLIError", "build_parser", "run_cli"]
