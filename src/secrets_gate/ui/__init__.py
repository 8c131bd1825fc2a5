"""Command-line surface: argument routing and plain-text rendering."""

from secrets_gate.ui.cli import CLIError, build_parser, run_cli
from secrets_gate.ui.render import CLIRenderer, create_renderer

__all__ = ["CLIError", "CLIRenderer", "build_parser", "create_renderer", "run_cli"]
