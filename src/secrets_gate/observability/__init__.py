"""Public observability primitives: stdlib/structlog logging setup."""

from secrets_gate.observability.logging import setup_logging, shutdown_logging

__all__ = [
    "setup_logging",
    "shutdown_logging",
]
