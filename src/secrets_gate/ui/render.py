"""Output rendering abstraction for the secrets-gate CLI.

File: src/secrets_gate/ui/render.py

Purpose
- Provide a thin plain-text rendering layer for CLI output.
- Send failure reports to stderr so stdout stays machine-consumable.
"""

from __future__ import annotations

import sys
from typing import IO, TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class CLIRenderer:
    """Thin CLI output renderer producing deterministic plain text."""

    def __init__(self, *, out: IO[str] | None = None, err: IO[str] | None = None) -> None:
        self._out = out
        self._err = err

    @property
    def out(self) -> IO[str]:
        return self._out if self._out is not None else sys.stdout

    @property
    def err(self) -> IO[str]:
        return self._err if self._err is not None else sys.stderr

    def kv(self, key: str, value: object) -> None:
        print(f"{key}: {value}", file=self.out)

    def text(self, line: str) -> None:
        print(line, file=self.out)

    def table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
    ) -> None:
        """Print a formatted ASCII table."""

        if not rows:
            return

        col_count = len(headers)
        widths = [len(h) for h in headers]
        for row in rows:
            for i in range(min(len(row), col_count)):
                widths[i] = max(widths[i], len(str(row[i])))

        def _pad(cells: Sequence[str]) -> str:
            parts: list[str] = []
            for i in range(col_count):
                cell = str(cells[i]) if i < len(cells) else ""
                parts.append(cell.ljust(widths[i]))
            return "  ".join(parts).rstrip()

        print(f"  {_pad(list(headers))}", file=self.out)
        print(f"  {'  '.join('-' * w for w in widths)}", file=self.out)
        for row in rows:
            print(f"  {_pad(list(row))}", file=self.out)

    def ok(self, label: str) -> None:
        """Print a passing check."""

        print(f"OK  {label}", file=self.out)

    def fail(self, label: str, detail: str = "") -> None:
        """Print a failing check and its multi-line detail to stderr."""

        print(f"FAIL  {label}", file=self.err)
        if detail:
            self.err.write(detail if detail.endswith("\n") else detail + "\n")


def create_renderer(*, out: IO[str] | None = None, err: IO[str] | None = None) -> CLIRenderer:
    """Create a CLI renderer bound to the given streams (default: process stdio)."""

    return CLIRenderer(out=out, err=err)


__all__ = ["CLIRenderer", "create_renderer"]
