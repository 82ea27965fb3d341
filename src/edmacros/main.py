"""Top-level CLI entrypoint dispatcher."""

from __future__ import annotations

from collections.abc import Sequence

from .cli import main as run_cli


def main(argv: Sequence[str] | None = None) -> None:
    status = run_cli(argv)
    if status:
        raise SystemExit(status)
