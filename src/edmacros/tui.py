"""TUI entrypoint."""

from __future__ import annotations

from .expander import LineExpander
from .ui.app import MacroInspectorApp


def run_tui(expander: LineExpander | None = None) -> None:
    app = MacroInspectorApp(expander)
    app.run()
