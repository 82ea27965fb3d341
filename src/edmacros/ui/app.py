"""Textual macro inspector."""

from __future__ import annotations

from rich.table import Table
from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.events import Key
from textual.widgets import Input, Static

from ..expander import LineExpander
from ..keys import format_trigger
from ..table import MacroEntry, MacroTable
from .controller import ExpansionRecord, InspectorController

DEFAULT_LINE_PLACEHOLDER = r"type a line, \e for ESC (e.g. \eOP)"


def render_macro_table(entries: tuple[MacroEntry, ...] | list[MacroEntry]) -> Table:
    table = Table(title="Macros", expand=True)
    table.add_column("#", justify="right", style="dim", no_wrap=True)
    table.add_column("Trigger", style="bold cyan", no_wrap=True)
    table.add_column("Command")
    for index, entry in enumerate(entries, start=1):
        table.add_row(
            str(index),
            Text(format_trigger(entry.trigger)),
            Text(entry.command.decode("utf-8", "replace")),
        )
    return table


def _render_history(history: tuple[ExpansionRecord, ...]) -> Text:
    text = Text()
    for record in history:
        style = "green" if record.expanded else "dim"
        text.append(f"{record.source:<10} ", style="bold")
        text.append(format_trigger(record.line.rstrip(b"\r\n")))
        text.append("  ->  ")
        text.append(format_trigger(record.result.rstrip(b"\r\n")), style=style)
        text.append("\n")
    return text


class MacroInspectorApp(App[None]):
    """Press keys or type lines and see how they expand."""

    CSS = """
    Screen {
        layout: vertical;
    }

    #macros {
        height: auto;
        max-height: 50%;
        border: round $accent;
    }

    #history {
        height: 1fr;
        border: round $accent;
        padding: 0 1;
    }

    #status {
        height: 1;
        padding: 0 1;
        background: $panel;
        color: $text;
    }

    #line {
        height: 3;
        margin: 0 1 1 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "request_quit", "Quit", priority=True),
        Binding("ctrl+l", "clear_history", "Clear history", priority=True),
    ]

    def __init__(self, expander: LineExpander | None = None) -> None:
        super().__init__()
        self.expander = expander or LineExpander(MacroTable())
        self.controller = InspectorController(self.expander)
        self._quit_requested = False

    @property
    def quit_requested(self) -> bool:
        return self._quit_requested

    def compose(self) -> ComposeResult:
        yield Static(id="macros")
        yield Static(id="history")
        yield Static(id="status")
        yield Input(placeholder=DEFAULT_LINE_PLACEHOLDER, id="line")

    def on_mount(self) -> None:
        self.query_one("#line", Input).focus()
        self._refresh_view()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "line":
            return
        self.controller.handle_line(event.value)
        event.input.value = ""
        self._refresh_view()

    def action_request_quit(self) -> None:
        self._quit_requested = True
        self.exit()

    def action_clear_history(self) -> None:
        self.controller.clear_history()
        self._refresh_view()

    def on_key(self, event: Key) -> None:
        if event.key.startswith("f") and event.key[1:].isdigit():
            self.controller.handle_key(event.key)
            self._refresh_view()
            event.stop()

    def _refresh_view(self) -> None:
        snapshot = self.controller.snapshot()
        macros = self.query_one("#macros", Static)
        if snapshot.entries:
            macros.update(render_macro_table(snapshot.entries))
        else:
            macros.update(Text("no macros loaded", style="dim"))
        self.query_one("#history", Static).update(_render_history(snapshot.history))
        self.query_one("#status", Static).update(
            Text(f"macros={len(snapshot.entries)} | {snapshot.status}")
        )
