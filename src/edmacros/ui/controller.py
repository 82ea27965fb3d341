"""UI adapter that feeds keys and typed lines through the expander."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from ..expander import LineExpander
from ..keys import decode_trigger, format_trigger, key_to_sequence
from ..table import MacroEntry

HISTORY_LIMIT = 50


@dataclass(frozen=True)
class ExpansionRecord:
    """One input and what the expander made of it."""

    source: str
    line: bytes
    result: bytes
    expanded: bool


@dataclass(frozen=True)
class InspectorSnapshot:
    """Immutable inspector state for rendering."""

    entries: tuple[MacroEntry, ...]
    history: tuple[ExpansionRecord, ...]
    status: str


class InspectorController:
    """Stateful adapter between UI events and the macro expander."""

    def __init__(self, expander: LineExpander) -> None:
        self.expander = expander
        self._status = "ready"
        self._history: deque[ExpansionRecord] = deque(maxlen=HISTORY_LIMIT)

    def snapshot(self) -> InspectorSnapshot:
        return InspectorSnapshot(
            entries=tuple(self.expander.table.entries()),
            history=tuple(reversed(self._history)),
            status=self._status,
        )

    def handle_key(self, name: str) -> str:
        sequence = key_to_sequence(name)
        if sequence is None:
            return self._set_status(f"no terminal sequence for key: {name}")
        return self._expand(f"key {name}", sequence + b"\n")

    def handle_line(self, text: str) -> str:
        if not text.strip():
            return self._set_status("empty line")
        return self._expand("line", decode_trigger(text) + b"\n")

    def clear_history(self) -> str:
        self._history.clear()
        return self._set_status("history cleared")

    def _expand(self, source: str, line: bytes) -> str:
        result = self.expander.expand(line)
        expanded = result != line
        self._history.append(
            ExpansionRecord(source=source, line=line, result=result, expanded=expanded)
        )
        shown = format_trigger(line.rstrip(b"\r\n"))
        if not expanded:
            return self._set_status(f"{shown}: no macro")
        command = format_trigger(result.rstrip(b"\r\n"))
        return self._set_status(f"{shown} -> {command}")

    def _set_status(self, message: str) -> str:
        self._status = message
        return message
