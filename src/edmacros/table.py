"""Macro table: trigger sequence to editor command bindings."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from os import PathLike, fspath
from pathlib import Path
from typing import BinaryIO

from .keys import decode_trigger

logger = logging.getLogger(__name__)

MAX_CONFIG_LINE = 511
SEPARATOR = b":"
COMMENT = b"#"
LINE_TERMINATORS = b"\r\n"
FIELD_WHITESPACE = b" \t"

MacroPath = str | PathLike[str]


class MacroLoadError(RuntimeError):
    """Raised when the macro table cannot be built."""


@dataclass(frozen=True)
class MacroEntry:
    """One trigger to command binding."""

    trigger: bytes
    command: bytes


def parse_macro_line(raw: bytes) -> MacroEntry | None:
    """Parse one macro-file line, returning None for comments and malformed lines."""
    if not raw or raw[:1] == COMMENT or raw[:1] in (b"\n", b"\r"):
        return None

    line = _strip_terminator(raw)
    if SEPARATOR not in line:
        return None

    spec, command = line.split(SEPARATOR, 1)
    spec = spec.strip(FIELD_WHITESPACE)
    command = command.strip(FIELD_WHITESPACE)
    if not spec or not command:
        return None

    trigger = decode_trigger(spec)
    return MacroEntry(trigger=trigger, command=command)


class MacroTable:
    """Ordered macro bindings; the most recently added entry wins on lookup."""

    def __init__(self) -> None:
        self._entries: list[MacroEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[MacroEntry]:
        return iter(list(self._entries))

    def entries(self) -> list[MacroEntry]:
        return list(self._entries)

    def add(self, trigger: bytes, command: bytes) -> MacroEntry:
        if not trigger:
            raise ValueError("empty macro trigger")
        if not command:
            raise ValueError("empty macro command")
        entry = MacroEntry(trigger=bytes(trigger), command=bytes(command))
        self._entries.insert(0, entry)
        return entry

    def load(self, path: MacroPath | None) -> int:
        """Load bindings from the macro file at PATH.

        A missing path, or one that cannot be opened, means no macros are
        configured and is not an error. Returns the number of entries added.
        """
        if path is None or not fspath(path):
            logger.debug("no macro file configured")
            return 0

        source = Path(path).expanduser()
        try:
            handle = source.open("rb")
        except OSError as exc:
            logger.debug("macro file %s not loaded: %s", source, exc)
            return 0

        added = 0
        with handle:
            for lineno, raw in enumerate(_read_lines(handle, source), start=1):
                try:
                    entry = parse_macro_line(raw)
                    if entry is None:
                        logger.debug("%s:%d: skipped", source, lineno)
                        continue
                    self._entries.insert(0, entry)
                except MemoryError as exc:
                    raise MacroLoadError(f"out of memory loading macros from {source}") from exc
                added += 1

        logger.info("loaded %d macro(s) from %s", added, source)
        return added

    def lookup(self, trigger: bytes) -> bytes | None:
        for entry in self._entries:
            if entry.trigger == trigger:
                return entry.command
        return None

    def clear(self) -> None:
        self._entries.clear()


def _read_lines(handle: BinaryIO, source: Path) -> Iterator[bytes]:
    while True:
        try:
            raw = handle.readline(MAX_CONFIG_LINE)
            if len(raw) == MAX_CONFIG_LINE and not raw.endswith(b"\n"):
                _discard_rest_of_line(handle)
        except OSError as exc:
            logger.warning("stopped reading %s: %s", source, exc)
            return
        except MemoryError as exc:
            raise MacroLoadError(f"out of memory reading {source}") from exc
        if not raw:
            return
        yield raw


def _discard_rest_of_line(handle: BinaryIO) -> None:
    while True:
        chunk = handle.readline(MAX_CONFIG_LINE)
        if not chunk or chunk.endswith(b"\n"):
            return


def _strip_terminator(raw: bytes) -> bytes:
    for index, byte in enumerate(raw):
        if byte in LINE_TERMINATORS:
            return raw[:index]
    return raw
