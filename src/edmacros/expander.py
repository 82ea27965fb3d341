"""Rewrite prefixed input lines into their bound editor commands."""

from __future__ import annotations

import logging

from .table import MacroTable

logger = logging.getLogger(__name__)

TRIGGER_PREFIX = 0x1B
MAX_TRIGGER_LENGTH = 63
DEFAULT_MAX_COMMAND_LENGTH = 1024

INSERT_COMMAND = b"i"
INSERT_TERMINATOR = b"\n.\n"
LINE_TERMINATORS = b"\r\n"
TOKEN_DELIMITERS = b" \t\r\n"
_DIGITS = b"0123456789"


class LineExpander:
    """Expansion context bound to one macro table.

    Each expander owns a scratch buffer that grows to the largest output
    built so far. Separate expanders share no mutable state.
    """

    def __init__(
        self,
        table: MacroTable,
        *,
        repeat_patterns: bool = True,
        max_command_length: int | None = DEFAULT_MAX_COMMAND_LENGTH,
    ) -> None:
        self.table = table
        self.repeat_patterns = repeat_patterns
        self.max_command_length = max_command_length
        self._scratch = bytearray()

    @property
    def capacity(self) -> int:
        return len(self._scratch)

    def expand(self, line: bytes) -> bytes:
        """Return the command bound to LINE's trigger, or LINE unchanged."""
        if not line or line[0] != TRIGGER_PREFIX:
            return line

        if self.repeat_patterns:
            block = self._expand_repeat(line)
            if block is not None:
                return block

        return self._expand_macro(line)

    def _expand_repeat(self, line: bytes) -> bytes | None:
        pos = 1
        while pos < len(line) and line[pos] in _DIGITS:
            pos += 1
        if pos == 1:
            return None
        if pos >= len(line) or line[pos] in LINE_TERMINATORS:
            return None

        digits = line[1:pos]
        limit = self.max_command_length
        if limit is not None and len(digits) > len(str(limit)):
            logger.debug("repeat count of %d digits exceeds limit", len(digits))
            return line
        try:
            count = int(digits)
        except ValueError:
            logger.debug("repeat count of %d digits not usable", len(digits))
            return line
        char = line[pos : pos + 1]
        tail_start = pos + 1
        tail_end = _find_any(line, LINE_TERMINATORS, tail_start)
        tail = line[tail_start:tail_end]

        size = len(INSERT_COMMAND) + count + len(tail) + len(INSERT_TERMINATOR)
        if not self._within_limit(size):
            logger.debug("repeat block of %d bytes exceeds limit", size)
            return line

        buf = self._reserve(size)
        if buf is None:
            return line

        end = len(INSERT_COMMAND)
        buf[:end] = INSERT_COMMAND
        try:
            buf[end : end + count] = char * count
        except (MemoryError, OverflowError):
            logger.error("cannot build repeat block of %d bytes", size)
            return line
        end += count
        buf[end : end + len(tail)] = tail
        end += len(tail)
        buf[end : end + len(INSERT_TERMINATOR)] = INSERT_TERMINATOR
        end += len(INSERT_TERMINATOR)
        return bytes(buf[:end])

    def _expand_macro(self, line: bytes) -> bytes:
        token_end = _find_any(line, TOKEN_DELIMITERS, 1)
        if token_end - 1 >= MAX_TRIGGER_LENGTH:
            logger.debug("trigger of %d bytes too long", token_end - 1)
            return line

        command = self.table.lookup(line[:token_end])
        if command is None:
            return line

        needs_terminator = command[-1:] not in (b"\n", b"\r")
        size = len(command) + int(needs_terminator)
        if not self._within_limit(size):
            logger.debug("macro command of %d bytes exceeds limit", size)
            return line

        buf = self._reserve(size)
        if buf is None:
            return line

        buf[: len(command)] = command
        if needs_terminator:
            buf[len(command)] = 0x0A
        return bytes(buf[:size])

    def _within_limit(self, size: int) -> bool:
        return self.max_command_length is None or size <= self.max_command_length

    def _reserve(self, size: int) -> bytearray | None:
        if size > len(self._scratch):
            try:
                self._scratch.extend(bytes(size - len(self._scratch)))
            except (MemoryError, OverflowError):
                logger.error("cannot grow expansion buffer to %d bytes", size)
                return None
        return self._scratch


def expand_line(table: MacroTable, line: bytes) -> bytes:
    """Expand LINE against TABLE with a throwaway expander."""
    return LineExpander(table).expand(line)


def _find_any(data: bytes, stops: bytes, start: int) -> int:
    for index in range(start, len(data)):
        if data[index] in stops:
            return index
    return len(data)
