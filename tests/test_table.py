from pathlib import Path

import pytest

from edmacros.table import (
    MAX_CONFIG_LINE,
    MacroEntry,
    MacroLoadError,
    MacroTable,
    parse_macro_line,
)


def _write(tmp_path: Path, content: bytes) -> Path:
    path = tmp_path / "macros"
    path.write_bytes(content)
    return path


def test_load_and_lookup_round_trip(tmp_path: Path) -> None:
    path = _write(tmp_path, b"\\eOP:1\n\\eOQ:  w notes.txt  \n")
    table = MacroTable()

    assert table.load(path) == 2
    assert table.lookup(b"\x1bOP") == b"1"
    assert table.lookup(b"\x1bOQ") == b"w notes.txt"
    assert len(table) == 2


def test_later_lines_shadow_earlier_ones(tmp_path: Path) -> None:
    path = _write(tmp_path, b"a:cmd1\na:cmd2\n")
    table = MacroTable()
    table.load(path)

    assert table.lookup(b"a") == b"cmd2"
    assert [entry.command for entry in table] == [b"cmd2", b"cmd1"]


def test_escape_notation_becomes_esc_byte() -> None:
    entry = parse_macro_line(b"\\eOP:foo\n")
    assert entry == MacroEntry(trigger=b"\x1bOP", command=b"foo")


def test_only_leading_escape_is_decoded() -> None:
    entry = parse_macro_line(b"x\\e:foo")
    assert entry is not None
    assert entry.trigger == b"x\\e"

    entry = parse_macro_line(b"\\n:foo")
    assert entry is not None
    assert entry.trigger == b"\\n"


@pytest.mark.parametrize(
    "raw",
    [
        b"",
        b"\n",
        b"\r\n",
        b"# \\eOP:comment\n",
        b"no separator here\n",
        b":missing trigger\n",
        b"\\eOP:\n",
        b"  \t:   \n",
    ],
)
def test_comments_blank_and_malformed_lines_are_skipped(raw: bytes) -> None:
    assert parse_macro_line(raw) is None


def test_split_happens_at_first_separator() -> None:
    entry = parse_macro_line(b"\\eOR:s/a:b/c/\r\n")
    assert entry is not None
    assert entry.trigger == b"\x1bOR"
    assert entry.command == b"s/a:b/c/"


def test_missing_or_empty_path_loads_nothing(tmp_path: Path) -> None:
    table = MacroTable()

    assert table.load(None) == 0
    assert table.load("") == 0
    assert table.load(tmp_path / "absent") == 0
    assert table.load(tmp_path) == 0
    assert len(table) == 0


def test_overlong_line_is_truncated(tmp_path: Path) -> None:
    command = b"p" * (MAX_CONFIG_LINE + 100)
    path = _write(tmp_path, b"k:" + command + b"\nj:next\n")
    table = MacroTable()
    table.load(path)

    bound = table.lookup(b"k")
    assert bound is not None
    assert len(bound) == MAX_CONFIG_LINE - 2
    assert table.lookup(b"j") == b"next"


def test_clear_is_idempotent(tmp_path: Path) -> None:
    table = MacroTable()
    table.load(_write(tmp_path, b"a:b\n"))

    table.clear()
    table.clear()

    assert len(table) == 0
    assert table.lookup(b"a") is None


def test_add_prepends_and_validates() -> None:
    table = MacroTable()
    table.add(b"\x1bOP", b"first")
    table.add(b"\x1bOP", b"second")

    assert table.lookup(b"\x1bOP") == b"second"

    with pytest.raises(ValueError, match="empty macro trigger"):
        table.add(b"", b"cmd")
    with pytest.raises(ValueError, match="empty macro command"):
        table.add(b"x", b"")


def test_unknown_trigger_lookup_returns_none() -> None:
    table = MacroTable()
    table.add(b"\x1bOP", b"w")
    assert table.lookup(b"\x1bOQ") is None
    assert table.lookup(b"\x1bO") is None


def test_memory_error_during_load_raises_and_keeps_prior_entries(
    tmp_path: Path, monkeypatch
) -> None:
    path = _write(tmp_path, b"a:1\nb:2\nc:3\n")
    real_parse = parse_macro_line
    calls: list[bytes] = []

    def flaky_parse(raw: bytes) -> MacroEntry | None:
        calls.append(raw)
        if len(calls) == 2:
            raise MemoryError
        return real_parse(raw)

    monkeypatch.setattr("edmacros.table.parse_macro_line", flaky_parse)
    table = MacroTable()

    with pytest.raises(MacroLoadError, match="out of memory"):
        table.load(path)

    assert table.lookup(b"a") == b"1"
    assert table.lookup(b"c") is None


def test_overlong_line_is_read_in_bounded_chunks(tmp_path: Path, monkeypatch) -> None:
    path = _write(tmp_path, b"k:" + b"p" * 5000 + b"\nj:next\n")
    sizes: list[int] = []
    real_open = Path.open

    class TrackingReader:
        def __init__(self, handle) -> None:
            self._handle = handle

        def __enter__(self) -> "TrackingReader":
            return self

        def __exit__(self, *exc_info) -> None:
            self._handle.close()

        def readline(self, size: int = -1) -> bytes:
            sizes.append(size)
            return self._handle.readline(size)

    def tracking_open(self: Path, *args, **kwargs) -> TrackingReader:
        return TrackingReader(real_open(self, *args, **kwargs))

    monkeypatch.setattr(Path, "open", tracking_open)
    table = MacroTable()
    table.load(path)

    assert sizes
    assert all(0 < size <= MAX_CONFIG_LINE for size in sizes)
    assert table.lookup(b"j") == b"next"
    bound = table.lookup(b"k")
    assert bound is not None
    assert len(bound) == MAX_CONFIG_LINE - 2


def test_line_of_exactly_max_length_keeps_following_line(tmp_path: Path) -> None:
    body = b"k:" + b"p" * (MAX_CONFIG_LINE - 2)
    path = _write(tmp_path, body + b"\nj:next\n")
    table = MacroTable()
    table.load(path)

    assert table.lookup(b"k") == b"p" * (MAX_CONFIG_LINE - 2)
    assert table.lookup(b"j") == b"next"
