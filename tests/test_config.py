from pathlib import Path

from edmacros.config import (
    MACRO_FILE_ENV,
    NO_REPEAT_ENV,
    MacroSettings,
    build_expander,
    load_table,
)


def test_explicit_path_wins_over_environment(tmp_path: Path) -> None:
    explicit = tmp_path / "explicit"
    settings = MacroSettings.resolve(explicit, environ={MACRO_FILE_ENV: str(tmp_path / "env")})
    assert settings.macro_file == explicit


def test_environment_path_used_when_no_argument(tmp_path: Path) -> None:
    settings = MacroSettings.resolve(None, environ={MACRO_FILE_ENV: str(tmp_path / "env")})
    assert settings.macro_file == tmp_path / "env"


def test_default_file_only_when_present(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    assert MacroSettings.resolve(environ={}).macro_file is None

    (tmp_path / ".edmacros").write_text("\\eOP:w\n")
    assert MacroSettings.resolve(environ={}).macro_file == tmp_path / ".edmacros"


def test_no_repeat_environment_flag() -> None:
    assert MacroSettings.resolve(environ={}).repeat_patterns
    assert not MacroSettings.resolve(environ={NO_REPEAT_ENV: "yes"}).repeat_patterns
    assert MacroSettings.resolve(environ={NO_REPEAT_ENV: "0"}).repeat_patterns
    assert not MacroSettings.resolve(
        environ={NO_REPEAT_ENV: "0"}, repeat_patterns=False
    ).repeat_patterns


def test_load_table_and_build_expander(tmp_path: Path) -> None:
    path = tmp_path / "macros"
    path.write_text("\\eOP:w\n")
    settings = MacroSettings(macro_file=path, repeat_patterns=False, max_command_length=8)

    table = load_table(settings)
    expander = build_expander(settings, table)

    assert table.lookup(b"\x1bOP") == b"w"
    assert expander.table is table
    assert not expander.repeat_patterns
    assert expander.max_command_length == 8
    assert expander.expand(b"\x1bOP\n") == b"w\n"


def test_missing_macro_file_gives_empty_table(tmp_path: Path) -> None:
    table = load_table(MacroSettings(macro_file=tmp_path / "missing"))
    assert len(table) == 0
