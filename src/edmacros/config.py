"""Runtime settings for macro loading and expansion."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .expander import DEFAULT_MAX_COMMAND_LENGTH, LineExpander
from .table import MacroTable

MACRO_FILE_ENV = "EDMACROS_FILE"
NO_REPEAT_ENV = "EDMACROS_NO_REPEAT"
DEFAULT_MACRO_FILE = "~/.edmacros"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class MacroSettings:
    """Where macros come from and how lines are expanded."""

    macro_file: Path | None = None
    repeat_patterns: bool = True
    max_command_length: int | None = DEFAULT_MAX_COMMAND_LENGTH

    @classmethod
    def resolve(
        cls,
        macro_file: str | os.PathLike[str] | None = None,
        *,
        repeat_patterns: bool | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> MacroSettings:
        env = os.environ if environ is None else environ

        path: Path | None
        if macro_file is not None and os.fspath(macro_file):
            path = Path(macro_file).expanduser()
        elif env.get(MACRO_FILE_ENV):
            path = Path(env[MACRO_FILE_ENV]).expanduser()
        else:
            default = Path(DEFAULT_MACRO_FILE).expanduser()
            path = default if default.is_file() else None

        if repeat_patterns is None:
            repeat_patterns = env.get(NO_REPEAT_ENV, "").strip().lower() not in _TRUTHY

        return cls(macro_file=path, repeat_patterns=repeat_patterns)


def load_table(settings: MacroSettings) -> MacroTable:
    table = MacroTable()
    table.load(settings.macro_file)
    return table


def build_expander(settings: MacroSettings, table: MacroTable) -> LineExpander:
    return LineExpander(
        table,
        repeat_patterns=settings.repeat_patterns,
        max_command_length=settings.max_command_length,
    )
