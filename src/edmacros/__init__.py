"""edmacros package."""

__all__ = [
    "LineExpander",
    "MacroEntry",
    "MacroLoadError",
    "MacroSettings",
    "MacroTable",
    "decode_trigger",
    "expand_line",
    "format_trigger",
]
__version__ = "0.1.0"

from .config import MacroSettings
from .expander import LineExpander, expand_line
from .keys import decode_trigger, format_trigger
from .table import MacroEntry, MacroLoadError, MacroTable
