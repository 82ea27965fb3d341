"""Trigger notation and terminal key translation helpers."""

from __future__ import annotations

ESC = 0x1B
ESCAPE_NOTATION = b"\\e"

# xterm sequences, leading ESC included.
TERMINAL_KEY_SEQUENCES: dict[str, bytes] = {
    "f1": b"\x1bOP",
    "f2": b"\x1bOQ",
    "f3": b"\x1bOR",
    "f4": b"\x1bOS",
    "f5": b"\x1b[15~",
    "f6": b"\x1b[17~",
    "f7": b"\x1b[18~",
    "f8": b"\x1b[19~",
    "f9": b"\x1b[20~",
    "f10": b"\x1b[21~",
    "f11": b"\x1b[23~",
    "f12": b"\x1b[24~",
    "up": b"\x1b[A",
    "down": b"\x1b[B",
    "right": b"\x1b[C",
    "left": b"\x1b[D",
    "home": b"\x1b[H",
    "end": b"\x1b[F",
    "insert": b"\x1b[2~",
    "delete": b"\x1b[3~",
    "pageup": b"\x1b[5~",
    "pagedown": b"\x1b[6~",
}

KEY_ALIASES = {
    "page_up": "pageup",
    "page_down": "pagedown",
    "pgup": "pageup",
    "pgdn": "pagedown",
    "ins": "insert",
    "del": "delete",
}


def decode_trigger(spec: str | bytes) -> bytes:
    """Turn a trigger written in macro-file notation into raw bytes.

    Only a leading ``\\e`` is special: it stands for the ESC byte.
    """
    raw = spec.encode("utf-8", "surrogateescape") if isinstance(spec, str) else bytes(spec)
    if raw.startswith(ESCAPE_NOTATION):
        return bytes([ESC]) + raw[len(ESCAPE_NOTATION) :]
    return raw


def format_trigger(trigger: bytes) -> str:
    """Render trigger bytes for humans (``\\e`` for ESC, ``^X`` for controls)."""
    parts: list[str] = []
    for byte in trigger:
        if byte == ESC:
            parts.append("\\e")
        elif byte < 0x20:
            parts.append("^" + chr(byte + 0x40))
        elif byte == 0x7F:
            parts.append("^?")
        elif byte > 0x7F:
            parts.append(f"\\x{byte:02x}")
        else:
            parts.append(chr(byte))
    return "".join(parts)


def key_to_sequence(name: str) -> bytes | None:
    """Return the byte sequence a terminal sends for key NAME, if known."""
    key = name.strip().lower()
    key = KEY_ALIASES.get(key, key)
    return TERMINAL_KEY_SEQUENCES.get(key)
