"""Keyboard input splitting and parsing for legacy terminal sequences.

Raw stdin chunks are first split into complete key sequences with
:func:`split_sequences`; each sequence is then mapped to a key identifier
such as ``"a"``, ``"ctrl+c"`` or ``"left"`` by :func:`parse_key`.
"""

from __future__ import annotations

KeyId = str

ESC = "\x1b"

# ---------------------------------------------------------------------------
# Sequence tables
# ---------------------------------------------------------------------------

# Unmodified navigation and editing keys, CSI and SS3 forms.
NAVIGATION_SEQUENCES: dict[str, KeyId] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[7~": "home",
    "\x1b[4~": "end",
    "\x1b[8~": "end",
    "\x1b[3~": "delete",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
    "\x1b[Z": "shift+tab",
    "\x1b[13;2u": "shift+enter",
    "\x1b[27;2;13~": "shift+enter",
}

# xterm "CSI 1 ; <mod> <final>" arrows: 3 is alt, 5 is ctrl.
_MODIFIER_CODES: dict[str, str] = {"3": "alt", "5": "ctrl"}
_ARROW_FINALS: dict[str, KeyId] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
}

MODIFIED_SEQUENCES: dict[str, KeyId] = {
    f"\x1b[1;{code}{final}": f"{modifier}+{key}"
    for code, modifier in _MODIFIER_CODES.items()
    for final, key in _ARROW_FINALS.items()
}

SINGLE_BYTE_KEYS: dict[str, KeyId] = {
    ESC: "escape",
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
    " ": "space",
    "\x7f": "backspace",
    "\x08": "backspace",
}


# ---------------------------------------------------------------------------
# Splitting
# ---------------------------------------------------------------------------


def _sequence_length(data: str) -> int:
    """Length of the escape sequence at the start of *data*, 0 if incomplete."""
    if len(data) < 2:
        return 0

    introducer = data[1]

    # CSI: ESC [ params final-byte
    if introducer == "[":
        for i in range(2, len(data)):
            if 0x40 <= ord(data[i]) <= 0x7E:
                return i + 1
        return 0

    # SS3: ESC O <char>
    if introducer == "O":
        return 3 if len(data) >= 3 else 0

    # Meta: ESC <char>
    return 2


def split_sequences(data: str) -> tuple[list[str], str]:
    """Split accumulated input into complete key sequences.

    Returns ``(sequences, remainder)`` where *remainder* is a trailing
    incomplete escape sequence to be prepended to the next chunk.
    """
    sequences: list[str] = []
    pos = 0

    while pos < len(data):
        if data[pos] == ESC:
            length = _sequence_length(data[pos:])
            if length == 0:
                return sequences, data[pos:]
            sequences.append(data[pos : pos + length])
            pos += length
        else:
            sequences.append(data[pos])
            pos += 1

    return sequences, ""


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _parse_meta(ch: str) -> KeyId | None:
    """Key id for ``ESC`` followed by *ch* (the alt modifier)."""
    base = SINGLE_BYTE_KEYS.get(ch)
    if base in ("enter", "backspace"):
        return f"alt+{base}"
    if ch.isprintable():
        return f"alt+{ch.lower()}"
    return None


def parse_key(data: str) -> KeyId | None:
    """Parse one key sequence and return its identifier, or ``None``."""
    if not data:
        return None

    key = MODIFIED_SEQUENCES.get(data) or NAVIGATION_SEQUENCES.get(data)
    if key is not None:
        return key

    if data in SINGLE_BYTE_KEYS:
        return SINGLE_BYTE_KEYS[data]

    if len(data) == 1:
        code = ord(data)
        # C0 control bytes 0x01-0x1a are ctrl+a .. ctrl+z
        if 1 <= code <= 26:
            return f"ctrl+{chr(code + 96)}"
        return data if data.isprintable() else None

    if len(data) == 2 and data[0] == ESC:
        return _parse_meta(data[1])

    return None


def matches_key(data: str, key_id: KeyId) -> bool:
    """Check whether raw input *data* is the key named *key_id*."""
    parsed = parse_key(data)
    return parsed is not None and parsed == key_id


def is_printable(data: str) -> bool:
    """True for text that should be inserted rather than interpreted."""
    return bool(data) and not data.startswith(ESC) and all(
        ch.isprintable() for ch in data
    )
