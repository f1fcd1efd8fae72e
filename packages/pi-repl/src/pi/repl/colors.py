"""ANSI foreground colors."""

from __future__ import annotations

from enum import Enum


class Color(Enum):
    """ANSI SGR foreground colors."""

    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    MAGENTA = 35
    CYAN = 36
    WHITE = 37
    DEFAULT = 39
    GREY = 90
    BRIGHT_RED = 91
    BRIGHT_GREEN = 92
    BRIGHT_YELLOW = 93
    BRIGHT_BLUE = 94
    BRIGHT_MAGENTA = 95
    BRIGHT_CYAN = 96
    BRIGHT_WHITE = 97

    @property
    def sgr(self) -> str:
        return f"\x1b[{self.value}m"

    @classmethod
    def from_name(cls, name: str) -> Color:
        """Parse ``"bright_red"``, ``"Bright-Red"`` or ``"brightred"``."""
        key = name.strip().upper().replace("-", "_").replace(" ", "_")
        if key in cls.__members__:
            return cls[key]
        compact = key.replace("_", "")
        for member in cls:
            if member.name.replace("_", "") == compact:
                return member
        raise ValueError(f"Unknown color: {name!r}")
