"""Mapping from output class to presentation color."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from pi.repl.colors import Color
from pi.repl.printer import ItemKind, PrinterItem

# Output class -> ReplTheme attribute holding its color.
_KIND_COLOR_FIELDS: dict[ItemKind, str] = {
    ItemKind.EVALUATION: "evaluation",
    ItemKind.OK: "ok",
    ItemKind.WARNING: "warning",
    ItemKind.RAW_OUTPUT: "raw_output",
    ItemKind.SHELL_OUTPUT: "shell_output",
    ItemKind.ERROR: "error",
}


@dataclass
class ReplTheme:
    """One color per output class, plus the prompt colors."""

    evaluation: Color = Color.WHITE
    ok: Color = Color.BLUE
    warning: Color = Color.CYAN
    raw_output: Color = Color.RED
    shell_output: Color = Color.YELLOW
    error: Color = Color.RED
    custom_default: Color = Color.WHITE
    input_prompt: Color = Color.YELLOW
    continuation_prompt: Color = Color.YELLOW
    diagnostic: Color = Color.BRIGHT_RED

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReplTheme:
        """Build a theme from ``{"ok": "green", ...}``; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Color] = {}
        for key, value in data.items():
            if key in known and value is not None:
                kwargs[key] = value if isinstance(value, Color) else Color.from_name(value)
        return cls(**kwargs)

    def color_for(self, item: PrinterItem) -> Color:
        """Resolve the foreground color of a text item.

        ``NEW_LINE`` items are layout instructions and have no color.
        """
        if item.kind is ItemKind.NEW_LINE:
            raise ValueError("NEW_LINE items are not colored")
        if item.kind is ItemKind.CUSTOM:
            return item.color if item.color is not None else self.custom_default
        return getattr(self, _KIND_COLOR_FIELDS[item.kind])
