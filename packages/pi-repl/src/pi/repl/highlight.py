"""Syntax highlighters for live input echo.

A highlighter turns raw input text into a ``Printer`` whose text items are
all ``CUSTOM``-classed, one per visual token, with ``NEW_LINE`` items at
line breaks. The concatenated item text must equal the input exactly so
that echo stays aligned with the buffer's coordinate model.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Protocol

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.token import Token
from pygments.util import ClassNotFound

from pi.repl.colors import Color
from pi.repl.printer import Printer, PrinterItem

TokenType = type(Token)


class Highlighter(Protocol):
    def highlight(self, text: str) -> Printer: ...


class PlainHighlighter:
    """Uncolored echo: one ``CUSTOM`` item per line."""

    def highlight(self, text: str) -> Printer:
        return Printer.from_string(text)


# Most specific token types first; lookups walk up the token hierarchy.
TOKEN_COLORS: dict[TokenType, Color] = {
    Token.Keyword.Constant: Color.CYAN,
    Token.Keyword: Color.MAGENTA,
    Token.Name.Builtin: Color.CYAN,
    Token.Name.Function: Color.BLUE,
    Token.Name.Class: Color.BRIGHT_YELLOW,
    Token.Name.Decorator: Color.BRIGHT_BLUE,
    Token.Literal.String: Color.GREEN,
    Token.Literal.Number: Color.BRIGHT_CYAN,
    Token.Comment: Color.GREY,
    Token.Operator: Color.YELLOW,
    Token.Error: Color.RED,
}


def token_color(token_type: TokenType) -> Color | None:
    """Return the color for *token_type* or its nearest colored ancestor."""
    current: TokenType | None = token_type
    while current is not None:
        color = TOKEN_COLORS.get(current)
        if color is not None:
            return color
        current = current.parent
    return None


@lru_cache(maxsize=8)
def _get_lexer(name: str) -> Lexer:
    # No newline stripping or appending: tokens must reproduce the input.
    return get_lexer_by_name(name, stripnl=False, ensurenl=False, stripall=False)


class PygmentsHighlighter:
    """Highlight input with a Pygments lexer.

    Unknown lexer names raise ``ValueError`` at construction time.
    """

    def __init__(self, lexer: str = "python") -> None:
        try:
            self._lexer = _get_lexer(lexer)
        except ClassNotFound as exc:
            raise ValueError(f"Unknown lexer: {lexer!r}") from exc
        self.lexer_name = lexer

    def highlight(self, text: str) -> Printer:
        printer = Printer()
        for token_type, value in self._lexer.get_tokens(text):
            color = token_color(token_type)
            lines = value.split("\n")
            for i, line in enumerate(lines):
                if i > 0:
                    printer.add_new_line(1)
                if line:
                    printer.push(PrinterItem.custom(line, color))
        return printer
