"""Edit buffer with a wrap-aware coordinate model.

The buffer is a flat list of characters plus an insertion cursor. Every
position can be translated into a ``(col, row)`` pair relative to the
start of the text, taking both explicit newlines and automatic wrapping
at ``wrap_width`` columns into account.
"""

from __future__ import annotations

from typing import Iterator

Coord = tuple[int, int]


class EditBuffer:
    """Mutable character sequence with an insertion cursor.

    ``cursor`` is always kept inside ``[0, len(buffer)]``.
    """

    def __init__(self, wrap_width: int, text: str = "") -> None:
        if wrap_width < 1:
            raise ValueError(f"wrap_width must be >= 1, got {wrap_width}")
        self.wrap_width = wrap_width
        self.content: list[str] = list(text)
        self.cursor: int = 0

    @classmethod
    def from_text(cls, text: str, wrap_width: int) -> EditBuffer:
        return cls(wrap_width, text)

    # -- mutation -------------------------------------------------------------

    def insert(self, c: str) -> None:
        """Insert *c* at the cursor and advance past it."""
        self.content.insert(self.cursor, c)
        self.move_forward()

    def insert_sequence(self, s: str) -> None:
        for c in s:
            self.insert(c)

    def remove_current(self) -> str | None:
        """Remove and return the character under the cursor, if any.

        The cursor does not move; the tail shifts left onto it.
        """
        if self.cursor < len(self.content):
            return self.content.pop(self.cursor)
        return None

    def clear(self) -> None:
        self.content.clear()
        self.cursor = 0

    # -- navigation -----------------------------------------------------------

    def set_cursor(self, pos: int) -> None:
        self.cursor = max(0, min(pos, len(self.content)))

    def move_forward(self) -> None:
        if self.cursor < len(self.content):
            self.cursor += 1

    def move_backward(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1

    def goto_start(self) -> None:
        self.cursor = 0

    def goto_end(self) -> None:
        self.cursor = len(self.content)

    # -- queries --------------------------------------------------------------

    def peek_previous(self) -> str | None:
        if self.cursor > 0:
            return self.content[self.cursor - 1]
        return None

    def peek_current(self) -> str | None:
        if self.cursor < len(self.content):
            return self.content[self.cursor]
        return None

    def peek_next(self) -> str | None:
        if self.cursor + 1 < len(self.content):
            return self.content[self.cursor + 1]
        return None

    def is_empty(self) -> bool:
        return not self.content

    def is_at_start(self) -> bool:
        return self.cursor == 0

    def is_at_end(self) -> bool:
        return self.cursor == len(self.content)

    def is_at_line_start(self) -> bool:
        """True when indentation (rather than completion) applies here."""
        return self.is_empty() or self.peek_previous() in ("\n", "\t")

    # -- coordinates ----------------------------------------------------------

    def position_to_coord(self, pos: int) -> Coord:
        """Translate buffer index *pos* into ``(col, row)``.

        ``col`` resets on every newline and whenever it reaches
        ``wrap_width``; each reset advances ``row``. Out-of-range
        positions are clamped.
        """
        pos = max(0, min(pos, len(self.content)))
        col = 0
        row = 0
        for c in self.content[:pos]:
            if c == "\n":
                col = 0
                row += 1
            else:
                col += 1
            if col == self.wrap_width:
                col = 0
                row += 1
        return col, row

    def cursor_coord(self) -> Coord:
        return self.position_to_coord(self.cursor)

    def last_position_coord(self) -> Coord:
        return self.position_to_coord(len(self.content))

    # -- conversion -----------------------------------------------------------

    def to_text(self) -> str:
        return "".join(self.content)

    def __str__(self) -> str:
        return self.to_text()

    def __len__(self) -> int:
        return len(self.content)

    def __iter__(self) -> Iterator[str]:
        return iter(self.content)

    def __repr__(self) -> str:
        return (
            f"EditBuffer(wrap_width={self.wrap_width}, "
            f"text={self.to_text()!r}, cursor={self.cursor})"
        )
