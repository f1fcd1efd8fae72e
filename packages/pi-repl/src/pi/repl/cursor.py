"""Physical cursor bookkeeping for a bounded terminal viewport.

``Cursor`` tracks where the terminal cursor is, which row holds the start
of the current input, and how far pending content would overflow the
bottom of the screen. All coordinates are zero-based ``(col, row)``.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

from wcwidth import wcswidth

if TYPE_CHECKING:
    from pi.repl.buffer import EditBuffer
    from pi.repl.terminal import Terminal


@dataclass
class Bound:
    width: int
    height: int


@dataclass
class CursorPosition:
    col: int = 0
    row: int = 0


class Cursor:
    def __init__(self, terminal: Terminal, *, input_start_col: int) -> None:
        self.terminal = terminal
        self.input_start_col = input_start_col
        self.bound = Bound(1, 1)
        self.pos = CursorPosition()
        self.starting_row = 0
        self._saved: CursorPosition | None = None
        self.measure()

    # -- measurement ----------------------------------------------------------

    def measure(self) -> Bound:
        """Re-read the terminal size and clamp the tracked position into it."""
        self.bound = Bound(max(1, self.terminal.columns), max(1, self.terminal.rows))
        self.pos.col = min(self.pos.col, self.bound.width)
        self.pos.row = min(self.pos.row, self.last_row)
        self.starting_row = min(self.starting_row, self.last_row)
        return self.bound

    @property
    def last_row(self) -> int:
        return self.bound.height - 1

    @property
    def input_width(self) -> int:
        """Columns available to input text after the prompt marker."""
        return max(1, self.bound.width - self.input_start_col)

    # -- movement -------------------------------------------------------------

    def goto(self, col: int, row: int) -> None:
        row = max(0, min(row, self.last_row))
        col = max(0, min(col, self.bound.width))
        self.terminal.move_to(col, row)
        self.pos.col = col
        self.pos.row = row

    def goto_start(self) -> None:
        """Move to the first column of the current input's first row."""
        self.goto(0, self.starting_row)

    def goto_next_row_terminal_start(self) -> None:
        if self.pos.row < self.last_row:
            self.goto(0, self.pos.row + 1)
            return
        # On the last row a line feed makes the terminal scroll by one.
        self.terminal.write("\r\n")
        self.pos.col = 0
        self.starting_row = max(0, self.starting_row - 1)

    def use_current_row_as_starting_row(self) -> None:
        self.starting_row = self.pos.row

    def move_right(self) -> None:
        """Account for one input cell written at the cursor."""
        if self.pos.col >= self.bound.width - 1:
            self.pos.col = self.input_start_col
            self.pos.row = min(self.pos.row + 1, self.last_row)
        else:
            self.pos.col += 1

    def advance_by_text(self, text: str) -> None:
        """Account for single-line output text written at the cursor."""
        width = wcswidth(text)
        if width < 0:
            width = len(text)
        col = self.pos.col + width
        # A full row leaves the cursor pending at col == width, not wrapped.
        wraps = (col - 1) // self.bound.width if col > 0 else 0
        self.pos.col = col - wraps * self.bound.width
        self.pos.row = min(self.pos.row + wraps, self.last_row)

    def advance_row(self) -> None:
        """Account for an explicit ``\\r\\n`` written by the caller."""
        self.pos.col = 0
        if self.pos.row < self.last_row:
            self.pos.row += 1
        else:
            self.starting_row = max(0, self.starting_row - 1)

    def shift_up(self, rows: int) -> None:
        """Update bookkeeping after the terminal scrolled up by *rows*."""
        self.pos.row = max(0, self.pos.row - rows)
        self.starting_row = max(0, self.starting_row - rows)

    def pin_to_last_row(self) -> None:
        self.pos.row = self.last_row

    def is_at_col(self, col: int) -> bool:
        return self.pos.col == col

    # -- overflow -------------------------------------------------------------

    def screen_height_overflow_by_new_lines(self, new_lines: int) -> int:
        """Rows the screen must scroll so *new_lines* more rows fit."""
        return max(0, self.pos.row + new_lines - self.last_row)

    # -- buffer mapping -------------------------------------------------------

    def buffer_pos_to_cursor_pos(self, buffer: EditBuffer, pos: int) -> tuple[int, int]:
        col, row = buffer.position_to_coord(pos)
        return col + self.input_start_col, row + self.starting_row

    def input_last_pos(self, buffer: EditBuffer) -> tuple[int, int]:
        return self.buffer_pos_to_cursor_pos(buffer, len(buffer))

    def goto_buffer_position(self, buffer: EditBuffer) -> None:
        self.goto(*self.buffer_pos_to_cursor_pos(buffer, buffer.cursor))

    def goto_input_end(self, buffer: EditBuffer) -> None:
        self.goto(*self.input_last_pos(buffer))

    # -- visibility -----------------------------------------------------------

    def hide(self) -> None:
        self.terminal.hide_cursor()

    def show(self) -> None:
        self.terminal.show_cursor()

    # -- save / restore -------------------------------------------------------

    def save_position(self) -> None:
        self._saved = CursorPosition(self.pos.col, self.pos.row)

    def restore_position(self) -> None:
        if self._saved is None:
            return
        saved, self._saved = self._saved, None
        self.goto(saved.col, saved.row)

    @contextmanager
    def saved_position(self) -> Iterator[None]:
        """Save the position for the duration of a redraw.

        On success the terminal cursor is moved back. On failure only the
        bookkeeping is restored (the terminal is assumed unusable) and the
        error propagates.
        """
        self.save_position()
        try:
            yield
        except BaseException:
            saved, self._saved = self._saved, None
            if saved is not None:
                self.pos = saved
            raise
        self.restore_position()
