"""Cursor and scroll engine: draws input echo and output batches.

The renderer writes ``Printer`` batches to a bounded terminal and keeps
``Cursor`` bookkeeping in step with what the terminal actually shows.
Before drawing anything that would run past the bottom row it scrolls the
screen up by the minimal amount, and it shifts its row bookkeeping by the
same amount.

Every terminal write may raise ``OSError``; nothing here retries or
swallows it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pi.repl.colors import Color
from pi.repl.cursor import Cursor
from pi.repl.highlight import Highlighter, PlainHighlighter
from pi.repl.printer import ItemKind, Printer
from pi.repl.settings import ReplSettings

if TYPE_CHECKING:
    from pi.repl.buffer import EditBuffer
    from pi.repl.terminal import Terminal

logger = logging.getLogger(__name__)


class Renderer:
    def __init__(
        self,
        terminal: Terminal,
        settings: ReplSettings,
        *,
        highlighter: Highlighter | None = None,
    ) -> None:
        self.terminal = terminal
        self.settings = settings
        self.theme = settings.theme
        self.highlighter: Highlighter = highlighter or PlainHighlighter()
        self.cursor = Cursor(terminal, input_start_col=settings.input_start_col)
        self.highlight_locked = False

    # -- low-level writes -----------------------------------------------------

    def write(self, text: str, color: Color | None = None) -> None:
        """Write input-area text one cell at a time, tracking the cursor."""
        if color is not None:
            self.terminal.set_fg(color)
        for c in text:
            # Tabs occupy a single cell in the buffer's coordinate model.
            self.terminal.write(" " if c == "\t" else c)
            self.cursor.move_right()
        if color is not None:
            self.terminal.reset_color()

    def write_from_terminal_start(self, text: str, color: Color | None = None) -> None:
        self.cursor.goto(0, self.cursor.pos.row)
        if color is not None:
            self.terminal.set_fg(color)
        self.terminal.write(text)
        self.cursor.pos.col = len(text)
        if color is not None:
            self.terminal.reset_color()

    def write_newline(self) -> None:
        self.cursor.goto_next_row_terminal_start()

    def scroll_up(self, rows: int) -> None:
        """Scroll the screen up by *rows* and shift bookkeeping with it."""
        if rows <= 0:
            return
        logger.debug("Scrolling up %d row(s)", rows)
        self.terminal.scroll_up(rows)
        self.cursor.shift_up(rows)
        # The terminal cursor keeps its screen row; move it with the content.
        self.cursor.goto(self.cursor.pos.col, self.cursor.pos.row)

    # -- input echo -----------------------------------------------------------

    def render_input(self, buffer: EditBuffer, *, color: bool = False) -> None:
        """Redraw the whole input area for *buffer*.

        A colored echo locks background highlight refreshes; a plain echo
        releases the lock.
        """
        self.cursor.hide()
        try:
            self._scroll_if_needed_for_input(buffer)
            with self.cursor.saved_position():
                self.cursor.goto_start()
                self.terminal.clear_from_cursor()
                self.write_from_terminal_start(
                    self.settings.input_prompt, self.theme.input_prompt
                )

                text = buffer.to_text()
                printer = self.highlighter.highlight(text) if color else Printer.from_string(text)
                self._render_input_items(printer)
        finally:
            # A failed redraw must not leave the cursor hidden.
            self.cursor.show()
        self.terminal.flush()

        self.highlight_locked = color

    def _render_input_items(self, printer: Printer) -> None:
        continuation = self.settings.continuation_prompt
        for item in printer:
            if item.is_new_line:
                self.cursor.goto_next_row_terminal_start()
                self.write(continuation, self.theme.continuation_prompt)
                continue

            color = self.theme.color_for(item)
            for c in item.text:
                self.write(c, color)
                if self.cursor.is_at_col(self.settings.input_start_col):
                    self.write_from_terminal_start(
                        continuation, self.theme.continuation_prompt
                    )

    # -- output ---------------------------------------------------------------

    def render_output(self, printer: Printer) -> None:
        """Drain *printer* onto the screen below the current position."""
        self._scroll_if_needed_for_printer(printer)

        for item in printer:
            if item.kind is ItemKind.NEW_LINE:
                self.cursor.goto_next_row_terminal_start()
                self.cursor.use_current_row_as_starting_row()
                continue

            self.terminal.set_fg(self.theme.color_for(item))
            if "\n" in item.text:
                self.cursor.goto_next_row_terminal_start()
                for line in item.text.split("\n"):
                    self.terminal.write(line)
                    self.terminal.write("\r\n")
                    self.cursor.advance_row()
            else:
                self.terminal.write(item.text)
                self.cursor.advance_by_text(item.text)
            self.terminal.reset_color()
            self._scroll_if_needed_for_output(item.text)

        self.terminal.flush()

    def write_diagnostic(self, message: str) -> None:
        """Print a one-line diagnostic on its own row."""
        if self.cursor.pos.col != 0:
            self.cursor.goto_next_row_terminal_start()
        line = message.replace("\n", " ")[: self.cursor.bound.width]
        self.terminal.clear_until_newline()
        self.terminal.set_fg(self.theme.diagnostic)
        self.terminal.write(line)
        self.terminal.reset_color()
        self.cursor.advance_by_text(line)
        self.cursor.goto_next_row_terminal_start()
        self.cursor.use_current_row_as_starting_row()
        self.terminal.flush()

    # -- scrolling ------------------------------------------------------------

    def _scroll_if_needed_for_input(self, buffer: EditBuffer) -> None:
        input_last_row = self.cursor.input_last_pos(buffer)[1]
        self.scroll_up(max(0, input_last_row - self.cursor.last_row))

    def _scroll_if_needed_for_printer(self, printer: Printer) -> None:
        new_lines = printer.count(ItemKind.NEW_LINE)
        self.scroll_up(self.cursor.screen_height_overflow_by_new_lines(new_lines))

    def _scroll_if_needed_for_output(self, text: str) -> None:
        # Writing past the bottom row makes the terminal scroll on its own
        # by one row; scroll once more and pin the tracked row to match.
        new_lines = text.count("\n")
        if self.cursor.screen_height_overflow_by_new_lines(new_lines) > 0:
            self.terminal.scroll_up(1)
            self.cursor.shift_up(1)
            self.cursor.pin_to_last_row()
