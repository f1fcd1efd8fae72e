"""REPL session: the single context that owns buffer, cursor and renderer.

A session turns keystrokes into buffer edits and re-echoes the input after
each one. On submit it hands the buffer text to a ``Dispatcher`` and prints
the batch it returns. Render steps that fail with ``OSError`` are reported
as one diagnostic line; the session keeps accepting input afterwards.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from pi.repl.buffer import EditBuffer
from pi.repl.highlight import Highlighter, PlainHighlighter, PygmentsHighlighter
from pi.repl.history import History
from pi.repl.keybindings import ReplAction, ReplKeybindingsManager
from pi.repl.keys import is_printable
from pi.repl.printer import Printer, error_output
from pi.repl.renderer import Renderer
from pi.repl.settings import ReplSettings
from pi.repl.terminal import Terminal

logger = logging.getLogger(__name__)

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}


class ReplError(Exception):
    """A command failed in a way the user should see as an error batch."""


class Dispatcher(Protocol):
    """Interprets submitted text and returns the batch to print."""

    def dispatch(self, text: str) -> Printer: ...


def has_unclosed_brackets(text: str) -> bool:
    """True when *text* opens more brackets than it closes outside strings."""
    stack: list[str] = []
    quote: str | None = None
    escaped = False
    for c in text:
        if quote is not None:
            if escaped:
                escaped = False
            elif c == "\\":
                escaped = True
            elif c == quote:
                quote = None
            continue
        if c in ("'", '"'):
            quote = c
        elif c in _OPENERS:
            stack.append(c)
        elif c in _CLOSERS and stack and stack[-1] == _CLOSERS[c]:
            stack.pop()
    return bool(stack)


def _build_highlighter(settings: ReplSettings) -> Highlighter:
    if not settings.highlight:
        return PlainHighlighter()
    try:
        return PygmentsHighlighter(settings.lexer)
    except ValueError as exc:
        logger.warning("Highlighting disabled: %s", exc)
        return PlainHighlighter()


class ReplSession:
    def __init__(
        self,
        terminal: Terminal,
        dispatcher: Dispatcher,
        *,
        settings: ReplSettings | None = None,
        highlighter: Highlighter | None = None,
        on_exit: Callable[[], None] | None = None,
    ) -> None:
        self.settings = settings or ReplSettings()
        self.terminal = terminal
        self.dispatcher = dispatcher
        self.renderer = Renderer(
            terminal,
            self.settings,
            highlighter=highlighter or _build_highlighter(self.settings),
        )
        self.cursor = self.renderer.cursor
        self.keybindings = ReplKeybindingsManager(self.settings.keybindings)
        self.history = History(self.settings.history_size)
        self.buffer = self._new_buffer()
        self.on_exit = on_exit
        self.running = False
        self.render_failures = 0

    def _new_buffer(self, text: str = "") -> EditBuffer:
        return EditBuffer(self.cursor.input_width, text)

    # -- lifecycle ------------------------------------------------------------

    def start(self) -> None:
        """Clear the screen and draw the first prompt at the top."""
        self.running = True
        self.terminal.clear_screen()
        self.cursor.goto(0, 0)
        self.cursor.use_current_row_as_starting_row()
        self.echo()

    def stop(self) -> None:
        if not self.running:
            return
        self.running = False
        try:
            self.cursor.goto_input_end(self.buffer)
            self.renderer.write_newline()
            self.terminal.flush()
        except OSError as exc:
            logger.warning("Could not move below input on exit: %s", exc)
        if self.on_exit is not None:
            self.on_exit()

    def reset(self) -> None:
        """Replace the buffer wholesale and re-measure the viewport."""
        self.cursor.measure()
        self.buffer = self._new_buffer()
        self.history.reset_navigation()
        self._guarded(self.echo)

    def handle_resize(self) -> None:
        self.cursor.measure()
        cursor = self.buffer.cursor
        self.buffer = self._new_buffer(self.buffer.to_text())
        self.buffer.set_cursor(cursor)
        self._guarded(self.echo)

    # -- input ----------------------------------------------------------------

    def handle_input(self, data: str) -> None:
        """Apply one key sequence to the buffer and re-echo."""
        if not self.running:
            return
        action = self.keybindings.action_for(data)
        if action is not None:
            self._guarded(lambda: self._run_action(action))
        elif is_printable(data):
            self.buffer.insert_sequence(data)
            self._guarded(self.echo)
        else:
            logger.debug("Ignoring unbound input %r", data)

    def _run_action(self, action: ReplAction) -> None:  # noqa: C901
        buffer = self.buffer
        if action == "cursorLeft":
            buffer.move_backward()
        elif action == "cursorRight":
            if not buffer.is_at_end():
                buffer.move_forward()
        elif action == "cursorLineStart":
            buffer.goto_start()
        elif action == "cursorLineEnd":
            buffer.goto_end()
        elif action == "deleteCharBackward":
            if buffer.is_at_start():
                return
            buffer.move_backward()
            buffer.remove_current()
        elif action == "deleteCharForward":
            buffer.remove_current()
        elif action == "historyPrevious":
            entry = self.history.previous(buffer.to_text())
            if entry is None:
                return
            self.adopt(entry)
        elif action == "historyNext":
            entry = self.history.next()
            if entry is None:
                return
            self.adopt(entry)
        elif action == "tab":
            if not buffer.is_at_line_start():
                return
            buffer.insert("\t")
        elif action == "newLine":
            buffer.insert("\n")
        elif action == "submit":
            if has_unclosed_brackets(buffer.to_text()):
                buffer.insert("\n")
            else:
                self.submit()
                return
        elif action == "interrupt":
            self._abandon_input()
            return
        elif action == "exit":
            if buffer.is_empty():
                self.stop()
                return
            buffer.remove_current()
        elif action == "clearScreen":
            self.terminal.clear_screen()
            self.cursor.goto(0, 0)
            self.cursor.use_current_row_as_starting_row()
        self.echo()

    def adopt(self, text: str) -> None:
        """Replace the buffer content with *text*, cursor at the end.

        Used for history recall and by dispatchers that hand back edited
        text (e.g. from an external editor). The caller re-echoes.
        Line endings are normalized to ``\\n`` so every buffer character
        maps to exactly one echoed cell or row break.
        """
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        self.buffer = self._new_buffer(text)
        self.buffer.goto_end()

    # -- rendering ------------------------------------------------------------

    def echo(self) -> None:
        """Plain echo of the buffer, then park the cursor at the edit point."""
        self.renderer.render_input(self.buffer, color=False)
        self.cursor.goto_buffer_position(self.buffer)
        self.terminal.flush()

    def refresh_highlight(self) -> bool:
        """Re-echo with syntax colors unless a colored echo is already shown."""
        if not self.running or self.renderer.highlight_locked:
            return False
        if isinstance(self.renderer.highlighter, PlainHighlighter):
            return False

        def _colored() -> None:
            self.renderer.render_input(self.buffer, color=True)
            self.cursor.goto_buffer_position(self.buffer)
            self.terminal.flush()

        return self._guarded(_colored)

    def submit(self) -> None:
        """Hand the buffer to the dispatcher and print what comes back."""
        text = self.buffer.to_text()
        self.cursor.goto_input_end(self.buffer)
        self.renderer.write_newline()
        self.cursor.use_current_row_as_starting_row()
        self.history.push(text)

        try:
            printer = self.dispatcher.dispatch(text)
        except ReplError as exc:
            logger.info("Command failed: %s", exc)
            printer = error_output(str(exc))

        self.renderer.render_output(printer)
        self._new_prompt()

    def _abandon_input(self) -> None:
        self.cursor.goto_input_end(self.buffer)
        self.renderer.write_newline()
        self.history.reset_navigation()
        self._new_prompt()

    def _new_prompt(self) -> None:
        if self.cursor.pos.col != 0:
            self.renderer.write_newline()
        self.cursor.use_current_row_as_starting_row()
        self.buffer = self._new_buffer()
        self.echo()

    # -- failures -------------------------------------------------------------

    def _guarded(self, step: Callable[[], None]) -> bool:
        """Run a render step; report terminal I/O failure instead of dying."""
        try:
            step()
        except OSError as exc:
            self._report_render_failure(exc)
            return False
        return True

    def _report_render_failure(self, exc: OSError) -> None:
        self.render_failures += 1
        logger.error("Render step failed: %s", exc, exc_info=exc)
        try:
            self.renderer.write_diagnostic(f"terminal error: {exc}")
        except OSError as again:
            logger.error("Could not report render failure: %s", again)
