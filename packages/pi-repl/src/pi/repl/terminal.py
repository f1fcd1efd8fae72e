"""Physical terminal for the REPL: a protocol and its tty implementation.

``Terminal`` is what the renderer draws through. ``ProcessTerminal`` puts
the controlling tty in raw mode, reports key sequences and SIGWINCH
resizes through callbacks, and turns every drawing request into ANSI
escape sequences on stdout.

Write failures are not caught here: an ``OSError`` from stdout reaches
the render step that issued the write.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import signal
import sys
import termios
import tty
from typing import Any, Callable, Protocol, TextIO

from pi.repl.colors import Color
from pi.repl.keys import split_sequences

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_FROM_CURSOR = "\x1b[0J"
_CLEAR_UNTIL_NEWLINE = "\x1b[0K"
_CLEAR_SCREEN = "\x1b[2J\x1b[H"
_RESET_FG = "\x1b[39m"
_MOVE_TO_FMT = "\x1b[{};{}H"
_SCROLL_UP_FMT = "\x1b[{}S"

_FALLBACK_SIZE = os.terminal_size((80, 24))
_READ_CHUNK = 4096

# How long a partial escape sequence waits for the rest of its bytes.
ESCAPE_TIMEOUT_S = 0.01


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Everything the renderer needs from a screen.

    Coordinates are zero-based ``(col, row)`` within the visible screen.
    Drawing calls may raise ``OSError``.
    """

    def start(
        self,
        on_input: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None: ...

    def stop(self) -> None: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    def write(self, data: str) -> None: ...

    def flush(self) -> None: ...

    def move_to(self, col: int, row: int) -> None: ...

    def scroll_up(self, lines: int) -> None: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...

    def clear_from_cursor(self) -> None: ...

    def clear_until_newline(self) -> None: ...

    def clear_screen(self) -> None: ...

    def set_fg(self, color: Color) -> None: ...

    def reset_color(self) -> None: ...


# ---------------------------------------------------------------------------
# ProcessTerminal
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Terminal backed by the process's stdin/stdout tty.

    :meth:`start` must be called from a coroutine: stdin is watched with
    ``add_reader`` on the running asyncio loop. Output is buffered by the
    stream until :meth:`flush`.
    """

    def __init__(
        self,
        stdout: TextIO | None = None,
        stdin: TextIO | None = None,
        *,
        escape_timeout: float = ESCAPE_TIMEOUT_S,
    ) -> None:
        self._stdout = stdout or sys.stdout
        self._stdin = stdin or sys.stdin
        self._on_input: Callable[[str], None] | None = None
        self._on_resize: Callable[[], None] | None = None
        self._saved_tty_attrs: list[Any] | None = None
        self._old_winch_handler: Any = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""
        self.escape_timeout = escape_timeout
        self._escape_flush_handle: asyncio.TimerHandle | None = None

    # -- size -----------------------------------------------------------------

    def _size(self) -> os.terminal_size:
        try:
            return os.get_terminal_size(self._stdout.fileno())
        except (ValueError, OSError):
            return _FALLBACK_SIZE

    @property
    def columns(self) -> int:
        return self._size().columns

    @property
    def rows(self) -> int:
        return self._size().lines

    # -- lifecycle ------------------------------------------------------------

    def start(
        self,
        on_input: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None:
        """Enter raw mode and start delivering key sequences to *on_input*."""
        self._on_input = on_input
        self._on_resize = on_resize

        fd = self._stdin.fileno()
        self._saved_tty_attrs = termios.tcgetattr(fd)
        tty.setraw(fd)
        self._old_winch_handler = signal.signal(signal.SIGWINCH, self._handle_winch)

        try:
            self._loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; keyboard input is not read")
            return
        self._loop.add_reader(fd, self._read_stdin)

    def stop(self) -> None:
        """Leave raw mode and detach every handler installed by :meth:`start`."""
        fd = self._stdin.fileno()
        if self._loop is not None:
            self._loop.remove_reader(fd)
            self._loop = None

        if self._old_winch_handler is not None:
            signal.signal(signal.SIGWINCH, self._old_winch_handler)
            self._old_winch_handler = None

        if self._saved_tty_attrs is not None:
            termios.tcsetattr(fd, termios.TCSADRAIN, self._saved_tty_attrs)
            self._saved_tty_attrs = None

        self._on_input = None
        self._on_resize = None
        self._cancel_escape_flush()
        self._pending = ""
        self._decoder.reset()

    # -- output ---------------------------------------------------------------

    def write(self, data: str) -> None:
        self._stdout.write(data)

    def flush(self) -> None:
        self._stdout.flush()

    def move_to(self, col: int, row: int) -> None:
        # ANSI positions are one-based, (row, col).
        self.write(_MOVE_TO_FMT.format(row + 1, col + 1))

    def scroll_up(self, lines: int) -> None:
        if lines > 0:
            self.write(_SCROLL_UP_FMT.format(lines))

    def hide_cursor(self) -> None:
        self.write(_HIDE_CURSOR)

    def show_cursor(self) -> None:
        self.write(_SHOW_CURSOR)

    def clear_from_cursor(self) -> None:
        self.write(_CLEAR_FROM_CURSOR)

    def clear_until_newline(self) -> None:
        self.write(_CLEAR_UNTIL_NEWLINE)

    def clear_screen(self) -> None:
        self.write(_CLEAR_SCREEN)

    def set_fg(self, color: Color) -> None:
        self.write(color.sgr)

    def reset_color(self) -> None:
        self.write(_RESET_FG)

    # -- input ----------------------------------------------------------------

    def feed(self, raw: bytes) -> None:
        """Decode *raw* stdin bytes and deliver every complete key sequence.

        Partial UTF-8 characters are held by the decoder. A partial escape
        sequence is held until the next chunk completes it, or delivered
        as-is once ``escape_timeout`` passes with no more input (a lone
        ``ESC`` is the Escape key, not the start of a sequence).
        """
        self._cancel_escape_flush()
        text = self._pending + self._decoder.decode(raw)
        sequences, self._pending = split_sequences(text)
        self._deliver(sequences)

        if not self._pending:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop - flush immediately
            self._deliver(self.flush_pending())
            return
        self._escape_flush_handle = loop.call_later(
            self.escape_timeout, self._flush_escape_timeout
        )

    def flush_pending(self) -> list[str]:
        """Return the held partial sequence, if any, and forget it."""
        self._cancel_escape_flush()
        if not self._pending:
            return []
        sequences = [self._pending]
        self._pending = ""
        return sequences

    def _deliver(self, sequences: list[str]) -> None:
        if self._on_input is None:
            return
        for sequence in sequences:
            self._on_input(sequence)

    def _flush_escape_timeout(self) -> None:
        self._escape_flush_handle = None
        self._deliver(self.flush_pending())

    def _cancel_escape_flush(self) -> None:
        if self._escape_flush_handle is not None:
            self._escape_flush_handle.cancel()
            self._escape_flush_handle = None

    def _read_stdin(self) -> None:
        raw = os.read(self._stdin.fileno(), _READ_CHUNK)
        if raw:
            self.feed(raw)

    def _handle_winch(self, signum: int, frame: object) -> None:
        if self._on_resize is not None:
            self._on_resize()
