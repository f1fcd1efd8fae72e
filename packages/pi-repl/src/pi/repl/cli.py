"""CLI entry point for pi-repl.

Runs an interactive session on the controlling terminal. Evaluation is not
part of this package, so the built-in dispatcher only echoes its input
back; embedders pass their own ``Dispatcher`` to :func:`run`.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from pi.repl.printer import Printer, evaluation_output, success
from pi.repl.session import Dispatcher, ReplError, ReplSession
from pi.repl.settings import ReplSettings, default_settings_dir
from pi.repl.terminal import ProcessTerminal

logger = logging.getLogger(__name__)

# Idle time after the last keystroke before the colored echo is drawn.
HIGHLIGHT_DELAY_S = 0.05


class EchoDispatcher:
    """Prints submitted text back as an evaluation result."""

    def dispatch(self, text: str) -> Printer:
        stripped = text.strip()
        if not stripped:
            return Printer()
        if stripped == ":ok":
            return success()
        if stripped.startswith(":fail"):
            raise ReplError(stripped[len(":fail") :].strip() or "failed")
        return evaluation_output(text)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pi-repl",
        description="Line-oriented REPL front end with wrap-aware rendering",
    )
    parser.add_argument("--settings", help="Settings JSON file (default: ~/.pi/repl.json)")
    parser.add_argument("--lexer", help="Pygments lexer used for live highlighting")
    parser.add_argument("--no-highlight", action="store_true", help="Disable live highlighting")
    parser.add_argument(
        "--log-level", default="warning", choices=["debug", "info", "warning", "error"]
    )
    parser.add_argument(
        "--log-file",
        default=os.path.join(default_settings_dir(), "repl.log"),
        help="Log file (stdout belongs to the terminal)",
    )
    return parser.parse_args(argv)


def _setup_logging(args: argparse.Namespace) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(args.log_file)), exist_ok=True)
    logging.basicConfig(
        filename=args.log_file,
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


async def run(settings: ReplSettings, dispatcher: Dispatcher) -> None:
    """Drive a session on the process terminal until the user exits."""
    loop = asyncio.get_running_loop()
    done = asyncio.Event()
    terminal = ProcessTerminal()
    session = ReplSession(terminal, dispatcher, settings=settings, on_exit=done.set)
    highlight_handle: asyncio.TimerHandle | None = None

    def _on_input(data: str) -> None:
        nonlocal highlight_handle
        session.handle_input(data)
        if highlight_handle is not None:
            highlight_handle.cancel()
        highlight_handle = loop.call_later(HIGHLIGHT_DELAY_S, session.refresh_highlight)

    def _on_resize() -> None:
        loop.call_soon_threadsafe(session.handle_resize)

    terminal.start(_on_input, _on_resize)
    try:
        session.start()
        await done.wait()
    finally:
        if highlight_handle is not None:
            highlight_handle.cancel()
        terminal.stop()


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    _setup_logging(args)

    overrides: dict[str, object] = {}
    if args.lexer:
        overrides["lexer"] = args.lexer
    if args.no_highlight:
        overrides["highlight"] = False
    settings = ReplSettings.load(args.settings, overrides)
    logger.info("Starting pi-repl (settings: %s)", settings.source)

    if not sys.stdin.isatty():
        print("pi-repl needs an interactive terminal", file=sys.stderr)
        sys.exit(1)

    asyncio.run(run(settings, EchoDispatcher()))


if __name__ == "__main__":
    main()
