"""pi-repl: rendering and input-buffering engine for line-oriented shells."""

# Edit buffer
from pi.repl.buffer import EditBuffer

# Colors and theme
from pi.repl.colors import Color
from pi.repl.theme import ReplTheme

# Cursor and viewport
from pi.repl.cursor import Bound, Cursor, CursorPosition

# Highlighting
from pi.repl.highlight import Highlighter, PlainHighlighter, PygmentsHighlighter

# History
from pi.repl.history import History

# Keybindings
from pi.repl.keybindings import (
    DEFAULT_REPL_KEYBINDINGS,
    ReplAction,
    ReplKeybindingsManager,
)

# Keyboard input
from pi.repl.keys import KeyId, matches_key, parse_key, split_sequences

# Classified output
from pi.repl.printer import (
    ItemKind,
    Printer,
    PrinterItem,
    error_output,
    evaluation_output,
    raw_output,
    shell_output,
    success,
)

# Renderer
from pi.repl.renderer import Renderer

# Session
from pi.repl.session import Dispatcher, ReplError, ReplSession

# Settings
from pi.repl.settings import ReplSettings

# Terminal
from pi.repl.terminal import ProcessTerminal, Terminal

__all__ = [
    # Buffer
    "EditBuffer",
    # Colors / theme
    "Color",
    "ReplTheme",
    # Cursor
    "Bound",
    "Cursor",
    "CursorPosition",
    # Highlighting
    "Highlighter",
    "PlainHighlighter",
    "PygmentsHighlighter",
    # History
    "History",
    # Keybindings
    "DEFAULT_REPL_KEYBINDINGS",
    "ReplAction",
    "ReplKeybindingsManager",
    # Keys
    "KeyId",
    "matches_key",
    "parse_key",
    "split_sequences",
    # Classified output
    "ItemKind",
    "Printer",
    "PrinterItem",
    "error_output",
    "evaluation_output",
    "raw_output",
    "shell_output",
    "success",
    # Renderer
    "Renderer",
    # Session
    "Dispatcher",
    "ReplError",
    "ReplSession",
    # Settings
    "ReplSettings",
    # Terminal
    "ProcessTerminal",
    "Terminal",
]
