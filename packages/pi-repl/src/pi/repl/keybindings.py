"""REPL keybindings manager."""

from __future__ import annotations

from typing import Literal

from pi.repl.keys import KeyId, matches_key

ReplAction = Literal[
    # Cursor movement
    "cursorLeft",
    "cursorRight",
    "cursorLineStart",
    "cursorLineEnd",
    # History
    "historyPrevious",
    "historyNext",
    # Deletion
    "deleteCharBackward",
    "deleteCharForward",
    # Text input
    "newLine",
    "submit",
    "tab",
    # Session
    "interrupt",
    "exit",
    "clearScreen",
]

ReplKeybindingsConfig = dict[ReplAction, KeyId | list[KeyId]]

DEFAULT_REPL_KEYBINDINGS: dict[ReplAction, KeyId | list[KeyId]] = {
    # Cursor movement
    "cursorLeft": ["left", "ctrl+b"],
    "cursorRight": ["right", "ctrl+f"],
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd": ["end", "ctrl+e"],
    # History
    "historyPrevious": ["up", "ctrl+p"],
    "historyNext": ["down", "ctrl+n"],
    # Deletion
    "deleteCharBackward": "backspace",
    "deleteCharForward": "delete",
    # Text input
    "newLine": ["shift+enter", "alt+enter"],
    "submit": "enter",
    "tab": "tab",
    # Session
    "interrupt": "ctrl+c",
    "exit": "ctrl+d",
    "clearScreen": "ctrl+l",
}


class ReplKeybindingsManager:
    """Maps raw input to REPL actions, defaults overridden by user config."""

    def __init__(self, config: ReplKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[ReplAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: ReplKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        for action, keys in DEFAULT_REPL_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        for action, keys in config.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

    def matches(self, data: str, action: ReplAction) -> bool:
        """Check if input matches a specific action."""
        return any(matches_key(data, key) for key in self._action_to_keys.get(action, []))

    def action_for(self, data: str) -> ReplAction | None:
        """Return the first action bound to *data*, if any."""
        for action in self._action_to_keys:
            if self.matches(data, action):
                return action
        return None

    def get_keys(self, action: ReplAction) -> list[KeyId]:
        return self._action_to_keys.get(action, [])

    def set_config(self, config: ReplKeybindingsConfig) -> None:
        self._build_maps(config)
