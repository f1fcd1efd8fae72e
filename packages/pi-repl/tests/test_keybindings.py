"""Tests for pi.repl.keybindings.ReplKeybindingsManager."""

from __future__ import annotations

import pytest

from pi.repl.keybindings import DEFAULT_REPL_KEYBINDINGS, ReplKeybindingsManager


class TestDefaults:
    @pytest.mark.parametrize(
        "data, action",
        [
            ("\x1b[D", "cursorLeft"),
            ("\x02", "cursorLeft"),
            ("\x1b[C", "cursorRight"),
            ("\x1b[H", "cursorLineStart"),
            ("\x01", "cursorLineStart"),
            ("\x05", "cursorLineEnd"),
            ("\x1b[A", "historyPrevious"),
            ("\x1b[B", "historyNext"),
            ("\x7f", "deleteCharBackward"),
            ("\x1b[3~", "deleteCharForward"),
            ("\x1b\r", "newLine"),
            ("\r", "submit"),
            ("\t", "tab"),
            ("\x03", "interrupt"),
            ("\x04", "exit"),
            ("\x0c", "clearScreen"),
        ],
    )
    def test_action_for(self, data: str, action: str) -> None:
        assert ReplKeybindingsManager().action_for(data) == action

    def test_printable_text_has_no_action(self) -> None:
        manager = ReplKeybindingsManager()
        assert manager.action_for("a") is None
        assert manager.action_for("hello") is None

    def test_every_action_has_keys(self) -> None:
        manager = ReplKeybindingsManager()
        for action in DEFAULT_REPL_KEYBINDINGS:
            assert manager.get_keys(action)


class TestOverrides:
    def test_override_replaces_default_keys(self) -> None:
        manager = ReplKeybindingsManager({"clearScreen": "ctrl+k"})
        assert manager.action_for("\x0b") == "clearScreen"
        assert manager.action_for("\x0c") is None
        assert manager.get_keys("clearScreen") == ["ctrl+k"]

    def test_list_override(self) -> None:
        manager = ReplKeybindingsManager({"submit": ["enter", "ctrl+o"]})
        assert manager.matches("\x0f", "submit")
        assert manager.matches("\r", "submit")

    def test_set_config_rebuilds_from_defaults(self) -> None:
        manager = ReplKeybindingsManager({"exit": "ctrl+q"})
        manager.set_config({})
        assert manager.get_keys("exit") == ["ctrl+d"]
