"""Tests for pi.repl.keys -- splitting and parsing terminal input."""

from __future__ import annotations

import pytest

from pi.repl.keys import is_printable, matches_key, parse_key, split_sequences


# ---------------------------------------------------------------------------
# split_sequences
# ---------------------------------------------------------------------------


class TestSplitSequences:
    def test_plain_characters_split_individually(self) -> None:
        assert split_sequences("abc") == (["a", "b", "c"], "")

    def test_csi_sequences_stay_whole(self) -> None:
        assert split_sequences("a\x1b[Db") == (["a", "\x1b[D", "b"], "")

    def test_parameterised_csi(self) -> None:
        assert split_sequences("\x1b[3~\x1b[1;5C") == (["\x1b[3~", "\x1b[1;5C"], "")

    def test_ss3_sequence(self) -> None:
        assert split_sequences("\x1bOH") == (["\x1bOH"], "")

    def test_meta_sequence(self) -> None:
        assert split_sequences("\x1bb") == (["\x1bb"], "")

    def test_incomplete_sequence_is_returned_as_remainder(self) -> None:
        assert split_sequences("x\x1b[1;") == (["x"], "\x1b[1;")

    def test_lone_escape_is_remainder(self) -> None:
        assert split_sequences("\x1b") == ([], "\x1b")

    def test_remainder_completes_with_next_chunk(self) -> None:
        sequences, rest = split_sequences("\x1b[")
        assert sequences == []
        sequences, rest = split_sequences(rest + "A")
        assert sequences == ["\x1b[A"]
        assert rest == ""


# ---------------------------------------------------------------------------
# parse_key
# ---------------------------------------------------------------------------


class TestParseKey:
    @pytest.mark.parametrize(
        "data, expected",
        [
            ("\x1b[A", "up"),
            ("\x1b[B", "down"),
            ("\x1b[C", "right"),
            ("\x1b[D", "left"),
            ("\x1bOD", "left"),
            ("\x1b[H", "home"),
            ("\x1b[4~", "end"),
            ("\x1b[3~", "delete"),
            ("\x1b[1;5D", "ctrl+left"),
            ("\x1b[1;3C", "alt+right"),
            ("\r", "enter"),
            ("\n", "enter"),
            ("\x1b\r", "alt+enter"),
            ("\x1b[13;2u", "shift+enter"),
            ("\t", "tab"),
            (" ", "space"),
            ("\x7f", "backspace"),
            ("\x08", "backspace"),
            ("\x03", "ctrl+c"),
            ("\x04", "ctrl+d"),
            ("\x0c", "ctrl+l"),
            ("\x1b", "escape"),
            ("\x1bb", "alt+b"),
            ("a", "a"),
            ("Z", "Z"),
        ],
    )
    def test_known_sequences(self, data: str, expected: str) -> None:
        assert parse_key(data) == expected

    def test_empty_input(self) -> None:
        assert parse_key("") is None

    def test_unknown_sequence(self) -> None:
        assert parse_key("\x1b[99~") is None


class TestMatchesKey:
    def test_match(self) -> None:
        assert matches_key("\x1b[D", "left")
        assert matches_key("\x1b[5~", "pageUp")

    def test_no_match(self) -> None:
        assert not matches_key("\x1b[D", "right")
        assert not matches_key("\x1b[99~", "left")


class TestIsPrintable:
    @pytest.mark.parametrize("data", ["a", " ", "é", "abc"])
    def test_printable(self, data: str) -> None:
        assert is_printable(data)

    @pytest.mark.parametrize("data", ["", "\x1b[A", "\x03", "\t", "\r"])
    def test_not_printable(self, data: str) -> None:
        assert not is_printable(data)
