"""Tests for pi.repl.history.History."""

from __future__ import annotations

from pi.repl.history import History


class TestHistoryPush:
    def test_blank_entries_are_skipped(self) -> None:
        history = History()
        history.push("")
        history.push("   \n")
        assert history.length == 0

    def test_immediate_repeats_are_skipped(self) -> None:
        history = History()
        history.push("a")
        history.push("a")
        history.push("b")
        history.push("a")
        assert history.length == 3

    def test_oldest_entries_are_dropped_past_max_size(self) -> None:
        history = History(max_size=2)
        for text in ("a", "b", "c"):
            history.push(text)
        assert history.length == 2
        assert history.previous("") == "c"
        assert history.previous("") == "b"
        assert history.previous("") is None


class TestHistoryNavigation:
    def test_empty_history(self) -> None:
        history = History()
        assert history.previous("draft") is None
        assert history.next() is None

    def test_walk_back_and_forward_returns_draft(self) -> None:
        history = History()
        history.push("one")
        history.push("two")
        assert history.previous("draft") == "two"
        assert history.previous("ignored") == "one"
        assert history.next() == "two"
        assert history.next() == "draft"
        assert history.next() is None

    def test_push_resets_navigation(self) -> None:
        history = History()
        history.push("one")
        history.previous("")
        history.push("two")
        assert history.next() is None
        assert history.previous("") == "two"

    def test_reset_navigation(self) -> None:
        history = History()
        history.push("one")
        history.previous("draft")
        history.reset_navigation()
        assert history.next() is None
