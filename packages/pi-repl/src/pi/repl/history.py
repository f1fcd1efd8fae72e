"""In-memory history of submitted inputs."""

from __future__ import annotations


class History:
    """Submitted inputs, oldest first, with up/down navigation.

    Navigation starts below the newest entry. The text being edited when
    navigation begins is kept as a draft and handed back when the user
    walks past the newest entry again.
    """

    def __init__(self, max_size: int = 1000) -> None:
        self._entries: list[str] = []
        self._max_size = max_size
        self._index: int | None = None
        self._draft: str = ""

    def push(self, text: str) -> None:
        """Record a submitted input; blanks and immediate repeats are skipped."""
        self.reset_navigation()
        if not text.strip():
            return
        if self._entries and self._entries[-1] == text:
            return
        self._entries.append(text)
        if len(self._entries) > self._max_size:
            del self._entries[: len(self._entries) - self._max_size]

    def previous(self, current: str) -> str | None:
        """Step back one entry; ``None`` when there is nothing older."""
        if not self._entries:
            return None
        if self._index is None:
            self._draft = current
            self._index = len(self._entries)
        if self._index == 0:
            return None
        self._index -= 1
        return self._entries[self._index]

    def next(self) -> str | None:
        """Step forward one entry, ending with the saved draft."""
        if self._index is None:
            return None
        self._index += 1
        if self._index >= len(self._entries):
            self._index = None
            return self._draft
        return self._entries[self._index]

    def reset_navigation(self) -> None:
        self._index = None
        self._draft = ""

    @property
    def length(self) -> int:
        return len(self._entries)
