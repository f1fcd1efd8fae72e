"""Classified output: text fragments tagged with a semantic class.

A ``Printer`` is a render batch. Producers (the evaluator, the shell
runner, the highlighter) build one, the renderer drains it front to back
exactly once. Presentation is decided later by ``ReplTheme``.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

from pi.repl.colors import Color

SUCCESS = "Ok!"


class ItemKind(Enum):
    EVALUATION = "evaluation"
    OK = "ok"
    WARNING = "warning"
    RAW_OUTPUT = "raw_output"
    SHELL_OUTPUT = "shell_output"
    ERROR = "error"
    NEW_LINE = "new_line"
    CUSTOM = "custom"


@dataclass(frozen=True)
class PrinterItem:
    text: str
    kind: ItemKind
    color: Color | None = None

    def __post_init__(self) -> None:
        if self.kind is ItemKind.NEW_LINE and self.text:
            raise ValueError("NEW_LINE items carry no text")
        if self.color is not None and self.kind is not ItemKind.CUSTOM:
            raise ValueError("Only CUSTOM items carry an explicit color")

    @classmethod
    def new_line(cls) -> PrinterItem:
        return cls("", ItemKind.NEW_LINE)

    @classmethod
    def custom(cls, text: str, color: Color | None = None) -> PrinterItem:
        return cls(text, ItemKind.CUSTOM, color)

    @property
    def is_new_line(self) -> bool:
        return self.kind is ItemKind.NEW_LINE


class Printer:
    """Ordered, single-pass queue of ``PrinterItem`` values.

    Iterating a printer consumes it. Use :meth:`items` or :meth:`count`
    to inspect a batch without draining it.
    """

    def __init__(self, items: Iterable[PrinterItem] = ()) -> None:
        self._items: deque[PrinterItem] = deque(items)

    # -- construction ---------------------------------------------------------

    @classmethod
    def single(cls, item: PrinterItem) -> Printer:
        return cls([item])

    @classmethod
    def from_items(cls, items: Iterable[PrinterItem]) -> Printer:
        return cls(items)

    @classmethod
    def from_string(
        cls,
        text: str,
        kind: ItemKind = ItemKind.CUSTOM,
        color: Color | None = None,
    ) -> Printer:
        """Split *text* into one item per line with ``NEW_LINE`` between.

        The trailing ``NEW_LINE`` is kept only when *text* itself ends
        with a newline.
        """
        printer = cls()
        if not text:
            return printer

        lines = text.split("\n")
        if text.endswith("\n"):
            lines.pop()
        for line in lines:
            if line.endswith("\r"):
                line = line[:-1]
            printer.push(PrinterItem(line, kind, color))
            printer.add_new_line(1)

        if not text.endswith("\n"):
            printer.pop()
        return printer

    # -- mutation -------------------------------------------------------------

    def push(self, item: PrinterItem) -> None:
        self._items.append(item)

    def pop(self) -> PrinterItem | None:
        return self._items.pop() if self._items else None

    def add_new_line(self, count: int) -> None:
        for _ in range(count):
            self._items.append(PrinterItem.new_line())

    def append(self, other: Printer) -> None:
        """Move every item of *other* onto the end of this batch."""
        self._items.extend(other._items)
        other._items.clear()

    # -- inspection -----------------------------------------------------------

    def items(self) -> list[PrinterItem]:
        return list(self._items)

    def count(self, kind: ItemKind) -> int:
        return sum(1 for item in self._items if item.kind is kind)

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    # -- consumption ----------------------------------------------------------

    def __iter__(self) -> Iterator[PrinterItem]:
        return self

    def __next__(self) -> PrinterItem:
        if not self._items:
            raise StopIteration
        return self._items.popleft()

    def __repr__(self) -> str:
        return f"Printer({list(self._items)!r})"


# ---------------------------------------------------------------------------
# Collaborator helpers
# ---------------------------------------------------------------------------


def _with_trailing_new_line(printer: Printer) -> Printer:
    last = printer.items()[-1] if printer else None
    if last is not None and not last.is_new_line:
        printer.add_new_line(1)
    return printer


def evaluation_output(text: str) -> Printer:
    """Batch for a successful evaluation result."""
    return _with_trailing_new_line(Printer.from_string(text, ItemKind.EVALUATION))


def error_output(text: str) -> Printer:
    return _with_trailing_new_line(Printer.from_string(text, ItemKind.ERROR))


def raw_output(text: str) -> Printer:
    """Batch for unclassified compiler/tool diagnostics."""
    return Printer.from_string(text, ItemKind.RAW_OUTPUT)


def shell_output(text: str) -> Printer:
    return Printer.single(PrinterItem(text, ItemKind.SHELL_OUTPUT))


def success(message: str = SUCCESS) -> Printer:
    printer = Printer.single(PrinterItem(message, ItemKind.OK))
    printer.add_new_line(1)
    return printer
