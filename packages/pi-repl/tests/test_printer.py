"""Tests for pi.repl.printer -- classified output batches."""

from __future__ import annotations

import pytest

from pi.repl.colors import Color
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


def _kinds(printer: Printer) -> list[ItemKind]:
    return [item.kind for item in printer.items()]


def _join_text(printer: Printer) -> str:
    return "\n".join(item.text for item in printer if not item.is_new_line)


# ---------------------------------------------------------------------------
# PrinterItem
# ---------------------------------------------------------------------------


class TestPrinterItem:
    def test_new_line_carries_no_text(self) -> None:
        item = PrinterItem.new_line()
        assert item.text == ""
        assert item.is_new_line

    def test_new_line_with_text_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            PrinterItem("x", ItemKind.NEW_LINE)

    def test_only_custom_items_carry_a_color(self) -> None:
        PrinterItem.custom("x", Color.RED)
        with pytest.raises(ValueError):
            PrinterItem("x", ItemKind.OK, Color.RED)

    def test_custom_without_color(self) -> None:
        item = PrinterItem.custom("x")
        assert item.kind is ItemKind.CUSTOM
        assert item.color is None


# ---------------------------------------------------------------------------
# from_string
# ---------------------------------------------------------------------------


class TestPrinterFromString:
    def test_empty_string_yields_empty_batch(self) -> None:
        printer = Printer.from_string("")
        assert printer.is_empty()
        assert len(printer) == 0

    def test_single_line_without_newline(self) -> None:
        printer = Printer.from_string("abc")
        assert [i.text for i in printer.items()] == ["abc"]
        assert _kinds(printer) == [ItemKind.CUSTOM]

    def test_lines_are_separated_by_new_line_items(self) -> None:
        printer = Printer.from_string("a\nb\nc")
        assert _kinds(printer) == [
            ItemKind.CUSTOM,
            ItemKind.NEW_LINE,
            ItemKind.CUSTOM,
            ItemKind.NEW_LINE,
            ItemKind.CUSTOM,
        ]

    def test_trailing_newline_is_kept(self) -> None:
        printer = Printer.from_string("a\nb\n")
        assert _kinds(printer)[-1] is ItemKind.NEW_LINE
        assert printer.count(ItemKind.NEW_LINE) == 2

    def test_only_newline(self) -> None:
        printer = Printer.from_string("\n")
        assert [(i.text, i.kind) for i in printer.items()] == [
            ("", ItemKind.CUSTOM),
            ("", ItemKind.NEW_LINE),
        ]

    def test_carriage_returns_are_stripped(self) -> None:
        printer = Printer.from_string("a\r\nb")
        assert [i.text for i in printer.items() if not i.is_new_line] == ["a", "b"]

    def test_kind_and_color_apply_to_every_line(self) -> None:
        printer = Printer.from_string("a\nb", ItemKind.CUSTOM, Color.GREEN)
        text_items = [i for i in printer.items() if not i.is_new_line]
        assert all(i.color is Color.GREEN for i in text_items)

    def test_round_trip_without_trailing_newline(self) -> None:
        text = "first\n\nthird line\nlast"
        assert _join_text(Printer.from_string(text)) == text

    def test_round_trip_with_trailing_newline_drops_empty_segment(self) -> None:
        text = "first\nsecond\n"
        assert _join_text(Printer.from_string(text)) == "first\nsecond"


# ---------------------------------------------------------------------------
# Queue semantics
# ---------------------------------------------------------------------------


class TestPrinterQueue:
    def test_iteration_drains_front_to_back(self) -> None:
        printer = Printer.from_items(
            [PrinterItem("1", ItemKind.OK), PrinterItem("2", ItemKind.ERROR)]
        )
        assert [item.text for item in printer] == ["1", "2"]
        assert printer.is_empty()
        assert list(printer) == []

    def test_items_and_count_do_not_consume(self) -> None:
        printer = Printer.from_string("a\nb")
        assert printer.count(ItemKind.NEW_LINE) == 1
        assert len(printer.items()) == 3
        assert len(printer) == 3

    def test_push_pop(self) -> None:
        printer = Printer()
        printer.push(PrinterItem("x", ItemKind.WARNING))
        assert printer.pop() == PrinterItem("x", ItemKind.WARNING)
        assert printer.pop() is None

    def test_add_new_line(self) -> None:
        printer = Printer.single(PrinterItem("x", ItemKind.OK))
        printer.add_new_line(2)
        assert _kinds(printer) == [ItemKind.OK, ItemKind.NEW_LINE, ItemKind.NEW_LINE]

    def test_append_moves_items_in_order(self) -> None:
        first = Printer.from_string("a")
        second = Printer.from_string("b\nc")
        first.append(second)
        assert [i.text for i in first.items()] == ["a", "b", "", "c"]
        assert second.is_empty()

    def test_bool(self) -> None:
        assert not Printer()
        assert Printer.from_string("x")


# ---------------------------------------------------------------------------
# Collaborator helpers
# ---------------------------------------------------------------------------


class TestOutputHelpers:
    def test_evaluation_output_ends_with_new_line(self) -> None:
        printer = evaluation_output("42")
        assert _kinds(printer) == [ItemKind.EVALUATION, ItemKind.NEW_LINE]

    def test_evaluation_output_does_not_double_trailing_new_line(self) -> None:
        printer = evaluation_output("42\n")
        assert _kinds(printer) == [ItemKind.EVALUATION, ItemKind.NEW_LINE]

    def test_empty_evaluation_output_is_empty(self) -> None:
        assert evaluation_output("").is_empty()

    def test_error_output(self) -> None:
        printer = error_output("boom\nline 2")
        assert printer.count(ItemKind.ERROR) == 2
        assert _kinds(printer)[-1] is ItemKind.NEW_LINE

    def test_raw_output_is_classed_raw(self) -> None:
        printer = raw_output("warning: unused\n")
        assert _kinds(printer) == [ItemKind.RAW_OUTPUT, ItemKind.NEW_LINE]

    def test_shell_output_is_a_single_item(self) -> None:
        printer = shell_output("total 0\nfile\n")
        items = printer.items()
        assert len(items) == 1
        assert items[0].kind is ItemKind.SHELL_OUTPUT
        assert items[0].text == "total 0\nfile\n"

    def test_success(self) -> None:
        printer = success()
        assert [(i.text, i.kind) for i in printer.items()] == [
            ("Ok!", ItemKind.OK),
            ("", ItemKind.NEW_LINE),
        ]
