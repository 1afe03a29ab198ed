from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from typing import ClassVar, TextIO, final

from typing_extensions import override

from bundle_size_reporter.application.presenters.terminal_style import (
    TerminalStyle,
    visible_length,
)
from bundle_size_reporter.domain.models.size_report import DiffKind, SizeDiff, SizeReportRow
from bundle_size_reporter.domain.protocols.report_printer_port import ReportPrinterPort

_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


# Input: 52000
# Output: "50.78 KB"
def format_bytes(size: int) -> str:
    sign = "-" if size < 0 else ""
    value = float(abs(size))
    unit_index = 0
    while value >= 1024 and unit_index < len(_UNITS) - 1:
        value /= 1024
        unit_index += 1

    rounded = round(value, 2)
    if rounded >= 1024 and unit_index < len(_UNITS) - 1:
        rounded = round(rounded / 1024, 2)
        unit_index += 1

    text = f"{rounded:.2f}".rstrip("0").rstrip(".")
    return f"{sign}{text} {_UNITS[unit_index]}"


@final
class SizeReportPrinter(ReportPrinterPort):
    _DIFF_STYLES: ClassVar[dict[DiffKind, TerminalStyle]] = {
        DiffKind.LARGE_INCREASE: TerminalStyle.RED,
        DiffKind.SMALL_INCREASE: TerminalStyle.YELLOW,
        DiffKind.DECREASE: TerminalStyle.GREEN,
    }

    def __init__(self, stream: TextIO | None = None, color: bool = True) -> None:
        self._stream = stream
        self._color = color

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def _write(self, text: str) -> None:
        print(text, file=self.stream)

    def difference_label(self, diff: SizeDiff) -> str:
        if not diff.has_label or diff.delta is None:
            return ""
        text = format_bytes(diff.delta)
        if diff.delta > 0:
            text = f"+{text}"
        return self._DIFF_STYLES[diff.kind].apply(text, self._color)

    def size_label(self, row: SizeReportRow) -> str:
        label = format_bytes(row.size)
        difference = self.difference_label(row.diff)
        if difference:
            label += f" ({difference})"
        return label

    @staticmethod
    def pad_labels(labels: Sequence[str]) -> list[str]:
        if not labels:
            return []
        longest = max(visible_length(label) for label in labels)
        return [label + " " * (longest - visible_length(label)) for label in labels]

    def format_rows(self, rows: Sequence[SizeReportRow]) -> list[str]:
        labels = self.pad_labels([self.size_label(row) for row in rows])
        lines: list[str] = []
        for row, label in zip(rows, labels):
            folder = TerminalStyle.DIM.apply(f"{row.folder}{os.sep}", self._color)
            name = TerminalStyle.CYAN.apply(row.name, self._color)
            lines.append(f"  {label}  {folder}{name}")
        return lines

    @override
    def print_size_report(self, rows: Sequence[SizeReportRow]) -> None:
        for line in self.format_rows(rows):
            self._write(line)

    @override
    def print_message(self, message: str = "") -> None:
        self._write(message)

    @override
    def print_warning(self, message: str) -> None:
        self._write(TerminalStyle.YELLOW.apply(message, self._color))

    @override
    def print_success(self, message: str) -> None:
        self._write(TerminalStyle.GREEN.apply(message, self._color))

    @override
    def print_errors(self, summary: str, errors: Sequence[object]) -> None:
        self._write(TerminalStyle.RED.apply(summary, self._color))
        self._write("")
        for error in errors:
            message = getattr(error, "message", None)
            self._write(str(message) if message else str(error))
            self._write("")
