from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from bundle_size_reporter.domain.models.size_report import SizeReportRow


class ReportPrinterPort(Protocol):
    def print_message(self, message: str = "") -> None: ...

    def print_warning(self, message: str) -> None: ...

    def print_success(self, message: str) -> None: ...

    def print_errors(self, summary: str, errors: Sequence[object]) -> None: ...

    def print_size_report(self, rows: Sequence[SizeReportRow]) -> None: ...
