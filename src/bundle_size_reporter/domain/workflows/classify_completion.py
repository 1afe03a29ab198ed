from __future__ import annotations

import logging
from pathlib import Path
from typing import final

from bundle_size_reporter.domain.models.asset_record import SizeSnapshot
from bundle_size_reporter.domain.models.build_result import (
    AssetDescriptor,
    BuildOutcome,
    BuildStats,
    CompileErrors,
    InvocationError,
    Success,
)
from bundle_size_reporter.domain.protocols.config_warning_port import ConfigWarningPort
from bundle_size_reporter.domain.protocols.output_store_port import OutputStorePort
from bundle_size_reporter.domain.protocols.report_printer_port import ReportPrinterPort
from bundle_size_reporter.domain.workflows.size_diff import build_size_report

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

FAILED_TO_COMPILE = "Failed to compile."


def classify_completion(error: BaseException | None, stats: BuildStats | None) -> BuildOutcome:
    if error is not None:
        return InvocationError(error=error)
    if stats is None:
        return InvocationError(error=RuntimeError("Bundler finished without build statistics"))
    if stats.errors:
        return CompileErrors(errors=tuple(stats.errors))
    return Success(assets=tuple(stats.assets))


@final
class CompletionHandler:
    def __init__(
        self,
        snapshot: SizeSnapshot,
        output_store: OutputStorePort,
        output_label: str,
        printer: ReportPrinterPort,
        config_warnings: ConfigWarningPort,
        analyze: bool,
        logger: logging.Logger,
    ) -> None:
        self._snapshot = snapshot
        self._output_store = output_store
        self._output_label = output_label
        self._printer = printer
        self._config_warnings = config_warnings
        self._analyze = analyze
        self._log = logger

    def handle(self, outcome: BuildOutcome) -> int:
        match outcome:
            case InvocationError(error=error):
                self._log.warning("Bundler invocation failed: %s", error)
                self._printer.print_errors(FAILED_TO_COMPILE, [error])
                return EXIT_FAILURE
            case CompileErrors(errors=errors):
                self._log.warning("Build finished with %d compile error(s)", len(errors))
                self._printer.print_errors(FAILED_TO_COMPILE, list(errors))
                return EXIT_FAILURE
            case Success(assets=assets):
                self._report_success(assets)
                return EXIT_SUCCESS

    def __call__(self, error: BaseException | None, stats: BuildStats | None) -> int:
        return self.handle(classify_completion(error, stats))

    def _report_success(self, assets: tuple[AssetDescriptor, ...]) -> None:
        warning = self._config_warnings.pending_warning()
        if warning:
            self._printer.print_warning(warning)
            self._printer.print_message()

        rows = build_size_report(
            assets,
            self._snapshot,
            self._output_store.root,
            self._output_label,
            self._output_store.gzip_size,
        )

        self._printer.print_success("Compiled successfully.")
        self._printer.print_message()
        self._printer.print_message("File sizes after gzip:")
        self._printer.print_message()
        self._printer.print_size_report(rows)
        self._printer.print_message()
        self._log.debug("Size report printed for %d assets", len(rows))

        if self._analyze:
            stats_page = Path(self._output_label) / "stats.html"
            self._printer.print_message(f"Analyze result is generated at {stats_page}.")
            self._printer.print_message()
