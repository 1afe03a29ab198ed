from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType

from fakes import FakeConfigWarnings, FakeOutputStore, FakePrinter

from bundle_size_reporter.domain.models.build_result import (
    AssetDescriptor,
    BuildStats,
    CompileError,
    CompileErrors,
    InvocationError,
    Success,
)
from bundle_size_reporter.domain.models.size_report import DiffKind, SizeReportRow
from bundle_size_reporter.domain.workflows.classify_completion import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    FAILED_TO_COMPILE,
    CompletionHandler,
    classify_completion,
)


def test_classify_completion_given_error_and_stats_when_called_then_invocation_error_wins():
    error = OSError("npx not found")
    stats = BuildStats(errors=(CompileError(message="broken"),))
    assert classify_completion(error, stats) == InvocationError(error=error)


def test_classify_completion_given_compile_errors_when_called_then_keeps_full_ordered_list():
    errors = (CompileError(message="first"), CompileError(message="second"))
    stats = BuildStats(assets=(AssetDescriptor(name="main.1.js"),), errors=errors)
    assert classify_completion(None, stats) == CompileErrors(errors=errors)


def test_classify_completion_given_clean_stats_when_called_then_success_with_assets():
    assets = (AssetDescriptor(name="main.1.js"), AssetDescriptor(name="app.2.css"))
    assert classify_completion(None, BuildStats(assets=assets)) == Success(assets=assets)


def test_classify_completion_given_no_error_and_no_stats_when_called_then_invocation_error():
    outcome = classify_completion(None, None)
    assert isinstance(outcome, InvocationError)
    assert "without build statistics" in str(outcome.error)


def _handler(
    tmp_path: Path,
    snapshot: dict[str, int] | None = None,
    sizes: dict[Path, int] | None = None,
    warning: str | None = None,
    analyze: bool = False,
) -> tuple[CompletionHandler, FakePrinter, FakeConfigWarnings]:
    printer = FakePrinter()
    warnings = FakeConfigWarnings(warning)
    handler = CompletionHandler(
        snapshot=MappingProxyType(snapshot or {}),
        output_store=FakeOutputStore(tmp_path, sizes=sizes),
        output_label="dist",
        printer=printer,
        config_warnings=warnings,
        analyze=analyze,
        logger=logging.getLogger("test"),
    )
    return handler, printer, warnings


def test_completion_handler_given_invocation_error_when_handled_then_prints_single_failure(
    tmp_path: Path,
):
    handler, printer, warnings = _handler(tmp_path)
    error = RuntimeError("boom")

    exit_code = handler(error, None)

    assert exit_code == EXIT_FAILURE
    assert printer.of_kind("errors") == [(FAILED_TO_COMPILE, [error])]
    assert printer.of_kind("report") == []
    assert warnings.calls == 0


def test_completion_handler_given_compile_errors_when_handled_then_prints_each_error(
    tmp_path: Path,
):
    handler, printer, _ = _handler(tmp_path)
    errors = (CompileError(message="a"), CompileError(message="b"))

    exit_code = handler(None, BuildStats(errors=errors))

    assert exit_code == EXIT_FAILURE
    assert printer.of_kind("errors") == [(FAILED_TO_COMPILE, list(errors))]


def test_completion_handler_given_success_when_handled_then_warns_before_report(
    tmp_path: Path,
):
    sizes = {
        tmp_path / "main.new.js": 52_000,
        tmp_path / "vendor.new.js": 1_040,
        tmp_path / "fresh.new.js": 5,
    }
    handler, printer, warnings = _handler(
        tmp_path,
        snapshot={"/main.js": 1_000, "/vendor.js": 1_000},
        sizes=sizes,
        warning="webpack.config.js is applied",
    )
    stats = BuildStats(
        assets=(
            AssetDescriptor(name="fresh.new.js"),
            AssetDescriptor(name="main.new.js"),
            AssetDescriptor(name="vendor.new.js"),
        )
    )

    exit_code = handler(None, stats)

    assert exit_code == EXIT_SUCCESS
    assert warnings.calls == 1
    kinds = [event for event, _ in printer.events]
    assert kinds.index("warning") < kinds.index("success") < kinds.index("report")
    report = printer.of_kind("report")[0]
    assert isinstance(report, list)
    rows: list[SizeReportRow] = report
    assert [row.name for row in rows] == ["main.new.js", "vendor.new.js", "fresh.new.js"]
    assert [row.diff.kind for row in rows] == [
        DiffKind.LARGE_INCREASE,
        DiffKind.SMALL_INCREASE,
        DiffKind.NONE,
    ]
    assert ("message", "File sizes after gzip:") in printer.events


def test_completion_handler_given_analyze_when_success_then_prints_stats_location(
    tmp_path: Path,
):
    handler, printer, _ = _handler(tmp_path, analyze=True)

    _ = handler(None, BuildStats())

    messages = printer.of_kind("message")
    assert f"Analyze result is generated at {Path('dist') / 'stats.html'}." in messages


def test_completion_handler_given_no_pending_warning_when_success_then_prints_no_warning(
    tmp_path: Path,
):
    handler, printer, warnings = _handler(tmp_path)
    _ = handler(None, BuildStats())
    assert warnings.calls == 1
    assert printer.of_kind("warning") == []
