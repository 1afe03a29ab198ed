from __future__ import annotations

import logging
from pathlib import Path

from filelock import FileLock
from fakes import FakeConfigWarnings, FakeOutputStore, FakePrinter

from bundle_size_reporter.domain.models.asset_record import SizeSnapshot
from bundle_size_reporter.domain.models.build_result import (
    AssetDescriptor,
    BuildStats,
    CompileError,
)
from bundle_size_reporter.domain.protocols.bundler_port import CompletionCallback
from bundle_size_reporter.domain.workflows.classify_completion import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    CompletionHandler,
)
from bundle_size_reporter.domain.workflows.run_build import BuildInProgressError, RunBuild


class _FakeHandle:
    def __init__(self) -> None:
        self.closed = 0

    def close(self) -> None:
        self.closed += 1


class _FakeBundler:
    def __init__(
        self,
        calls: list[str],
        error: BaseException | None = None,
        stats: BuildStats | None = None,
        complete: bool = True,
    ) -> None:
        self._calls = calls
        self._error = error
        self._stats = stats
        self._complete = complete
        self.handle = _FakeHandle()
        self.watch_interval: float | None = None

    def run(self, on_complete: CompletionCallback) -> None:
        self._calls.append("run")
        if self._complete:
            _ = on_complete(self._error, self._stats)

    def watch(self, interval_seconds: float, on_complete: CompletionCallback) -> _FakeHandle:
        self._calls.append("watch")
        self.watch_interval = interval_seconds
        _ = on_complete(self._error, self._stats)
        return self.handle


class _RecordingOutputStore(FakeOutputStore):
    def __init__(self, root: Path, calls: list[str], snapshot: dict[str, int]) -> None:
        super().__init__(root, snapshot=snapshot, sizes={root / "main.2.js": 10})
        self._shared = calls

    def read_snapshot(self) -> SizeSnapshot:
        self._shared.append("read_snapshot")
        return super().read_snapshot()

    def reset(self) -> None:
        self._shared.append("reset")
        super().reset()


def _use_case(
    tmp_path: Path,
    bundler: _FakeBundler,
    calls: list[str],
    printer: FakePrinter,
    snapshots: list[SizeSnapshot],
) -> RunBuild:
    store = _RecordingOutputStore(tmp_path / "dist", calls, {"/main.js": 4})

    def _factory(snapshot: SizeSnapshot) -> CompletionHandler:
        snapshots.append(snapshot)
        return CompletionHandler(
            snapshot=snapshot,
            output_store=store,
            output_label="dist",
            printer=printer,
            config_warnings=FakeConfigWarnings(),
            analyze=False,
            logger=logging.getLogger("test"),
        )

    return RunBuild(
        output_store=store,
        bundler=bundler,
        handler_factory=_factory,
        printer=printer,
        startup_message="Creating an optimized production build...",
        lock_path=tmp_path / "cache" / "build.lock",
        watch_interval_seconds=0.2,
        logger=logging.getLogger("test"),
        stop_poll_seconds=0,
    )


def test_run_build_run_once_given_success_when_called_then_snapshots_before_reset_and_build(
    tmp_path: Path,
):
    calls: list[str] = []
    printer = FakePrinter()
    snapshots: list[SizeSnapshot] = []
    bundler = _FakeBundler(calls, stats=BuildStats(assets=(AssetDescriptor(name="main.2.js"),)))

    exit_code = _use_case(tmp_path, bundler, calls, printer, snapshots).run_once()

    assert exit_code == EXIT_SUCCESS
    assert calls == ["read_snapshot", "reset", "run"]
    assert [dict(item) for item in snapshots] == [{"/main.js": 4}]
    assert printer.events[0] == ("message", "Creating an optimized production build...")


def test_run_build_run_once_given_compile_errors_when_called_then_returns_failure(
    tmp_path: Path,
):
    calls: list[str] = []
    printer = FakePrinter()
    bundler = _FakeBundler(calls, stats=BuildStats(errors=(CompileError(message="bad"),)))

    exit_code = _use_case(tmp_path, bundler, calls, printer, []).run_once()

    assert exit_code == EXIT_FAILURE
    assert len(printer.of_kind("errors")) == 1


def test_run_build_run_once_given_bundler_never_completes_when_called_then_returns_failure(
    tmp_path: Path,
):
    calls: list[str] = []
    bundler = _FakeBundler(calls, complete=False)

    exit_code = _use_case(tmp_path, bundler, calls, FakePrinter(), []).run_once()

    assert exit_code == EXIT_FAILURE


def test_run_build_run_once_given_lock_held_when_called_then_reports_without_touching_output(
    tmp_path: Path,
):
    calls: list[str] = []
    printer = FakePrinter()
    bundler = _FakeBundler(calls, stats=BuildStats())
    use_case = _use_case(tmp_path, bundler, calls, printer, [])
    other = FileLock(str(tmp_path / "cache" / "build.lock"))

    with other.acquire(timeout=0):
        exit_code = use_case.run_once()

    assert exit_code == EXIT_FAILURE
    assert calls == []
    errors = printer.of_kind("errors")
    assert len(errors) == 1
    summary, reported = errors[0]  # pyright: ignore[reportGeneralTypeIssues]
    assert summary == "Failed to compile."
    assert isinstance(reported[0], BuildInProgressError)


def test_run_build_run_once_given_previous_run_when_called_again_then_lock_is_released(
    tmp_path: Path,
):
    calls: list[str] = []
    bundler = _FakeBundler(calls, stats=BuildStats())
    use_case = _use_case(tmp_path, bundler, calls, FakePrinter(), [])

    assert use_case.run_once() == EXIT_SUCCESS
    assert use_case.run_once() == EXIT_SUCCESS
    assert calls.count("run") == 2


def test_run_build_watch_given_failing_build_when_stopped_then_closes_handle_and_returns_zero(
    tmp_path: Path,
):
    calls: list[str] = []
    printer = FakePrinter()
    bundler = _FakeBundler(calls, error=RuntimeError("boom"))
    checks: list[int] = []

    def _should_stop() -> bool:
        checks.append(1)
        return len(checks) > 2

    exit_code = _use_case(tmp_path, bundler, calls, printer, []).watch(_should_stop)

    assert exit_code == EXIT_SUCCESS
    assert calls == ["read_snapshot", "reset", "watch"]
    assert bundler.watch_interval == 0.2
    assert bundler.handle.closed == 1
    assert len(printer.of_kind("errors")) == 1
