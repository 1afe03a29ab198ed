from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path
from types import MappingProxyType
from typing import final

from filelock import FileLock, Timeout

from bundle_size_reporter.domain.models.asset_record import SizeSnapshot
from bundle_size_reporter.domain.models.build_result import BuildStats
from bundle_size_reporter.domain.protocols.bundler_port import BundlerPort
from bundle_size_reporter.domain.protocols.output_store_port import OutputStorePort
from bundle_size_reporter.domain.protocols.report_printer_port import ReportPrinterPort
from bundle_size_reporter.domain.workflows.classify_completion import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    CompletionHandler,
)


class BuildInProgressError(RuntimeError):
    pass


@final
class RunBuild:
    def __init__(
        self,
        output_store: OutputStorePort,
        bundler: BundlerPort,
        handler_factory: Callable[[SizeSnapshot], CompletionHandler],
        printer: ReportPrinterPort,
        startup_message: str,
        lock_path: Path,
        watch_interval_seconds: float,
        logger: logging.Logger,
        stop_poll_seconds: float = 0.5,
    ) -> None:
        self._output_store = output_store
        self._bundler = bundler
        self._handler_factory = handler_factory
        self._printer = printer
        self._startup_message = startup_message
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = FileLock(str(lock_path))
        self._lock_path = lock_path
        self._watch_interval_seconds = watch_interval_seconds
        self._log = logger
        self._stop_poll_seconds = stop_poll_seconds

    def prepare(self) -> SizeSnapshot:
        """Capture the previous build's sizes, then empty the output directory.

        The order matters: a snapshot taken after the reset is always empty.
        """
        snapshot = self._output_store.read_snapshot()
        self._output_store.reset()
        return snapshot

    def _acquire(self) -> bool:
        try:
            _ = self._lock.acquire(timeout=0)
        except Timeout:
            self._log.warning("Build skipped: another build holds %s", self._lock_path)
            return False
        return True

    def _report_locked(self) -> int:
        handler = self._handler_factory(MappingProxyType({}))
        return handler(
            BuildInProgressError(
                f"Another build is still running for {self._output_store.root}"
            ),
            None,
        )

    def run_once(self) -> int:
        if not self._acquire():
            return self._report_locked()

        try:
            snapshot = self.prepare()
            handler = self._handler_factory(snapshot)
            exit_codes: list[int] = []

            def _on_complete(error: BaseException | None, stats: BuildStats | None) -> None:
                exit_codes.append(handler(error, stats))

            self._printer.print_message(self._startup_message)
            self._bundler.run(_on_complete)
            if not exit_codes:
                self._log.error("Bundler returned without reporting completion")
                return EXIT_FAILURE
            return exit_codes[-1]
        finally:
            self._lock.release()

    def watch(self, should_stop: Callable[[], bool]) -> int:
        if not self._acquire():
            return self._report_locked()

        try:
            snapshot = self.prepare()
            handler = self._handler_factory(snapshot)
            self._printer.print_message(self._startup_message)
            handle = self._bundler.watch(self._watch_interval_seconds, handler)
            self._log.info(
                "Watching for changes every %sms", int(self._watch_interval_seconds * 1000)
            )
            try:
                while not should_stop():
                    time.sleep(self._stop_poll_seconds)
            finally:
                handle.close()
                self._log.info("Watch stopped")
            return EXIT_SUCCESS
        finally:
            self._lock.release()
