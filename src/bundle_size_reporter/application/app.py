from __future__ import annotations

import logging
import os
import signal
import sys
from pathlib import Path
from types import FrameType
from typing import final

from bundle_size_reporter.application.gateways.command_bundler_gateway import (
    CommandBundlerGateway,
)
from bundle_size_reporter.application.notifiers.override_config_notifier import (
    OverrideConfigNotifier,
)
from bundle_size_reporter.application.presenters.size_report_printer import SizeReportPrinter
from bundle_size_reporter.application.repositories.output_repository import OutputRepository
from bundle_size_reporter.config.logging_setup import configure_logging
from bundle_size_reporter.config.settings_loader import SettingsLoader
from bundle_size_reporter.domain.models.app_config import AppConfig, BuildOptions
from bundle_size_reporter.domain.models.asset_record import SizeSnapshot
from bundle_size_reporter.domain.protocols.bundler_port import BundlerPort
from bundle_size_reporter.domain.protocols.report_printer_port import ReportPrinterPort
from bundle_size_reporter.domain.workflows.classify_completion import (
    EXIT_FAILURE,
    CompletionHandler,
)
from bundle_size_reporter.domain.workflows.run_build import RunBuild


def _color_enabled() -> bool:
    return sys.stdout.isatty() and "NO_COLOR" not in os.environ


@final
class BuildApp:
    def __init__(
        self,
        config: AppConfig,
        bundler: BundlerPort | None = None,
        printer: ReportPrinterPort | None = None,
    ) -> None:
        self._config = config
        self._should_stop = False
        self._log = logging.getLogger("bundle_size_reporter.build")

        self._output_store = OutputRepository(config.paths.output_dir)
        self._printer = printer or SizeReportPrinter(color=_color_enabled())
        self._config_warnings = OverrideConfigNotifier(
            override_config_path=config.paths.override_config_path,
            settings_path=config.paths.settings_path,
        )
        self._bundler = bundler or CommandBundlerGateway(
            command=config.user.bundler_command,
            app_root=config.paths.app_root,
            source_dir=config.paths.source_dir,
            output_dir=config.paths.output_dir,
            timeout_seconds=config.user.build_timeout_seconds,
            debug=config.options.debug,
            watch_ignored_dirs=(config.paths.cache_dir,),
        )

    @classmethod
    def run_from_argv(
        cls,
        options: BuildOptions,
        settings_path: Path | None = None,
        printer: ReportPrinterPort | None = None,
    ) -> int:
        resolved_printer = printer or SizeReportPrinter(color=_color_enabled())
        try:
            config = SettingsLoader.load(settings_path, options)
        except (OSError, ValueError) as exc:
            resolved_printer.print_errors("Failed to parse settings file.", [exc])
            return EXIT_FAILURE

        configure_logging(config.log_level, config.paths.logs_dir / "errors.log")
        return cls(config, printer=resolved_printer).run()

    @property
    def startup_message(self) -> str:
        if self._config.options.debug:
            return "Creating a development build without compression..."
        return "Creating an optimized production build..."

    def _handler_for(self, snapshot: SizeSnapshot) -> CompletionHandler:
        return CompletionHandler(
            snapshot=snapshot,
            output_store=self._output_store,
            output_label=self._config.output_path,
            printer=self._printer,
            config_warnings=self._config_warnings,
            analyze=self._config.options.analyze,
            logger=self._log,
        )

    def _build_use_case(self) -> RunBuild:
        return RunBuild(
            output_store=self._output_store,
            bundler=self._bundler,
            handler_factory=self._handler_for,
            printer=self._printer,
            startup_message=self.startup_message,
            lock_path=self._config.paths.lock_path,
            watch_interval_seconds=self._config.watch_interval_seconds,
            logger=self._log,
        )

    def run(self) -> int:
        use_case = self._build_use_case()
        if not self._config.options.watch:
            return use_case.run_once()

        self._install_signal_handlers()
        return use_case.watch(lambda: self._should_stop)

    def stop(self) -> None:
        self._should_stop = True

    def _install_signal_handlers(self) -> None:
        def _stop_handler(_signum: int, _frame: FrameType | None) -> None:
            self._should_stop = True

        _ = signal.signal(signal.SIGTERM, _stop_handler)
        _ = signal.signal(signal.SIGINT, _stop_handler)
