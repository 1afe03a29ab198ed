from bundle_size_reporter.domain.protocols.bundler_port import (
    BundlerPort,
    CompletionCallback,
    WatchHandle,
)
from bundle_size_reporter.domain.protocols.config_warning_port import ConfigWarningPort
from bundle_size_reporter.domain.protocols.output_store_port import OutputStorePort
from bundle_size_reporter.domain.protocols.report_printer_port import ReportPrinterPort
from bundle_size_reporter.domain.protocols.scheduler_port import SchedulerPort

__all__ = [
    "BundlerPort",
    "CompletionCallback",
    "ConfigWarningPort",
    "OutputStorePort",
    "ReportPrinterPort",
    "SchedulerPort",
    "WatchHandle",
]
