from bundle_size_reporter.domain.models.app_config import AppConfig, BuildOptions, RuntimePaths
from bundle_size_reporter.domain.models.asset_record import (
    TRACKED_EXTENSIONS,
    AssetRecord,
    SizeSnapshot,
    is_tracked_asset,
)
from bundle_size_reporter.domain.models.build_result import (
    AssetDescriptor,
    BuildOutcome,
    BuildStats,
    CompileError,
    CompileErrors,
    InvocationError,
    Success,
)
from bundle_size_reporter.domain.models.canonical_key import canonical_key, strip_name_hash
from bundle_size_reporter.domain.models.size_report import DiffKind, SizeDiff, SizeReportRow

__all__ = [
    "TRACKED_EXTENSIONS",
    "AppConfig",
    "AssetDescriptor",
    "AssetRecord",
    "BuildOptions",
    "BuildOutcome",
    "BuildStats",
    "CompileError",
    "CompileErrors",
    "DiffKind",
    "InvocationError",
    "RuntimePaths",
    "SizeDiff",
    "SizeReportRow",
    "SizeSnapshot",
    "Success",
    "canonical_key",
    "is_tracked_asset",
    "strip_name_hash",
]
