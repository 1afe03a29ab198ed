from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bundle_size_reporter.config.settings_models import UserSettings


@dataclass(frozen=True)
class RuntimePaths:
    app_root: Path
    settings_path: Path
    output_dir: Path
    source_dir: Path
    cache_dir: Path
    logs_dir: Path
    lock_path: Path
    override_config_path: Path


@dataclass(frozen=True)
class BuildOptions:
    debug: bool = False
    watch: bool = False
    output_path: str | None = None
    analyze: bool = False


@dataclass(frozen=True)
class AppConfig:
    user: UserSettings
    paths: RuntimePaths
    options: BuildOptions
    watch_interval_seconds: float = 0.2

    @property
    def output_path(self) -> str:
        return self.options.output_path or self.user.output_path

    @property
    def log_level(self) -> str:
        if self.options.debug and self.user.log_level is None:
            return "debug"
        return self.user.log_level or "info"
