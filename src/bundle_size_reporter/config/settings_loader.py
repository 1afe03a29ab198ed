from __future__ import annotations

from pathlib import Path
from typing import ClassVar, final

from bundle_size_reporter.config.settings_models import UserSettings
from bundle_size_reporter.domain.models.app_config import AppConfig, BuildOptions, RuntimePaths


@final
class SettingsLoader:
    DEFAULT_SETTINGS_NAME: ClassVar[str] = ".bundlerc"
    OVERRIDE_CONFIG_NAME: ClassVar[str] = "webpack.config.js"

    _KEY_MAP: ClassVar[dict[str, str]] = {
        "OUTPUT_PATH": "output_path",
        "SOURCE_PATH": "source_path",
        "BUNDLER_COMMAND": "bundler_command",
        "LOG_LEVEL": "log_level",
        "BUILD_TIMEOUT_SECONDS": "build_timeout_seconds",
    }

    @staticmethod
    def _parse_key_value_file(path: Path) -> dict[str, str]:
        data: dict[str, str] = {}
        if not path.exists():
            return data

        for raw_line in path.read_text("utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("export "):
                line = line[7:].strip()
            if "=" not in line:
                continue
            key, value = line.split("=", 1)
            data[key.strip()] = value.strip().strip('"').strip("'")
        return data

    @classmethod
    def _to_user_settings(cls, raw: dict[str, str]) -> UserSettings:
        mapped: dict[str, object] = {}
        for key, value in raw.items():
            target = cls._KEY_MAP.get(key)
            if not target:
                continue
            text = str(value or "").strip()
            if not text:
                continue
            if target == "build_timeout_seconds":
                try:
                    mapped[target] = int(text)
                except ValueError:
                    mapped[target] = None
                continue
            mapped[target] = text

        return UserSettings.model_validate(mapped)

    @classmethod
    def _build_paths(
        cls,
        app_root: Path,
        settings_path: Path,
        user: UserSettings,
        options: BuildOptions,
    ) -> RuntimePaths:
        cache_dir = app_root / ".bundle-size-reporter"
        output_path = options.output_path or user.output_path
        return RuntimePaths(
            app_root=app_root,
            settings_path=settings_path,
            output_dir=(app_root / output_path).resolve(),
            source_dir=(app_root / user.source_path).resolve(),
            cache_dir=cache_dir,
            logs_dir=cache_dir / "logs",
            lock_path=cache_dir / "build.lock",
            override_config_path=app_root / cls.OVERRIDE_CONFIG_NAME,
        )

    @classmethod
    def load(
        cls,
        settings_path: Path | None = None,
        options: BuildOptions | None = None,
    ) -> AppConfig:
        app_root = Path.cwd()
        resolved_options = options or BuildOptions()
        if settings_path is not None and not settings_path.is_file():
            raise FileNotFoundError(f"Settings file not found: {settings_path}")
        resolved_settings = settings_path or app_root / cls.DEFAULT_SETTINGS_NAME
        raw = cls._parse_key_value_file(resolved_settings)
        user = cls._to_user_settings(raw)
        paths = cls._build_paths(app_root, resolved_settings, user, resolved_options)
        return AppConfig(user=user, paths=paths, options=resolved_options)
