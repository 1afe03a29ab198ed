from __future__ import annotations

from pathlib import Path
from typing import final

from typing_extensions import override

from bundle_size_reporter.domain.protocols.config_warning_port import ConfigWarningPort


@final
class OverrideConfigNotifier(ConfigWarningPort):
    def __init__(self, override_config_path: Path, settings_path: Path) -> None:
        self._override_config_path = override_config_path
        self._settings_path = settings_path

    @override
    def pending_warning(self) -> str | None:
        if not self._override_config_path.is_file():
            return None
        return (
            f"{self._override_config_path.name} is applied on top of "
            f"{self._settings_path.name}; this customization is unsupported "
            "and may break in future releases."
        )
