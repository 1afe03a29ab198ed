from __future__ import annotations

from typing import Protocol


class ConfigWarningPort(Protocol):
    def pending_warning(self) -> str | None: ...
