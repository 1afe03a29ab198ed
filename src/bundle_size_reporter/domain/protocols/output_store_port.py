from __future__ import annotations

from pathlib import Path
from typing import Protocol

from bundle_size_reporter.domain.models.asset_record import SizeSnapshot


class OutputStorePort(Protocol):
    @property
    def root(self) -> Path: ...

    def read_snapshot(self) -> SizeSnapshot: ...

    def reset(self) -> None: ...

    def gzip_size(self, path: Path) -> int: ...
