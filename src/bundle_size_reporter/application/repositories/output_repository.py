from __future__ import annotations

import gzip
import logging
import shutil
from pathlib import Path
from types import MappingProxyType
from typing import final

from bundle_size_reporter.domain.models.asset_record import (
    AssetRecord,
    SizeSnapshot,
    is_tracked_asset,
)
from bundle_size_reporter.domain.models.canonical_key import canonical_key

_GZIP_LEVEL = 9


def gzip_size(contents: bytes) -> int:
    return len(gzip.compress(contents, compresslevel=_GZIP_LEVEL))


@final
class OutputRepository:
    def __init__(self, output_dir: Path, logger: logging.Logger | None = None) -> None:
        self._output_dir = output_dir
        self._log = logger or logging.getLogger("bundle_size_reporter.output")

    @property
    def root(self) -> Path:
        return self._output_dir

    def scan_asset_files(self) -> list[Path]:
        if not self._output_dir.is_dir():
            return []
        return sorted(
            path
            for path in self._output_dir.rglob("*")
            if path.is_file() and is_tracked_asset(path)
        )

    def gzip_size(self, path: Path) -> int:
        return gzip_size(path.read_bytes())

    def read_assets(self) -> list[AssetRecord]:
        return [
            AssetRecord(
                canonical_key=canonical_key(path, self._output_dir),
                absolute_path=path,
                gzip_size=self.gzip_size(path),
            )
            for path in self.scan_asset_files()
        ]

    def read_snapshot(self) -> SizeSnapshot:
        snapshot: dict[str, int] = {}
        for record in self.read_assets():
            snapshot[record.canonical_key] = record.gzip_size
        self._log.debug(
            "Previous build snapshot captured: %d assets in %s",
            len(snapshot),
            self._output_dir,
        )
        return MappingProxyType(snapshot)

    def reset(self) -> None:
        """Empty the output directory but keep the directory node itself.

        A shell whose working directory is inside the output keeps a valid cwd.
        """
        self._output_dir.mkdir(parents=True, exist_ok=True)
        removed = 0
        for entry in self._output_dir.iterdir():
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
            removed += 1
        self._log.debug("Output directory reset: %s (%d entries removed)", self._output_dir, removed)
