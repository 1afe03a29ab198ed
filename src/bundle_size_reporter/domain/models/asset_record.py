from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TypeAlias

SizeSnapshot: TypeAlias = Mapping[str, int]

TRACKED_EXTENSIONS: frozenset[str] = frozenset({".js", ".css"})


def is_tracked_asset(name: str | Path) -> bool:
    return Path(name).suffix in TRACKED_EXTENSIONS


@dataclass(frozen=True, slots=True)
class AssetRecord:
    canonical_key: str
    absolute_path: Path
    gzip_size: int

    def __post_init__(self) -> None:
        if self.gzip_size < 0:
            raise ValueError(f"gzip size must be non-negative: {self.gzip_size}")
