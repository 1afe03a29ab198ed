from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, unique


@unique
class DiffKind(StrEnum):
    NONE = "none"
    SMALL_INCREASE = "small_increase"
    LARGE_INCREASE = "large_increase"
    DECREASE = "decrease"


@dataclass(frozen=True, slots=True)
class SizeDiff:
    kind: DiffKind
    delta: int | None

    @property
    def has_label(self) -> bool:
        return self.kind is not DiffKind.NONE


@dataclass(frozen=True, slots=True)
class SizeReportRow:
    folder: str
    name: str
    size: int
    diff: SizeDiff
