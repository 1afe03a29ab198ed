from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class AssetDescriptor:
    name: str


@dataclass(frozen=True, slots=True)
class CompileError:
    message: str | None
    raw: object = None

    def __str__(self) -> str:
        if self.message:
            return self.message
        return str(self.raw) if self.raw is not None else ""


@dataclass(frozen=True, slots=True)
class BuildStats:
    assets: tuple[AssetDescriptor, ...] = field(default_factory=tuple)
    errors: tuple[CompileError, ...] = field(default_factory=tuple)
    warnings: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class InvocationError:
    error: BaseException


@dataclass(frozen=True, slots=True)
class CompileErrors:
    errors: tuple[CompileError, ...]


@dataclass(frozen=True, slots=True)
class Success:
    assets: tuple[AssetDescriptor, ...]


BuildOutcome: TypeAlias = InvocationError | CompileErrors | Success
