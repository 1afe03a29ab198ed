from __future__ import annotations

from typing import Callable, Protocol, TypeAlias

from bundle_size_reporter.domain.models.build_result import BuildStats

CompletionCallback: TypeAlias = Callable[[BaseException | None, BuildStats | None], object]


class WatchHandle(Protocol):
    def close(self) -> None: ...


class BundlerPort(Protocol):
    def run(self, on_complete: CompletionCallback) -> None: ...

    def watch(
        self, interval_seconds: float, on_complete: CompletionCallback
    ) -> WatchHandle: ...
