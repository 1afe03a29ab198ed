from __future__ import annotations

from typing import Callable, Protocol


class SchedulerPort(Protocol):
    def schedule_interval(
        self, job_id: str, seconds: float, func: Callable[[], object]
    ) -> None: ...

    def start(self) -> None: ...

    def shutdown(self) -> None: ...
