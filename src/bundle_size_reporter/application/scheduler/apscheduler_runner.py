# pyright: reportMissingTypeStubs=false, reportUnknownMemberType=false

from __future__ import annotations

from typing import Callable, final

from apscheduler.schedulers.background import BackgroundScheduler
from typing_extensions import override

from bundle_size_reporter.domain.protocols.scheduler_port import SchedulerPort

_MIN_INTERVAL_SECONDS = 0.05


@final
class APSchedulerRunner(SchedulerPort):
    def __init__(self) -> None:
        self._scheduler = BackgroundScheduler()

    @override
    def schedule_interval(
        self, job_id: str, seconds: float, func: Callable[[], object]
    ) -> None:
        _ = self._scheduler.add_job(
            func,
            "interval",
            id=job_id,
            seconds=max(_MIN_INTERVAL_SECONDS, float(seconds)),
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

    @override
    def start(self) -> None:
        self._scheduler.start()

    @override
    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=True)
