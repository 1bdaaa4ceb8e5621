from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from ..config import SchedulerConfig
from ..services.titles import TitleService
from ..utils.datetime import now_utc

logger = logging.getLogger("title_bot.jobs.scheduler")


class Scheduler:
    def __init__(self, *, scheduler_config: SchedulerConfig, title_service: TitleService) -> None:
        self._scheduler = AsyncIOScheduler(timezone="UTC", coalesce=True, misfire_grace_time=30)
        self._titles = title_service
        self._config = scheduler_config

    @property
    def running(self) -> bool:
        return self._scheduler.running

    async def start(self) -> None:
        self._scheduler.add_job(
            self._refresh_job,
            "interval",
            seconds=self._config.refresh_seconds,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        logger.info("scheduler started refresh_seconds=%s", self._config.refresh_seconds)

    async def shutdown(self) -> None:
        self._scheduler.shutdown(wait=False)

    async def _refresh_job(self) -> None:
        try:
            await self._titles.refresh_all(now_utc())
        except Exception:
            logger.exception("title refresh job failed")
