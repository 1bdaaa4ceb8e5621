import asyncio
from types import SimpleNamespace

from title_bot.config import SchedulerConfig
from title_bot.jobs.scheduler import Scheduler


class FakeTitles(SimpleNamespace):
    def __init__(self, error=None):
        super().__init__()
        self.calls = []
        self.error = error

    async def refresh_all(self, now):
        self.calls.append(now)
        if self.error:
            raise self.error
        return 0


def test_scheduler_registers_refresh_job():
    async def scenario():
        titles = FakeTitles()
        scheduler = Scheduler(scheduler_config=SchedulerConfig(refresh_seconds=5), title_service=titles)
        await scheduler.start()
        try:
            assert scheduler.running
            jobs = scheduler._scheduler.get_jobs()
            assert len(jobs) == 1
            assert jobs[0].trigger.interval.total_seconds() == 5
        finally:
            await scheduler.shutdown()

    asyncio.run(scenario())


def test_refresh_job_swallows_failures():
    async def scenario():
        titles = FakeTitles(error=RuntimeError("boom"))
        scheduler = Scheduler(scheduler_config=SchedulerConfig(), title_service=titles)
        await scheduler._refresh_job()
        assert len(titles.calls) == 1
        assert titles.calls[0].tzinfo is not None

    asyncio.run(scenario())
