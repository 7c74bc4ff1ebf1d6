"""
Process scheduler.

Fires the fetch and publish jobs on two independent cron triggers through
the JobRunner. Holds no business logic. Schedules are fixed at startup.
"""

import logging
from typing import Any, Optional

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from .runner import JobRunner

logger = logging.getLogger(__name__)

FETCH_JOB_ID = "fetch_tariffs"
PUBLISH_JOB_ID = "update_sheets"


class PipelineScheduler:
    """
    Wraps an APScheduler scheduler with the pipeline's two cron jobs.

    ``max_instances=2`` lets an overlapping trigger reach the runner, whose
    guard then skips it and logs the skip.
    """

    def __init__(
        self,
        runner: JobRunner,
        tariffs_cron: str,
        sheets_cron: str,
        timezone: Optional[str] = None,
        scheduler: Any = None,
    ):
        self.runner = runner
        self.tariffs_cron = tariffs_cron
        self.sheets_cron = sheets_cron
        self.timezone = timezone

        if scheduler is None:
            scheduler = BlockingScheduler(timezone=timezone) if timezone else BlockingScheduler()
        self.scheduler = scheduler

    def _trigger(self, expression: str) -> CronTrigger:
        if self.timezone:
            return CronTrigger.from_crontab(expression, timezone=self.timezone)
        return CronTrigger.from_crontab(expression)

    def schedule(self) -> None:
        """Register both jobs. Safe to call once, before ``start``."""
        job_defaults = {"coalesce": True, "max_instances": 2, "replace_existing": True}

        self.scheduler.add_job(
            self.runner.run_fetch,
            self._trigger(self.tariffs_cron),
            id=FETCH_JOB_ID,
            name="Fetch WB tariffs",
            **job_defaults,
        )
        self.scheduler.add_job(
            self.runner.run_publish,
            self._trigger(self.sheets_cron),
            id=PUBLISH_JOB_ID,
            name="Update Google Sheets",
            **job_defaults,
        )

        logger.info(
            "Schedulers configured",
            extra={"tariffs_cron": self.tariffs_cron, "sheets_cron": self.sheets_cron},
        )

    def start(self) -> None:
        """Start the scheduler; blocks for BlockingScheduler."""
        logger.info("Starting scheduler")
        self.scheduler.start()

    def shutdown(self, wait: bool = True) -> None:
        self.scheduler.shutdown(wait=wait)
        logger.info("Scheduler stopped")
