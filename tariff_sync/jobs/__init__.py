"""
Pipeline jobs.

- FetchTariffsJob: provider -> storage, with bounded retry
- UpdateSheetsJob: storage -> spreadsheets, with per-sheet isolation
- JobRunner: per-kind non-reentrancy guard
- PipelineScheduler: cron triggers for both jobs
"""

from .fetch_tariffs import FetchTariffsJob
from .runner import JobGuard, JobRunner, JobStatus
from .update_sheets import UpdateSheetsJob

__all__ = ["FetchTariffsJob", "UpdateSheetsJob", "JobGuard", "JobRunner", "JobStatus"]
