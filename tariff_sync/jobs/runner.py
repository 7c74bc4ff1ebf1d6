"""
Non-reentrant job runner.

Each job kind has its own guard. A trigger that fires while the same kind is
still running is skipped, not queued. Different kinds may overlap.
"""

import enum
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable

logger = logging.getLogger(__name__)


class JobStatus(str, enum.Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


class JobGuard:
    """Mutual-exclusion flag for one job kind."""

    def __init__(self, name: str):
        self.name = name
        self._lock = threading.Lock()

    def acquire(self) -> bool:
        """Take the guard without waiting; False if it is already held."""
        return self._lock.acquire(blocking=False)

    def release(self) -> None:
        self._lock.release()

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    def __repr__(self) -> str:
        return f"JobGuard(name='{self.name}', locked={self.locked})"


class JobRunner:
    """
    Runs jobs behind per-kind guards owned by this instance.

    A job's exception is logged and turned into ``JobStatus.FAILED``; it never
    escapes, so a scheduler calling the runner keeps going.
    """

    def __init__(self, fetch_job: Any, publish_job: Any):
        self.fetch_job = fetch_job
        self.publish_job = publish_job
        self.guards = {
            fetch_job.name: JobGuard(fetch_job.name),
            publish_job.name: JobGuard(publish_job.name),
        }

    def run_guarded(self, job: Callable[[], Any], guard: JobGuard) -> JobStatus:
        """
        Invoke ``job`` unless ``guard`` is already held.

        The guard is released whether the job returns or raises.
        """
        if not guard.acquire():
            logger.info("[%s] Skipped - already running", guard.name)
            return JobStatus.SKIPPED

        start_time = datetime.now(timezone.utc)
        try:
            logger.info("[%s] Starting at %s", guard.name, start_time.isoformat())
            job()
        except Exception as e:
            logger.error(
                "[%s] Error: %s",
                guard.name,
                e,
                exc_info=True,
                extra={"job": guard.name, "error_type": type(e).__name__},
            )
            return JobStatus.FAILED
        finally:
            guard.release()

        logger.info(
            "[%s] Completed successfully",
            guard.name,
            extra={"duration_seconds": (datetime.now(timezone.utc) - start_time).total_seconds()},
        )
        return JobStatus.SUCCEEDED

    def run_fetch(self, **kwargs: Any) -> JobStatus:
        return self.run_guarded(lambda: self.fetch_job.run(**kwargs), self.guards[self.fetch_job.name])

    def run_publish(self) -> JobStatus:
        return self.run_guarded(self.publish_job.run, self.guards[self.publish_job.name])
