"""Tests for the cron scheduler wiring."""

from unittest.mock import Mock

import pytest
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from tariff_sync.jobs.scheduler import FETCH_JOB_ID, PUBLISH_JOB_ID, PipelineScheduler


class StubRunner:
    def run_fetch(self, **kwargs):
        pass

    def run_publish(self):
        pass


@pytest.fixture
def runner():
    return StubRunner()


@pytest.fixture
def background():
    scheduler = BackgroundScheduler()
    yield scheduler
    if scheduler.running:
        scheduler.shutdown(wait=False)


class TestPipelineScheduler:
    def test_registers_both_jobs(self, runner, background):
        scheduler = PipelineScheduler(runner, "0 * * * *", "5 * * * *", scheduler=background)

        scheduler.schedule()

        jobs = {job.id: job for job in background.get_jobs()}
        assert set(jobs) == {FETCH_JOB_ID, PUBLISH_JOB_ID}
        assert jobs[FETCH_JOB_ID].func == runner.run_fetch
        assert jobs[PUBLISH_JOB_ID].func == runner.run_publish

    def test_job_options(self, runner, background):
        PipelineScheduler(runner, "0 * * * *", "0 * * * *", scheduler=background).schedule()

        for job in background.get_jobs():
            assert isinstance(job.trigger, CronTrigger)
            assert job.coalesce is True
            assert job.max_instances == 2

    def test_cron_fields(self, runner, background):
        PipelineScheduler(runner, "*/15 * * * *", "30 6 * * 1", scheduler=background).schedule()

        fetch = background.get_job(FETCH_JOB_ID)
        fields = {f.name: str(f) for f in fetch.trigger.fields}
        assert fields["minute"] == "*/15"

        publish = background.get_job(PUBLISH_JOB_ID)
        fields = {f.name: str(f) for f in publish.trigger.fields}
        assert fields["minute"] == "30"
        assert fields["hour"] == "6"

    def test_timezone_is_applied(self, runner, background):
        PipelineScheduler(
            runner, "0 * * * *", "0 * * * *", timezone="Europe/Moscow", scheduler=background
        ).schedule()

        assert str(background.get_job(FETCH_JOB_ID).trigger.timezone) == "Europe/Moscow"

    def test_invalid_cron_raises(self, runner, background):
        with pytest.raises(ValueError):
            PipelineScheduler(runner, "not a cron", "0 * * * *", scheduler=background).schedule()

    def test_start_and_shutdown_delegate(self, runner):
        inner = Mock()
        scheduler = PipelineScheduler(runner, "0 * * * *", "0 * * * *", scheduler=inner)

        scheduler.start()
        scheduler.shutdown(wait=False)

        inner.start.assert_called_once()
        inner.shutdown.assert_called_once_with(wait=False)


# ============================================================================
# Mark all tests as unit tests
# ============================================================================

pytestmark = pytest.mark.unit
