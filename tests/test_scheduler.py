import pytz

from services.scheduler import (
    DAILY_ROLLOVER_JOB, create_scheduler, remove_job_safely, schedule_daily_rollover, schedule_interval
)


async def _noop():
    pass


def test_daily_rollover_job_registered():
    scheduler = create_scheduler(pytz.UTC)

    schedule_daily_rollover(scheduler, _noop)

    job = scheduler.get_job(DAILY_ROLLOVER_JOB)
    assert job is not None
    assert str(job.trigger.fields[5]) == "0"
    assert str(job.trigger.fields[6]) == "0"


def test_remove_job_safely():
    scheduler = create_scheduler(pytz.UTC)
    schedule_interval(scheduler, _noop, 3600, 'water_reminder_user_1')

    assert remove_job_safely(scheduler, 'water_reminder_user_1') is True
    assert remove_job_safely(scheduler, 'water_reminder_user_1') is False
    assert remove_job_safely(None, 'anything') is False
