"""Dagster sensors for the reminder jobs."""

import logging

from dagster import DefaultSensorStatus, RunFailureSensorContext, run_failure_sensor
from otakutrack.dagster.reminders.jobs import process_reminders_job

logger = logging.getLogger(__name__)


def report_failed_run(job_name: str, run_id: str, reason: str | None = None) -> str:
    """Log a failed reminder run at error level.

    With Sentry initialised, error logs are sent as events.

    :param job_name: Name of the failed job.
    :param run_id: Dagster run ID.
    :param reason: Failure message from the run, if any.
    :returns: The logged message.
    """
    message = f"Reminder run failed: job={job_name}, run_id={run_id}"
    if reason:
        message = f"{message}, reason={reason}"
    logger.error(message)
    return message


@run_failure_sensor(
    monitored_jobs=[process_reminders_job],
    default_status=DefaultSensorStatus.RUNNING,
    minimum_interval_seconds=60,
)
def reminders_on_run_failure(context: RunFailureSensorContext) -> None:
    """Report each failed reminder run once."""
    run = context.dagster_run
    reason = context.failure_event.message if context.failure_event is not None else None
    context.log.info(f"Reporting failed run: {run.run_id}")
    report_failed_run(run.job_name, run.run_id, reason)
