"""Dagster schedules for delivering episode reminders."""

from dagster import ScheduleDefinition
from otakutrack.dagster.reminders.jobs import process_reminders_job

# Process reminders every 15 minutes
process_reminders_schedule = ScheduleDefinition(
    job=process_reminders_job,
    cron_schedule="*/15 * * * *",
    execution_timezone="UTC",
)
