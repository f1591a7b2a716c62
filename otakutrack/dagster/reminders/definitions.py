"""Dagster definitions for reminder delivery."""

from dagster import Definitions
from otakutrack.dagster.reminders.jobs import process_reminders_job
from otakutrack.dagster.reminders.schedules import process_reminders_schedule
from otakutrack.dagster.reminders.sensors import reminders_on_run_failure

# Delivery every 15 minutes, with failed runs reported
defs = Definitions(
    jobs=[process_reminders_job],
    schedules=[process_reminders_schedule],
    sensors=[reminders_on_run_failure],
)
