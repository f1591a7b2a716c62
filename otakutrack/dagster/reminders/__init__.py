"""Dagster jobs, schedules and sensors for episode reminders."""

from otakutrack.dagster.reminders.definitions import defs
from otakutrack.dagster.reminders.jobs import process_reminders_job
from otakutrack.dagster.reminders.ops import process_reminders_op
from otakutrack.dagster.reminders.schedules import process_reminders_schedule
from otakutrack.dagster.reminders.sensors import reminders_on_run_failure

__all__ = [
    "defs",
    "process_reminders_job",
    "process_reminders_op",
    "process_reminders_schedule",
    "reminders_on_run_failure",
]
