"""Dagster jobs for delivering episode reminders."""

from dagster import job
from otakutrack.dagster.reminders.ops import process_reminders_op


@job(
    name="process_reminders_job",
    description="Deliver due episode reminders (runs every 15 minutes).",
)
def process_reminders_job() -> None:
    """Process reminders job.

    Delivers due reminders and advances or deactivates them.
    """
    process_reminders_op()
