"""Combine all dagster definitions."""

from otakutrack.dagster.reminders.definitions import defs as reminders_defs
from otakutrack.observability.sentry import init_sentry
from otakutrack.utils.logging import configure_logging

configure_logging()
init_sentry()

defs = reminders_defs
