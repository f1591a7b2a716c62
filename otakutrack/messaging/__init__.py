"""Outbound messaging channels."""

from otakutrack.messaging.email import EmailSender, get_email_sender

__all__ = ["EmailSender", "get_email_sender"]
