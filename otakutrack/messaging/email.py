"""Send plain-text and HTML email over SMTP."""

import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from otakutrack.config import AppSettings, get_settings

logger = logging.getLogger(__name__)

# Seconds before an SMTP connection attempt is abandoned
SMTP_TIMEOUT = 10


class EmailSender:
    """SMTP sender using STARTTLS and login credentials."""

    def __init__(  # noqa: PLR0913
        self,
        host: str,
        port: int,
        user: str | None,
        password: str | None,
        from_address: str | None = None,
    ) -> None:
        """Initialise the sender.

        :param host: SMTP host.
        :param port: SMTP port.
        :param user: Login user; sending is disabled when unset.
        :param password: Login password.
        :param from_address: From header (defaults to the login user).
        """
        self.host = host
        self.port = port
        self.user = (user or "").strip()
        self.password = (password or "").strip()
        self.from_address = (from_address or "").strip() or f"OtakuTrack <{self.user}>"

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "EmailSender":
        """Build a sender from application settings."""
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_password,
            from_address=settings.smtp_from,
        )

    @property
    def is_configured(self) -> bool:
        """Check if SMTP credentials are present."""
        return bool(self.user and self.password)

    def build_message(self, to_email: str, subject: str, body: str) -> MIMEMultipart:
        """Build a multipart message with plain-text and HTML parts."""
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to_email
        msg.attach(MIMEText(body, "plain"))
        msg.attach(MIMEText(f"<p style='font-family:sans-serif'>{html.escape(body)}</p>", "html"))
        return msg

    def send(self, to_email: str, subject: str, body: str) -> bool:
        """Send an email.

        :param to_email: Recipient address.
        :param subject: Subject line.
        :param body: Plain-text body.
        :returns: True if sent, False if skipped because SMTP is not configured.
        :raises smtplib.SMTPException: If the server rejects the message.
        :raises OSError: If the server cannot be reached.
        """
        if not self.is_configured:
            logger.debug("SMTP user or password not set; skipping email")
            return False

        msg = self.build_message(to_email, subject, body)
        with smtplib.SMTP(self.host, self.port, timeout=SMTP_TIMEOUT) as server:
            server.starttls()
            server.login(self.user, self.password)
            server.sendmail(self.user, [to_email], msg.as_string())
        logger.info(f"Email sent: subject={subject!r}")
        return True


def get_email_sender() -> EmailSender:
    """Get an email sender configured from settings."""
    return EmailSender.from_settings(get_settings())
