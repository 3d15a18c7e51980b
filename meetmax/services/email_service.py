"""Service for sending emails."""

import asyncio
import logging
import re
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from meetmax.domain.exceptions import DeliveryError

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")
_BLANK_LINES_RE = re.compile(r"\n\s*\n+")


class EmailService:
    """Notification sink delivering account emails via SMTP."""

    def __init__(
        self,
        smtp_host: str = "",
        smtp_port: int = 587,
        smtp_username: str = "",
        smtp_password: str = "",
        from_email: str = "",
        from_name: str = "Meetmax",
        timeout: float = 30.0,
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username
        self.smtp_password = smtp_password
        self.from_email = from_email
        self.from_name = from_name
        self.timeout = timeout
        self.enabled = bool(self.smtp_host and self.smtp_username and self.from_email)
        if not self.enabled:
            logger.warning("SMTP is not configured; emails will be logged instead of sent")

    async def deliver(self, recipient: str, subject: str, body: str) -> None:
        """
        Deliver an HTML message.

        Args:
            recipient: Recipient email
            subject: Email subject
            body: Rendered HTML body

        Raises:
            DeliveryError: If the SMTP server could not accept the message
        """
        if not self.enabled:
            logger.info("[EMAIL] %r for %s (SMTP disabled, not sent)", subject, recipient)
            return

        await asyncio.to_thread(self._send_email, recipient, subject, body, _html_to_text(body))
        logger.info("Sent %r to %s", subject, recipient)

    def _send_email(self, to_email: str, subject: str, html_body: str, text_body: str) -> None:
        """Send an email via SMTP, raising DeliveryError on failure."""
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain", "utf-8"))
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send email to %s: %s", to_email, exc)
            raise DeliveryError() from exc


def _html_to_text(html_body: str) -> str:
    text = _TAG_RE.sub("", html_body)
    lines = (line.strip() for line in text.splitlines())
    return _BLANK_LINES_RE.sub("\n\n", "\n".join(lines)).strip()


def build_email_service(settings) -> EmailService:
    return EmailService(
        smtp_host=settings.smtp_host,
        smtp_port=settings.smtp_port,
        smtp_username=settings.smtp_username,
        smtp_password=settings.smtp_password,
        from_email=settings.smtp_from_email,
        from_name=settings.smtp_from_name,
    )
