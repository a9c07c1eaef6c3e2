"""SMTP e-mail sender for OTP delivery.

smtplib is blocking, so send() runs it in a worker thread. When no SMTP host
is configured the sender runs in dev mode and only logs the message
(recipient redacted, body never logged).
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage

from taskauth.core.config import Settings

logger = logging.getLogger(__name__)

SMTP_TIMEOUT_SECONDS = 30


def redact_email(email: str) -> str:
    """Redact an e-mail address for logging."""
    if "@" not in email:
        return "redacted"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"


class SmtpEmailSender:
    """IEmailSender backed by smtplib (STARTTLS or implicit TLS)."""

    def __init__(
        self,
        smtp_host: str | None = None,
        smtp_port: int = 587,
        smtp_user: str | None = None,
        smtp_password: str | None = None,
        smtp_use_tls: bool = True,
        from_email: str | None = None,
        from_name: str = "Task Management System",
    ) -> None:
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.smtp_use_tls = smtp_use_tls
        self.from_email = from_email or smtp_user
        self.from_name = from_name

    @classmethod
    def from_settings(cls, settings: Settings) -> SmtpEmailSender:
        return cls(
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_user=settings.smtp_user,
            smtp_password=(
                settings.smtp_password.get_secret_value() if settings.smtp_password else None
            ),
            smtp_use_tls=settings.smtp_use_tls,
            from_email=settings.smtp_from_email,
            from_name=settings.smtp_from_name,
        )

    @property
    def is_configured(self) -> bool:
        """True when a host and sender address are set."""
        return bool(self.smtp_host and self.from_email)

    def _build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to
        msg.set_content(body)
        return msg

    def _deliver(self, msg: EmailMessage) -> None:
        context = ssl.create_default_context()
        if self.smtp_use_tls:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=SMTP_TIMEOUT_SECONDS) as server:
                server.starttls(context=context)
                if self.smtp_user and self.smtp_password:
                    server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg)
        else:
            with smtplib.SMTP_SSL(
                self.smtp_host, self.smtp_port, context=context, timeout=SMTP_TIMEOUT_SECONDS
            ) as server:
                if self.smtp_user and self.smtp_password:
                    server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg)

    async def send(self, to: str, subject: str, body: str) -> None:
        """Send a plain-text message.

        Raises:
            smtplib.SMTPException / OSError: Delivery failed.
        """
        if not self.is_configured:
            logger.info(
                "Email (dev mode, not sent): to=%s subject=%r",
                redact_email(to),
                subject,
            )
            return
        msg = self._build_message(to, subject, body)
        await asyncio.to_thread(self._deliver, msg)
        logger.info("Email sent: to=%s subject=%r", redact_email(to), subject)
