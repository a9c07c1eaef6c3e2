"""Outbound e-mail adapters."""

from taskauth.infrastructure.external.email.smtp_sender import SmtpEmailSender, redact_email

__all__ = ["SmtpEmailSender", "redact_email"]
