"""Outbound email delivery."""

from __future__ import annotations

import asyncio
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Protocol

from employer_portal.core.config import EmailSettings

logger = logging.getLogger(__name__)


class MailerError(Exception):
    """Raised when a message could not be handed to the mail transport."""


@dataclass(slots=True)
class OutgoingEmail:
    to: str
    subject: str
    text: str
    html: str


class Mailer(Protocol):
    async def send(self, message: OutgoingEmail) -> None:
        ...


class ConsoleMailer:
    """Development transport: writes the message to the log instead of sending it."""

    async def send(self, message: OutgoingEmail) -> None:
        logger.info("Email to %s (%s):\n%s", message.to, message.subject, message.text)


class SmtpMailer:
    def __init__(self, settings: EmailSettings) -> None:
        self._settings = settings

    async def send(self, message: OutgoingEmail) -> None:
        mime = self._build_message(message)
        try:
            await asyncio.to_thread(self._deliver, mime)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Email to %s failed: %s", message.to, exc)
            raise MailerError(str(exc)) from exc
        logger.info("Email sent to %s", message.to)

    def _build_message(self, message: OutgoingEmail) -> EmailMessage:
        mime = EmailMessage()
        mime["From"] = self._settings.sender
        mime["To"] = message.to
        mime["Subject"] = message.subject
        mime.set_content(message.text)
        mime.add_alternative(message.html, subtype="html")
        return mime

    def _deliver(self, mime: EmailMessage) -> None:
        settings = self._settings
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30) as server:
            if settings.use_tls:
                server.starttls()
            if settings.username and settings.password:
                server.login(settings.username, settings.password)
            server.send_message(mime)


def build_mailer(settings: EmailSettings) -> Mailer:
    if settings.backend == "smtp":
        return SmtpMailer(settings)
    return ConsoleMailer()


__all__ = ["ConsoleMailer", "Mailer", "MailerError", "OutgoingEmail", "SmtpMailer", "build_mailer"]
