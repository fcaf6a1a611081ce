"""Mail transport adapters."""

from .mailer import ConsoleMailer, Mailer, MailerError, OutgoingEmail, SmtpMailer, build_mailer

__all__ = ["ConsoleMailer", "Mailer", "MailerError", "OutgoingEmail", "SmtpMailer", "build_mailer"]
