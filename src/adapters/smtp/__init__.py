"""Email sender adapters."""

from .console import ConsoleEmailSender
from .mailgun import MailgunEmailSender

__all__ = ["ConsoleEmailSender", "MailgunEmailSender"]
