"""Email adapters - EmailNotifier implementations."""

from .console import ConsoleEmailNotifier
from .mailersend import MailerSendNotifier
from .template import render_email

__all__ = ["ConsoleEmailNotifier", "MailerSendNotifier", "render_email"]
