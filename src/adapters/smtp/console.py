"""
Console email notifier adapter - Implements EmailNotifier protocol.

This module provides a console-based implementation of the domain's
email notifier port, logging messages (and the codes inside them) for
local development.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailNotifier:
    """
    Implements EmailNotifier protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - never use in production.
    """

    def send(self, to: str, subject: str, html_body: str) -> None:
        """
        Log the message instead of delivering it.

        The message is logged at INFO level to be visible in container logs.

        Args:
            to: Recipient email address (normalized by domain layer)
            subject: Message subject
            html_body: HTML fragment containing the code
        """
        logger.info("[EMAIL] To: %s Subject: %s Body: %s", to, subject, html_body)
