"""
MailerSend email notifier adapter - Implements EmailNotifier protocol.

Delivers code emails through the MailerSend HTTP API with httpx.
Connection failures and timeouts raise TransportError. Error responses
from the provider are logged and otherwise ignored: delivery is
best-effort and never gates the outcome of a flow on its own.
"""

import logging

import httpx

from src.domain.exceptions import TransportError

from .template import render_email

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://api.mailersend.com/v1/email"


class MailerSendNotifier:
    """
    Implements EmailNotifier protocol via the MailerSend API.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        api_key: str,
        from_email: str,
        from_name: str,
        url: str = DEFAULT_URL,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        """
        Args:
            api_key: MailerSend API token (sent as a bearer token)
            from_email: Sender address
            from_name: Sender display name
            url: Email endpoint
            timeout: Request timeout in seconds
            client: Optional preconfigured httpx client (tests inject a mock transport)
        """
        self._api_key = api_key
        self._from_email = from_email
        self._from_name = from_name
        self._url = url
        self._timeout = timeout
        self._client = client

    def send(self, to: str, subject: str, html_body: str) -> None:
        payload = {
            "from": {"email": self._from_email, "name": self._from_name},
            "to": [{"email": to}],
            "subject": subject,
            "html": render_email(html_body, self._from_name),
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        try:
            if self._client is not None:
                response = self._client.post(
                    self._url, json=payload, headers=headers, timeout=self._timeout
                )
            else:
                response = httpx.post(self._url, json=payload, headers=headers, timeout=self._timeout)
        except httpx.HTTPError as e:
            raise TransportError(f"Email delivery failed: {e}") from e

        if response.is_error:
            logger.warning(
                "MailerSend rejected message to %s: %s %s",
                to,
                response.status_code,
                response.text[:200],
            )
