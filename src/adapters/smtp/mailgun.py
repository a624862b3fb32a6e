"""
Mailgun email sender adapter - Implements EmailSender protocol over the Mailgun HTTP API.
"""

import logging

import httpx

from src.domain.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)


class MailgunEmailSender:
    """
    Implements EmailSender protocol via POST /v3/<domain>/messages.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        api_key: str,
        domain: str,
        from_address: str,
        from_name: str,
        base_url: str = "https://api.mailgun.net",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._domain = domain.strip().lower()
        self._from = f"{from_name} <{from_address}>"
        self._url = f"{base_url.strip().rstrip('/')}/v3/{self._domain}/messages"
        self._timeout = timeout
        self._transport = transport

    def send(self, to: str, subject: str, html_body: str) -> None:
        """
        Hand the message to Mailgun.

        Raises:
            EmailDeliveryError: On transport errors or a non-2xx response
        """
        data = {"from": self._from, "to": to, "subject": subject, "html": html_body}
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(self._url, auth=("api", self._api_key), data=data)
        except httpx.HTTPError as e:
            logger.error("Mailgun request failed: to=%s error=%s", to, e)
            raise EmailDeliveryError() from e

        if not response.is_success:
            logger.error(
                "Mailgun rejected message: to=%s status=%s body=%s",
                to,
                response.status_code,
                response.text[:500],
            )
            raise EmailDeliveryError()

        logger.info("Mailgun accepted message: to=%s status=%s", to, response.status_code)
