"""
HTTP email API adapter - Implements EmailSender protocol.

Delivers messages through a Postmark-style transactional email API:
one JSON POST to `{base_url}/email` per message, authenticated with a
server token header.
"""

import logging

import httpx
from pydantic import SecretStr

from src.domain.exceptions import DeliveryFault

logger = logging.getLogger(__name__)


class HttpEmailSender:
    """
    Implements EmailSender protocol via an HTTP email API.

    Wraps a single httpx.Client so connections are pooled across requests.
    The client is safe to share between request threads.
    """

    def __init__(
        self,
        base_url: str,
        sender: str,
        authorization_token: SecretStr,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: Email API origin
            sender: From address for every message
            authorization_token: API server token
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self._sender = sender
        self._authorization_token = authorization_token
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def send(self, recipient: str, subject: str, text_body: str, html_body: str) -> None:
        """
        POST one message to the email API.

        Raises:
            DeliveryFault: On transport error, timeout or non-2xx response
        """
        payload = {
            "From": self._sender,
            "To": recipient,
            "Subject": subject,
            "HtmlBody": html_body,
            "TextBody": text_body,
        }
        headers = {"X-Postmark-Server-Token": self._authorization_token.get_secret_value()}

        try:
            response = self._client.post("/email", json=payload, headers=headers)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error("Email API timed out sending to %s", recipient)
            raise DeliveryFault(f"Email API timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            logger.error(
                "Email API error %s sending to %s: %s",
                e.response.status_code,
                recipient,
                e.response.text,
            )
            raise DeliveryFault(f"Email API returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error("Email API unreachable sending to %s: %s", recipient, e)
            raise DeliveryFault(f"Email API unreachable: {e}") from e

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._client.close()
