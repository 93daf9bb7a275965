"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging outbound messages for local development.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - confirmation links appear in the logs.
    """

    def send(self, recipient: str, subject: str, text_body: str, html_body: str) -> None:
        """
        Log the outgoing message (simulates email delivery).

        The plain-text body is logged at INFO level so confirmation links
        are visible in docker-compose logs.
        """
        logger.info("[EMAIL] To: %s Subject: %s Body: %s", recipient, subject, text_body)
