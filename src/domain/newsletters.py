"""
Newsletter dispatch - Fan-out of one issue to every confirmed subscriber.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .exceptions import DeliveryFault, InvalidInput
from .ports import EmailSender, SubscriberRepository
from .validation import parse_email, parse_newsletter_issue

logger = logging.getLogger(__name__)


@dataclass
class DispatchReport:
    """Outcome of one newsletter broadcast."""

    recipients: int = 0
    failed: list[str] = field(default_factory=list)
    skipped: int = 0


@dataclass
class NewsletterService:
    """Domain service broadcasting newsletter issues to confirmed subscribers only."""

    repository: SubscriberRepository
    email_sender: EmailSender

    def publish(self, payload: Mapping[str, Any] | None) -> DispatchReport:
        """
        Validate an issue and send it to every confirmed subscriber.

        Sends are sequential and every confirmed address is attempted.
        A delivery failure for one recipient is recorded in the report and
        counted in the summary log; it does not stop the fan-out. The sender
        logs the failing address.

        Raises:
            InvalidInput: If the payload is incomplete (nothing read or sent)
            StorageFault: If the confirmed subscribers cannot be listed
        """
        issue = parse_newsletter_issue(payload)
        emails = self.repository.list_confirmed_emails()

        report = DispatchReport()
        for stored_email in emails:
            try:
                recipient = parse_email(stored_email)
            except InvalidInput as e:
                logger.warning("Skipping a confirmed subscriber with an invalid stored email: %s", e)
                report.skipped += 1
                continue

            report.recipients += 1
            try:
                self.email_sender.send(recipient, issue.title, issue.text, issue.html)
            except DeliveryFault:
                report.failed.append(recipient)

        logger.info(
            "Newsletter %r dispatched to %d recipient(s), %d failed",
            issue.title,
            report.recipients,
            len(report.failed),
        )
        return report
