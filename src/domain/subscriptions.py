"""
Subscription domain services - Double opt-in lifecycle.

Subscriber Lifecycle (Forward-Only Transitions)
===============================================

States:
- PENDING_CONFIRMATION: Initial state after a valid subscription request
- CONFIRMED: Terminal state after the emailed confirmation link is followed

Valid Transitions:
    PENDING_CONFIRMATION -> CONFIRMED   (valid token resolved)
    CONFIRMED -> CONFIRMED              (valid token resolved again, no-op)

Rejected without state change:
    any -> *   (missing, malformed or unknown token)

A subscriber never exists without a resolvable token: the repository writes
both rows in one transaction. Email uniqueness is enforced by the database
(ON CONFLICT), so concurrent requests for one address create one row.
"""

import logging
from dataclasses import dataclass
from urllib.parse import urlencode
from uuid import UUID

from .exceptions import DuplicateSubscriber
from .ports import Clock, EmailSender, SubscriberRepository
from .tokens import TokenIssuer
from .validation import parse_new_subscriber

logger = logging.getLogger(__name__)

CONFIRMATION_SUBJECT = "Welcome!"


def build_confirmation_link(confirmation_url: str, token: str) -> str:
    """Absolute confirmation link with the token as a query parameter."""
    return f"{confirmation_url}?{urlencode({'token': token})}"


def render_confirmation_email(link: str) -> tuple[str, str]:
    """
    Render the confirmation message bodies.

    Returns:
        Tuple of (text_body, html_body), both pointing at the same link
    """
    text_body = f"Welcome to our newsletter!\nVisit {link} to confirm your subscription."
    html_body = (
        "Welcome to our newsletter!<br />"
        f'Click <a href="{link}">here</a> to confirm your subscription.'
    )
    return text_body, html_body


@dataclass
class SubscriptionService:
    """
    Domain service for new subscriptions.

    Orchestrates validation, the atomic subscriber+token insert,
    and the confirmation email.
    """

    repository: SubscriberRepository
    email_sender: EmailSender
    clock: Clock
    confirmation_url: str

    def subscribe(self, email: str | None, name: str | None) -> UUID:
        """
        Register a pending subscriber and send the confirmation email.

        The stored subscriber and token are kept if the email send fails;
        no rollback is attempted.

        Args:
            email: Raw email form field
            name: Raw name form field

        Returns:
            Id of the new subscriber

        Raises:
            InvalidInput: If a field is missing or invalid (nothing stored)
            DuplicateSubscriber: If the email is already subscribed
            StorageFault: If the insert fails (nothing stored)
            DeliveryFault: If the confirmation email could not be sent
        """
        new_subscriber = parse_new_subscriber(email, name)
        token = TokenIssuer.issue()

        subscriber_id = self.repository.insert_pending(
            new_subscriber.email, new_subscriber.name, self.clock.now(), token
        )
        if subscriber_id is None:
            logger.warning("Subscription rejected: email already subscribed")
            raise DuplicateSubscriber(new_subscriber.email)

        link = build_confirmation_link(self.confirmation_url, token)
        text_body, html_body = render_confirmation_email(link)
        self.email_sender.send(new_subscriber.email, CONFIRMATION_SUBJECT, text_body, html_body)

        logger.info("Subscriber %s pending confirmation", subscriber_id)
        return subscriber_id


@dataclass
class ConfirmationService:
    """Domain service driving the PENDING_CONFIRMATION -> CONFIRMED transition."""

    repository: SubscriberRepository

    def confirm(self, token: str | None) -> UUID:
        """
        Confirm the subscriber a token was issued for.

        Idempotent: a token may be used any number of times.

        Raises:
            InvalidToken: If the token is missing, malformed, or unknown
            StorageFault: On storage error during lookup or update
        """
        subscriber_id = TokenIssuer(self.repository).resolve(token)
        self.repository.mark_confirmed(subscriber_id)
        logger.info("Subscriber %s confirmed", subscriber_id)
        return subscriber_id
