"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure, plus the value types that cross them.
Adapters implement these protocols.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol
from uuid import UUID


class SubscriberStatus(str, Enum):
    """
    Subscriber lifecycle states.

    State Transitions (forward-only):
    - PENDING_CONFIRMATION -> CONFIRMED (valid token resolved)
    - CONFIRMED -> CONFIRMED (no-op, idempotent confirmation)

    Values match the persisted `status` column.
    """

    PENDING_CONFIRMATION = "pending_confirmation"
    CONFIRMED = "confirmed"


@dataclass(frozen=True)
class Subscriber:
    """Persisted subscriber record."""

    id: UUID
    email: str
    name: str
    status: SubscriberStatus
    subscribed_at: datetime


class SubscriberRepository(Protocol):
    """Port interface for subscriber and confirmation token persistence."""

    def insert_pending(
        self, email: str, name: str, subscribed_at: datetime, token: str
    ) -> UUID | None:
        """
        Create a PENDING_CONFIRMATION subscriber together with its token.

        Both rows are written in a single transaction: either both exist
        afterwards or neither does.

        Args:
            email: Validated, normalized email address
            name: Validated display name
            subscribed_at: Creation timestamp from the clock
            token: Confirmation token to map to the new subscriber

        Returns:
            The new subscriber id, or None if the email already exists

        Raises:
            StorageFault: On any other storage error
        """
        ...

    def mark_confirmed(self, subscriber_id: UUID) -> None:
        """
        Set subscriber status to CONFIRMED.

        Idempotent: confirming an already-confirmed subscriber is a no-op.

        Raises:
            StorageFault: On storage error
        """
        ...

    def find_by_id(self, subscriber_id: UUID) -> Subscriber | None:
        """Fetch a subscriber, or None when it does not exist."""
        ...

    def list_confirmed_emails(self) -> list[str]:
        """
        Snapshot of all CONFIRMED subscriber emails.

        Raises:
            StorageFault: On storage error
        """
        ...

    def get_subscriber_id_from_token(self, token: str) -> UUID | None:
        """
        Look up the subscriber a token was issued for.

        Returns:
            Subscriber id, or None if the token was never issued

        Raises:
            StorageFault: On storage error
        """
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send(self, recipient: str, subject: str, text_body: str, html_body: str) -> None:
        """
        Deliver one message to one recipient.

        Args:
            recipient: Recipient email address
            subject: Message subject
            text_body: Plain-text body
            html_body: HTML body

        Raises:
            DeliveryFault: If the message could not be handed off
        """
        ...


class Clock(Protocol):
    """Port interface for the current time."""

    def now(self) -> datetime:
        """Return the current timezone-aware UTC time."""
        ...
