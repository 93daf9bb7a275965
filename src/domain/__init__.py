"""
Domain layer - Pure business logic with zero framework imports.

This package contains the subscriber lifecycle, confirmation token protocol
and newsletter fan-out. It defines its own port interfaces for
infrastructure abstraction, ensuring true hexagonal architecture decoupling.
"""

from .exceptions import (
    DeliveryFault,
    DuplicateSubscriber,
    InvalidInput,
    InvalidToken,
    StorageFault,
    SubscriptionError,
)
from .newsletters import DispatchReport, NewsletterService
from .ports import Clock, EmailSender, Subscriber, SubscriberRepository, SubscriberStatus
from .subscriptions import ConfirmationService, SubscriptionService
from .tokens import TokenIssuer
from .validation import NewsletterIssue, NewSubscriber

__all__ = [
    "Clock",
    "ConfirmationService",
    "DeliveryFault",
    "DispatchReport",
    "DuplicateSubscriber",
    "EmailSender",
    "InvalidInput",
    "InvalidToken",
    "NewSubscriber",
    "NewsletterIssue",
    "NewsletterService",
    "StorageFault",
    "Subscriber",
    "SubscriberRepository",
    "SubscriberStatus",
    "SubscriptionError",
    "SubscriptionService",
    "TokenIssuer",
]
