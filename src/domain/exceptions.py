"""
Domain exceptions - Semantic error types for the subscriber lifecycle.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Adapters translate their own errors into StorageFault / DeliveryFault.
"""


class SubscriptionError(Exception):
    """Base class for subscription domain errors."""

    pass


class InvalidInput(SubscriptionError):
    """Client payload is malformed or incomplete."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class InvalidToken(SubscriptionError):
    """Confirmation token is absent, malformed, or was never issued."""

    pass


class DuplicateSubscriber(SubscriptionError):
    """Email is already pending confirmation or confirmed."""

    pass


class StorageFault(SubscriptionError):
    """Unexpected persistence-layer error."""

    pass


class DeliveryFault(SubscriptionError):
    """Email collaborator unreachable or returned an error."""

    pass
