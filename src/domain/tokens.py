"""
Confirmation token issuing and resolution.

Tokens are 25 random alphanumeric characters (~148 bits of entropy) drawn
from the secrets module. The token-to-subscriber mapping is persisted by the
repository in the same transaction that creates the subscriber; resolving a
token never consumes it, so confirmation links stay safe to re-click.
"""

import secrets
import string
from dataclasses import dataclass
from uuid import UUID

from .exceptions import InvalidToken
from .ports import SubscriberRepository

TOKEN_LENGTH = 25
TOKEN_ALPHABET = string.ascii_letters + string.digits


def is_well_formed(token: str) -> bool:
    """Cheap shape check so garbage never reaches storage."""
    return len(token) == TOKEN_LENGTH and all(c in TOKEN_ALPHABET for c in token)


@dataclass
class TokenIssuer:
    """Generates confirmation tokens and resolves them back to subscribers."""

    repository: SubscriberRepository

    @staticmethod
    def issue() -> str:
        """Generate a new cryptographically random confirmation token. Needs no storage."""
        return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))

    def resolve(self, token: str | None) -> UUID:
        """
        Resolve a token to the subscriber it was issued for.

        Absent, empty, or malformed tokens are rejected without touching storage.

        Raises:
            InvalidToken: If the token is absent, malformed, or unknown
            StorageFault: On storage error during lookup
        """
        if not token or not is_well_formed(token):
            raise InvalidToken("Confirmation token is missing or malformed")

        subscriber_id = self.repository.get_subscriber_id_from_token(token)
        if subscriber_id is None:
            raise InvalidToken("Confirmation token was never issued")
        return subscriber_id
