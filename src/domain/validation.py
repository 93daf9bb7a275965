"""
Input validation - Pure parsing of untrusted subscription and newsletter input.

Every function here either returns an already-validated domain value or
raises InvalidInput naming the offending field. No storage or network access.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from email_validator import EmailNotValidError, validate_email

from .exceptions import InvalidInput

MAX_NAME_LENGTH = 256
FORBIDDEN_NAME_CHARACTERS = frozenset('/()"<>\\{}')


@dataclass(frozen=True)
class NewSubscriber:
    """Validated subscription request."""

    email: str
    name: str


@dataclass(frozen=True)
class NewsletterIssue:
    """Validated newsletter broadcast. Never persisted."""

    title: str
    text: str
    html: str


def normalize_email(email: str) -> str:
    """Strip whitespace and lowercase for consistent storage and lookup."""
    return email.strip().lower()


def parse_email(raw: str | None) -> str:
    """
    Validate and normalize an email address.

    Syntax only; deliverability (DNS) is never checked. The stored form is
    email-validator's normalized address (NFC local part, Unicode domain),
    lowercased. Equivalent spellings normalize to the same string.
    """
    if raw is None:
        raise InvalidInput("email", "is required")
    email = normalize_email(raw)
    if not email:
        raise InvalidInput("email", "must not be empty")
    try:
        validated = validate_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        raise InvalidInput("email", str(e)) from None
    return validated.normalized.lower()


def parse_name(raw: str | None) -> str:
    if raw is None:
        raise InvalidInput("name", "is required")
    name = raw.strip()
    if not name:
        raise InvalidInput("name", "must not be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidInput("name", f"must be at most {MAX_NAME_LENGTH} characters")
    if any(c in FORBIDDEN_NAME_CHARACTERS for c in name):
        raise InvalidInput("name", "contains forbidden characters")
    return name


def parse_new_subscriber(email: str | None, name: str | None) -> NewSubscriber:
    """
    Validate raw subscription form fields.

    Raises:
        InvalidInput: naming the first offending field
    """
    return NewSubscriber(email=parse_email(email), name=parse_name(name))


def _required_text(value: Any, field: str) -> str:
    if value is None:
        raise InvalidInput(field, "is required")
    if not isinstance(value, str):
        raise InvalidInput(field, "must be a string")
    if not value.strip():
        raise InvalidInput(field, "must not be empty")
    return value


def parse_newsletter_issue(payload: Mapping[str, Any] | None) -> NewsletterIssue:
    """
    Validate a raw newsletter payload of shape {title, content: {text, html}}.

    Raises:
        InvalidInput: if the title, the content object, or either body is
            missing or empty
    """
    if not payload:
        raise InvalidInput("body", "must not be empty")
    title = _required_text(payload.get("title"), "title")
    content = payload.get("content")
    if content is None:
        raise InvalidInput("content", "is required")
    if not isinstance(content, Mapping):
        raise InvalidInput("content", "must be an object")
    if not content:
        raise InvalidInput("content", "must not be empty")
    text = _required_text(content.get("text"), "content.text")
    html = _required_text(content.get("html"), "content.html")
    return NewsletterIssue(title=title, text=text, html=html)
