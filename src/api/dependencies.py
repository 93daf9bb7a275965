"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
Long-lived collaborators are created once in the app lifespan and
read back from app.state here.
"""

from fastapi import Request
from psycopg_pool import ConnectionPool

from src.adapters.email import ConsoleEmailSender, HttpEmailSender
from src.adapters.repository.postgres import PostgresSubscriberRepository
from src.config.settings import Settings
from src.domain.newsletters import NewsletterService
from src.domain.ports import Clock, EmailSender
from src.domain.subscriptions import ConfirmationService, SubscriptionService

CONFIRMATION_PATH = "/v1/subscriptions/confirm"


def build_email_sender(settings: Settings) -> ConsoleEmailSender | HttpEmailSender:
    """Create the configured email sender."""
    if settings.email_backend == "http":
        return HttpEmailSender(
            base_url=settings.email_base_url,
            sender=settings.email_sender,
            authorization_token=settings.email_authorization_token,
            timeout=settings.email_timeout_seconds,
        )
    return ConsoleEmailSender()


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> PostgresSubscriberRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresSubscriberRepository(pool)


def get_email_sender(request: Request) -> EmailSender:
    """Get the email sender created at startup."""
    return request.app.state.email_sender


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_confirmation_url(request: Request) -> str:
    """Absolute URL of the confirmation endpoint."""
    settings: Settings = request.app.state.settings
    return settings.base_url.rstrip("/") + CONFIRMATION_PATH


def get_subscription_service(request: Request) -> SubscriptionService:
    """
    Create subscription service with injected dependencies.

    Wires together the repository, email sender and clock for the domain service.
    """
    return SubscriptionService(
        repository=get_repository(request),
        email_sender=get_email_sender(request),
        clock=get_clock(request),
        confirmation_url=get_confirmation_url(request),
    )


def get_confirmation_service(request: Request) -> ConfirmationService:
    """Create confirmation service with injected repository."""
    return ConfirmationService(repository=get_repository(request))


def get_newsletter_service(request: Request) -> NewsletterService:
    """Create newsletter service with injected repository and email sender."""
    return NewsletterService(
        repository=get_repository(request),
        email_sender=get_email_sender(request),
    )
