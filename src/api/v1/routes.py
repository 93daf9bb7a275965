"""
API v1 routes.

Defines REST endpoints for subscriptions, confirmations and newsletters.
Handlers are plain functions: FastAPI runs them in its threadpool, so the
blocking database and email calls never stall the event loop.
"""

from fastapi import APIRouter, Depends, Form, HTTPException, Query, status

from src.api.dependencies import (
    get_confirmation_service,
    get_newsletter_service,
    get_subscription_service,
)
from src.api.models import (
    ConfirmResponse,
    ErrorResponse,
    PublishNewsletterRequest,
    PublishNewsletterResponse,
    SubscribeResponse,
)
from src.domain.exceptions import (
    DeliveryFault,
    DuplicateSubscriber,
    InvalidInput,
    InvalidToken,
    StorageFault,
)
from src.domain.newsletters import NewsletterService
from src.domain.subscriptions import ConfirmationService, SubscriptionService

router = APIRouter(tags=["v1"])


@router.post(
    "/subscriptions",
    response_model=SubscribeResponse,
    responses={
        400: {"description": "Invalid or missing field, or email already subscribed"},
        500: {"model": ErrorResponse, "description": "Storage or email delivery failure"},
    },
    summary="Subscribe to the newsletter",
    description="Submit a form-encoded email and name. "
    "A confirmation link will be sent to the provided email.",
)
def subscribe(
    email: str | None = Form(None),
    name: str | None = Form(None),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscribeResponse:
    """
    Create a pending subscriber and email a confirmation link.

    - **email**: Valid email address
    - **name**: Display name
    """
    try:
        service.subscribe(email, name)
    except InvalidInput as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {e.field}: {e.reason}",
        ) from None
    except DuplicateSubscriber:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Subscription failed",
        ) from None
    except StorageFault:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to store subscriber",
        ) from None
    except DeliveryFault:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send confirmation email",
        ) from None
    return SubscribeResponse(message="Confirmation email sent")


@router.get(
    "/subscriptions/confirm",
    response_model=ConfirmResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid token"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
    summary="Confirm a subscription",
    description="Target of the emailed confirmation link. Safe to call repeatedly.",
)
def confirm(
    token: str | None = Query(None, description="Confirmation token from the email"),
    service: ConfirmationService = Depends(get_confirmation_service),
) -> ConfirmResponse:
    """Confirm the subscriber the token was issued for."""
    try:
        service.confirm(token)
    except InvalidToken:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid confirmation token",
        ) from None
    except StorageFault:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to confirm subscriber",
        ) from None
    return ConfirmResponse(message="Subscription confirmed")


@router.post(
    "/newsletters",
    response_model=PublishNewsletterResponse,
    responses={
        400: {"description": "Invalid or missing field"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
    summary="Publish a newsletter issue",
    description="Send the issue to every confirmed subscriber.",
)
def publish_newsletter(
    request_data: PublishNewsletterRequest,
    service: NewsletterService = Depends(get_newsletter_service),
) -> PublishNewsletterResponse:
    """
    Broadcast a newsletter issue.

    - **title**: Issue title (email subject)
    - **content.text**: Plain-text body
    - **content.html**: HTML body

    Per-recipient delivery failures are counted in the response, not raised.
    """
    try:
        report = service.publish(request_data.model_dump())
    except InvalidInput as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {e.field}: {e.reason}",
        ) from None
    except StorageFault:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list confirmed subscribers",
        ) from None
    return PublishNewsletterResponse(
        message="Newsletter published",
        recipients=report.recipients,
        failed=len(report.failed),
    )
