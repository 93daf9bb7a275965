"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Request models forbid unknown keys so malformed shapes never reach the domain.
"""

from pydantic import BaseModel, ConfigDict, Field


class NewsletterContent(BaseModel):
    """Newsletter bodies in both formats."""

    model_config = ConfigDict(extra="forbid")

    text: str = Field(..., description="Plain-text body")
    html: str = Field(..., description="HTML body")


class PublishNewsletterRequest(BaseModel):
    """Request model for publishing a newsletter issue."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., description="Issue title, used as the email subject")
    content: NewsletterContent


class SubscribeResponse(BaseModel):
    """Response model for a successful subscription request."""

    message: str


class ConfirmResponse(BaseModel):
    """Response model for a successful confirmation."""

    message: str


class PublishNewsletterResponse(BaseModel):
    """Response model for a completed newsletter fan-out."""

    message: str
    recipients: int
    failed: int


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
