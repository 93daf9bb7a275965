"""
Exception handlers shared by the application and test apps.

Request decoding failures (missing form fields, malformed JSON, unknown keys)
are client errors and answer 400 rather than FastAPI's default 422.
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the 400 handler for request validation errors."""
    app.add_exception_handler(RequestValidationError, request_validation_handler)
