"""
Application Exceptions

Domain errors raised by the service layer and rendered by a single FastAPI
exception handler as localized JSON responses.
"""

import logging
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse

from studizen.core.i18n import language_from_header, translate


logger = logging.getLogger(__name__)


class StudizenError(Exception):
    """
    Base class for errors that map to a user-visible message.

    Attributes:
        message_key: Key into the i18n message table.
        http_status: Status code used when rendered by the API.
        params: Format parameters for the message.
        headers: Extra response headers (e.g. Retry-After).
    """

    message_key = "try_again"
    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message_key: Optional[str] = None,
        *,
        language: Optional[str] = None,
        headers: Optional[dict] = None,
        **params: object,
    ):
        if message_key is not None:
            self.message_key = message_key
        self.language = language
        self.headers = headers
        self.params = params
        super().__init__(translate(self.message_key, "en", **params))

    def localized(self, fallback_language: Optional[str] = None) -> str:
        """Render the message in the error's language, or the fallback."""
        return translate(self.message_key, self.language or fallback_language, **self.params)


class PersistenceError(StudizenError):
    """The record store rejected a read or write."""

    message_key = "try_again"
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE


class NotFoundError(StudizenError):
    """A requested record does not exist or is not owned by the caller."""

    message_key = "record_not_found"
    http_status = status.HTTP_404_NOT_FOUND


class ConflictError(StudizenError):
    """A uniqueness rule would be violated."""

    http_status = status.HTTP_400_BAD_REQUEST


class VerificationError(StudizenError):
    """A submitted verification code was rejected."""

    http_status = status.HTTP_400_BAD_REQUEST


class TooManyRequestsError(StudizenError):
    """Attempt ceiling or resend cooldown reached."""

    http_status = status.HTTP_429_TOO_MANY_REQUESTS


class PermissionDeniedError(StudizenError):
    """The caller lacks the role or plan required for the operation."""

    http_status = status.HTTP_403_FORBIDDEN


class CredentialsError(StudizenError):
    """A password re-check for a sensitive account change failed."""

    message_key = "password_incorrect"
    http_status = status.HTTP_400_BAD_REQUEST


class DeliveryFailedError(StudizenError):
    """A code email was not sent and the code must not be shown on screen."""

    message_key = "reset_email_failed"
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE


async def studizen_error_handler(request: Request, exc: StudizenError) -> JSONResponse:
    """Render a StudizenError as {"detail": <localized message>}."""
    if isinstance(exc, PersistenceError):
        logger.error(f"Persistence failure on {request.method} {request.url.path}: {exc.__cause__ or exc}")

    language = language_from_header(request.headers.get("accept-language"))
    return JSONResponse(
        status_code=exc.http_status,
        content={"detail": exc.localized(language)},
        headers=exc.headers,
    )
