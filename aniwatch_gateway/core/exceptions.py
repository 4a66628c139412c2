"""
Custom exception classes and handlers.

Every failure leaves the gateway as a JSON ErrorEnvelope whose ``status``
matches the HTTP status line.
"""

import logging
from http import HTTPStatus

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..models.envelope import NOT_FOUND, ErrorEnvelope

logger = logging.getLogger("gateway.errors")

UNMATCHED_STATUSES = frozenset({status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED})


class GatewayError(Exception):
    """Base exception class for the gateway."""

    pass


class HiAnimeError(GatewayError):
    """
    Failure reported by the HiAnime scraper.

    Carries its own HTTP status and message, surfaced to clients verbatim.
    """

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(message)

    @property
    def envelope(self) -> ErrorEnvelope:
        return ErrorEnvelope(status=self.status, message=self.message)

    @classmethod
    def from_envelope(cls, envelope: ErrorEnvelope) -> "HiAnimeError":
        return cls(envelope.status, envelope.message)


def envelope_response(envelope: ErrorEnvelope, headers=None) -> JSONResponse:
    """Render an envelope with a status line that always matches its body."""
    return JSONResponse(
        status_code=envelope.status, content=envelope.model_dump(), headers=headers
    )


def resolve_envelope(exc: Exception) -> ErrorEnvelope:
    """
    Map a failure to its envelope.

    Failures tagged with an ``envelope`` (domain errors) keep their own status
    and message; everything else collapses to the default 500 envelope.
    """
    envelope = getattr(exc, "envelope", None)
    if isinstance(envelope, ErrorEnvelope):
        return envelope
    return ErrorEnvelope()


# ===========================================
# Exception Handlers
# ===========================================


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unhandled exceptions.
    """
    logger.error(
        f"Global exception handler caught: {exc}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )
    return envelope_response(resolve_envelope(exc))


async def domain_exception_handler(request: Request, exc: HiAnimeError):
    """
    Handler for scraper failures.
    """
    logger.warning(
        f"HiAnime error {exc.status}: {exc.message}",
        extra={"path": request.url.path, "method": request.method},
    )
    return envelope_response(resolve_envelope(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for HTTPException (unmatched routes, missing static files).

    A method no route accepts is answered like an unknown path (404).
    """
    if exc.status_code in UNMATCHED_STATUSES:
        return envelope_response(NOT_FOUND)

    try:
        message = HTTPStatus(exc.status_code).phrase
    except ValueError:
        message = str(exc.detail)
    return envelope_response(
        ErrorEnvelope(status=exc.status_code, message=message),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for validation errors.
    """
    errors = exc.errors()
    message = "Bad Request"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "query")
        message = f"Invalid {location}: {first.get('msg')}" if location else str(first.get("msg"))
    return envelope_response(ErrorEnvelope(status=status.HTTP_400_BAD_REQUEST, message=message))


def register_exception_handlers(app) -> None:
    app.add_exception_handler(Exception, global_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HiAnimeError, domain_exception_handler)
