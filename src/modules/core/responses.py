"""Translation of domain exceptions into DRF responses.

Views catch the base kinds from ``modules.core.exceptions`` and hand
them to ``domain_error_response``: each kind maps to exactly one HTTP
status and the body always carries the exception message as ``detail``.
"""

from __future__ import annotations

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.response import Response

from modules.core.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

_STATUS_BY_KIND: list[tuple[type[DomainError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
]


def domain_error_response(exc: DomainError) -> Response:
    """Build the HTTP response for a domain error."""
    for kind, http_status in _STATUS_BY_KIND:
        if isinstance(exc, kind):
            break
    else:
        http_status = status.HTTP_400_BAD_REQUEST
    logger.info(
        "api.domain_error",
        error=type(exc).__name__,
        detail=exc.message,
        status_code=http_status,
    )
    return Response({"detail": exc.message}, status=http_status)


def dto_error_response(exc: PydanticValidationError) -> Response:
    """Build a 400 from a DTO that refused the request payload.

    ``detail`` carries the first failure as plain text; ``errors`` lists
    every failing field.
    """
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": _plain(err["msg"]),
        }
        for err in exc.errors()
    ]
    detail = errors[0]["message"] if errors else "invalid input"
    return Response(
        {"detail": detail, "errors": errors}, status=status.HTTP_400_BAD_REQUEST
    )


def _plain(message: str) -> str:
    prefix = "Value error, "
    return message[len(prefix):] if message.startswith(prefix) else message
