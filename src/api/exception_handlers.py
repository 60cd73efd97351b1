"""Exception handlers for the API."""

import traceback
import typing as t
from copy import deepcopy

import orjson
import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja.responses import Response

from events.exceptions import TicketingError

logger = structlog.get_logger(__name__)


def handle_general_exception(request: HttpRequest, exc: Exception | t.Type[Exception]) -> Response:
    """Handle a general exception.

    Args:
        request: The incoming HTTP request.
        exc: The exception.

    Returns:
        The response.
    """
    data = {"detail": "Internal Server Error."}
    tb_str = traceback.format_exc()
    is_staff = getattr(request, "user", None) and request.user.is_staff
    if request.method in ("POST", "PUT", "PATCH") and request.headers.get("Content-Type") == "application/json":
        try:
            json_payload = obfuscate(orjson.loads(request.body))
        except orjson.JSONDecodeError:  # pragma: no cover
            json_payload = None
    else:
        json_payload = None
    logger.exception(
        "INTERNAL_SERVER_ERROR",
        path=f"{request.method} {request.path}",
        headers=obfuscate(dict(request.headers)),
        query=obfuscate(request.GET.dict()),
        json_payload=json_payload,
        # note: we can do request.user because we set the user in the auth flow
        user=str(request.user) if getattr(request, "user", None) else None,
    )
    if settings.DEBUG or is_staff:  # pragma: no cover
        data["traceback"] = tb_str
    return Response(status=500, data=data)


def handle_django_validation_error(request: HttpRequest, exc: ValidationError | t.Type[ValidationError]) -> Response:
    """Handle a validation error.

    Args:
        request: The incoming HTTP request.
        exc: The exception.
    """
    logger.warning("VALIDATION_ERROR", path=request.path)
    if hasattr(exc, "error_dict"):
        error_dict = {k: [ee for e in v for ee in e] for k, v in exc.error_dict.items()}
    else:
        error_dict = {"__all__": list(exc.messages)}  # type: ignore[arg-type]
    return Response(status=400, data={"errors": error_dict})


def handle_ticketing_error(request: HttpRequest, exc: TicketingError | t.Type[TicketingError]) -> Response:
    """Map a domain error to its status code and a ``{"detail", "code"}`` body."""
    assert isinstance(exc, TicketingError)
    logger.info("ticketing_error", code=exc.code, status_code=exc.status_code, path=request.path)
    return Response(status=exc.status_code, data={"detail": exc.detail, "code": exc.code, **exc.extra()})


SENSITIVE_KEYS = {"password", "token", "x-api-key", "authorization", "authentication", "code"}


def obfuscate(data: t.Any) -> t.Any:
    """Obfuscate sensitive data in payloads and headers."""
    if not isinstance(data, dict):
        return data
    new_data = deepcopy(data)
    for key in data.keys():
        if key.lower() in SENSITIVE_KEYS:
            new_data[key] = "********"
    return new_data
