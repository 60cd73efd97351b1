"""Tests for the API exception handlers."""

from datetime import UTC, datetime

import orjson
import pytest
from django.core.exceptions import ValidationError
from django.test import RequestFactory

from api.exception_handlers import (
    handle_django_validation_error,
    handle_general_exception,
    handle_ticketing_error,
    obfuscate,
)
from events.exceptions import AlreadyCheckedInError, NotFoundError, OfferExpiredError, TicketingError


@pytest.fixture
def rf() -> RequestFactory:
    return RequestFactory()


@pytest.mark.parametrize(
    "exc,status,code",
    [
        (NotFoundError(), 404, "not_found"),
        (OfferExpiredError(), 410, "expired"),
        (TicketingError("Something else."), 400, "ticketing_error"),
    ],
)
def test_ticketing_errors_map_to_status_and_code(
    rf: RequestFactory, exc: TicketingError, status: int, code: str
) -> None:
    response = handle_ticketing_error(rf.post("/api/registrations"), exc)

    assert response.status_code == status
    body = orjson.loads(response.content)
    assert body["code"] == code
    assert body["detail"]


def test_custom_detail_is_returned(rf: RequestFactory) -> None:
    response = handle_ticketing_error(rf.get("/"), NotFoundError("Transfer offer not found."))

    assert orjson.loads(response.content)["detail"] == "Transfer offer not found."


def test_already_checked_in_carries_timestamp(rf: RequestFactory) -> None:
    checked_in_at = datetime(2026, 5, 1, 18, 30, tzinfo=UTC)

    response = handle_ticketing_error(rf.post("/"), AlreadyCheckedInError(checked_in_at=checked_in_at))

    assert response.status_code == 409
    assert orjson.loads(response.content)["checked_in_at"] == checked_in_at.isoformat()


def test_validation_error_with_fields(rf: RequestFactory) -> None:
    exc = ValidationError({"recipient": ["A direct transfer needs a recipient."]})

    response = handle_django_validation_error(rf.post("/"), exc)

    assert response.status_code == 400
    assert orjson.loads(response.content) == {"errors": {"recipient": ["A direct transfer needs a recipient."]}}


def test_validation_error_without_fields(rf: RequestFactory) -> None:
    response = handle_django_validation_error(rf.post("/"), ValidationError("Broken."))

    assert orjson.loads(response.content) == {"errors": {"__all__": ["Broken."]}}


def test_general_exception_hides_details(rf: RequestFactory) -> None:
    request = rf.post("/api/transfer-offers/claim", data={"code": "SECRET1234"}, content_type="application/json")

    try:
        raise RuntimeError("boom")
    except RuntimeError as e:
        response = handle_general_exception(request, e)

    assert response.status_code == 500
    assert orjson.loads(response.content)["detail"] == "Internal Server Error."


def test_obfuscate_masks_sensitive_keys() -> None:
    data = {"Authorization": "Bearer abc", "code": "ABCD2345", "event_id": "1"}

    assert obfuscate(data) == {"Authorization": "********", "code": "********", "event_id": "1"}
    assert data["code"] == "ABCD2345"
    assert obfuscate(["not", "a", "dict"]) == ["not", "a", "dict"]
