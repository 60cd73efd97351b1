"""Tests for the attendee registration endpoints."""

import typing as t
from uuid import uuid4

import orjson
import pytest
from django.shortcuts import reverse  # type: ignore[attr-defined]
from django.test.client import Client

from accounts.models import GatepassUser
from events.models import Event, Registration, RegistrationStatus
from events.service import admission, channels

pytestmark = pytest.mark.django_db


def _post(client: Client, url: str, payload: dict[str, t.Any] | None = None) -> t.Any:
    return client.post(url, data=orjson.dumps(payload or {}), content_type="application/json")


class TestRegister:
    def test_confirmed_registration_includes_code(self, alice_client: Client, event: Event, alice: GatepassUser) -> None:
        response = _post(alice_client, reverse("api:register"), {"event_id": str(event.id)})

        assert response.status_code == 201, response.content
        data = response.json()
        assert data["status"] == RegistrationStatus.CONFIRMED
        assert data["checkin_code"] == Registration.objects.get(user=alice).checkin_code
        assert data["user"]["id"] == str(alice.id)
        assert data["waitlist_position"] is None

    def test_full_event_waitlists(
        self, bob_client: Client, single_seat_event: Event, alice: GatepassUser
    ) -> None:
        admission.register(single_seat_event, alice)

        response = _post(bob_client, reverse("api:register"), {"event_id": str(single_seat_event.id)})

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == RegistrationStatus.WAITLISTED
        assert data["waitlist_position"] == 1
        assert data["checkin_code"] is None

    def test_duplicate_registration_conflicts(self, alice_client: Client, alice_registration: Registration) -> None:
        response = _post(alice_client, reverse("api:register"), {"event_id": str(alice_registration.event_id)})

        assert response.status_code == 409
        assert response.json()["code"] == "duplicate_registration"

    def test_closed_event_is_rejected(self, alice_client: Client, event: Event) -> None:
        event.status = Event.EventStatus.CLOSED
        event.save()

        response = _post(alice_client, reverse("api:register"), {"event_id": str(event.id)})

        assert response.status_code == 400
        assert response.json()["code"] == "event_not_open"

    def test_unknown_event_is_not_found(self, alice_client: Client) -> None:
        response = _post(alice_client, reverse("api:register"), {"event_id": str(uuid4())})

        assert response.status_code == 404

    def test_requires_authentication(self, event: Event) -> None:
        response = _post(Client(), reverse("api:register"), {"event_id": str(event.id)})

        assert response.status_code == 401


def test_redeem_channel_code(alice_client: Client, event: Event, organizer: GatepassUser) -> None:
    channel = channels.create_channel(event, "Newsletter", actor=organizer)

    response = _post(alice_client, reverse("api:redeem_channel_code"), {"code": channel.code.lower()})

    assert response.status_code == 201
    assert response.json()["channel_id"] == str(channel.id)


class TestMyRegistrations:
    def test_lists_only_own_registrations(
        self, alice_client: Client, alice_registration: Registration, unlimited_event: Event, bob: GatepassUser
    ) -> None:
        admission.register(unlimited_event, bob)

        response = alice_client.get(reverse("api:my_registrations"))

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["results"][0]["id"] == str(alice_registration.id)

    def test_filters_by_status(
        self, alice_client: Client, alice: GatepassUser, alice_registration: Registration, unlimited_event: Event
    ) -> None:
        admission.cancel(admission.register(unlimited_event, alice), actor=alice)

        response = alice_client.get(reverse("api:my_registrations"), {"status": "cancelled"})

        results = response.json()["results"]
        assert [r["event_id"] for r in results] == [str(unlimited_event.id)]


class TestGetRegistration:
    def test_holder_sees_registration(self, alice_client: Client, alice_registration: Registration) -> None:
        url = reverse("api:get_registration", kwargs={"registration_id": alice_registration.id})

        response = alice_client.get(url)

        assert response.status_code == 200
        assert response.json()["checkin_code"] == alice_registration.checkin_code

    def test_organizer_sees_registration(self, organizer_client: Client, alice_registration: Registration) -> None:
        url = reverse("api:get_registration", kwargs={"registration_id": alice_registration.id})

        assert organizer_client.get(url).status_code == 200

    def test_stranger_is_forbidden(self, bob_client: Client, alice_registration: Registration) -> None:
        url = reverse("api:get_registration", kwargs={"registration_id": alice_registration.id})

        response = bob_client.get(url)

        assert response.status_code == 403
        assert response.json()["code"] == "not_owner"


class TestCancelRegistration:
    def test_holder_cancels_and_waitlist_moves_up(
        self, single_seat_event: Event, alice: GatepassUser, bob: GatepassUser, alice_client: Client
    ) -> None:
        seat = admission.register(single_seat_event, alice)
        waiting = admission.register(single_seat_event, bob)
        url = reverse("api:cancel_registration", kwargs={"registration_id": seat.id})

        response = _post(alice_client, url)

        assert response.status_code == 204
        waiting.refresh_from_db()
        assert waiting.status == RegistrationStatus.CONFIRMED

    def test_stranger_cannot_cancel(self, bob_client: Client, alice_registration: Registration) -> None:
        url = reverse("api:cancel_registration", kwargs={"registration_id": alice_registration.id})

        response = _post(bob_client, url)

        assert response.status_code == 403

    def test_already_cancelled_is_invalid(
        self, alice_client: Client, alice: GatepassUser, alice_registration: Registration
    ) -> None:
        admission.cancel(alice_registration, actor=alice)
        url = reverse("api:cancel_registration", kwargs={"registration_id": alice_registration.id})

        response = _post(alice_client, url)

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_transition"
