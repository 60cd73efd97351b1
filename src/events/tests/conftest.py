import typing as t
from datetime import datetime

import pytest
from django.test.client import Client

from accounts.models import GatepassUser
from conftest import GatepassUserFactory
from events.models import Event, Registration
from events.service import admission


@pytest.fixture
def organizer(user_factory: GatepassUserFactory) -> GatepassUser:
    return user_factory(username="organizer@example.com", preferred_name="Olga Organizer")


@pytest.fixture
def organizer_client(organizer: GatepassUser, client_for: t.Callable[[GatepassUser], Client]) -> Client:
    """API client for the event organizer."""
    return client_for(organizer)


@pytest.fixture
def alice(user_factory: GatepassUserFactory) -> GatepassUser:
    return user_factory(username="alice@example.com", preferred_name="Alice")


@pytest.fixture
def bob(user_factory: GatepassUserFactory) -> GatepassUser:
    return user_factory(username="bob@example.com", preferred_name="Bob")


@pytest.fixture
def carol(user_factory: GatepassUserFactory) -> GatepassUser:
    return user_factory(username="carol@example.com", preferred_name="Carol")


@pytest.fixture
def event(organizer: GatepassUser, next_week: datetime) -> Event:
    """An open event with two seats."""
    return Event.objects.create(
        name="Event", organizer=organizer, status=Event.EventStatus.OPEN, capacity_total=2, start=next_week
    )


@pytest.fixture
def single_seat_event(organizer: GatepassUser, next_week: datetime) -> Event:
    """An open event with a single seat."""
    return Event.objects.create(
        name="Single Seat", organizer=organizer, status=Event.EventStatus.OPEN, capacity_total=1, start=next_week
    )


@pytest.fixture
def unlimited_event(organizer: GatepassUser, next_week: datetime) -> Event:
    """An open event without a capacity limit."""
    return Event.objects.create(name="Unlimited", organizer=organizer, status=Event.EventStatus.OPEN, start=next_week)


@pytest.fixture
def approval_event(organizer: GatepassUser, next_week: datetime) -> Event:
    """An open event whose registrations need the organizer's approval."""
    return Event.objects.create(
        name="Approval",
        organizer=organizer,
        status=Event.EventStatus.OPEN,
        capacity_total=1,
        requires_approval=True,
        start=next_week,
    )


@pytest.fixture
def alice_registration(event: Event, alice: GatepassUser) -> Registration:
    """Alice's confirmed registration for ``event``."""
    return admission.register(event, alice)


@pytest.fixture
def alice_client(alice: GatepassUser, client_for: t.Callable[[GatepassUser], Client]) -> Client:
    return client_for(alice)


@pytest.fixture
def bob_client(bob: GatepassUser, client_for: t.Callable[[GatepassUser], Client]) -> Client:
    return client_for(bob)
