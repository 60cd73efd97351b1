import typing as t
from datetime import UTC, datetime

import pytest
from freezegun import freeze_time

from accounts.models import GatepassUser
from events.exceptions import AlreadyCheckedInError, NotFoundError
from events.models import Event, Registration, RegistrationStatus
from events.models.registration import RegistrationQuerySet
from events.service import admission, transfers
from events.service.checkin import check_in
from notifications.enums import NotificationType
from notifications.models import Notification

pytestmark = pytest.mark.django_db


def test_check_in_marks_registration(alice_registration: Registration, organizer: GatepassUser) -> None:
    assert alice_registration.checkin_code

    with freeze_time("2026-05-01 18:30:00"):
        registration = check_in(alice_registration.event, alice_registration.checkin_code, checked_in_by=organizer)

    assert registration.pk == alice_registration.pk
    assert registration.checked_in
    assert registration.checked_in_by == organizer
    assert registration.checked_in_at == datetime(2026, 5, 1, 18, 30, tzinfo=UTC)


def test_code_is_normalized(alice_registration: Registration, organizer: GatepassUser) -> None:
    assert alice_registration.checkin_code
    raw = " ".join(alice_registration.checkin_code.lower())

    assert check_in(alice_registration.event, raw, checked_in_by=organizer).checked_in


def test_second_scan_reports_first_timestamp(alice_registration: Registration, organizer: GatepassUser) -> None:
    assert alice_registration.checkin_code
    first = check_in(alice_registration.event, alice_registration.checkin_code, checked_in_by=organizer)

    with pytest.raises(AlreadyCheckedInError) as exc_info:
        check_in(alice_registration.event, alice_registration.checkin_code, checked_in_by=organizer)

    assert first.checked_in_at is not None
    assert exc_info.value.checked_in_at == first.checked_in_at
    assert exc_info.value.extra() == {"checked_in_at": first.checked_in_at.isoformat()}


def test_unknown_code_is_not_found(event: Event, organizer: GatepassUser) -> None:
    with pytest.raises(NotFoundError):
        check_in(event, "ZZZZZZZZ", checked_in_by=organizer)


def test_code_of_another_event_is_not_found(
    alice_registration: Registration, single_seat_event: Event, organizer: GatepassUser
) -> None:
    assert alice_registration.checkin_code

    with pytest.raises(NotFoundError):
        check_in(single_seat_event, alice_registration.checkin_code, checked_in_by=organizer)


def test_cancelled_registration_code_is_not_found(
    alice_registration: Registration, alice: GatepassUser, organizer: GatepassUser
) -> None:
    code = alice_registration.checkin_code
    assert code
    admission.cancel(alice_registration, actor=alice)

    with pytest.raises(NotFoundError):
        check_in(alice_registration.event, code, checked_in_by=organizer)


def test_code_voided_by_transfer_is_not_found(
    alice_registration: Registration, alice: GatepassUser, bob: GatepassUser, organizer: GatepassUser
) -> None:
    old_code = alice_registration.checkin_code
    assert old_code
    offer = transfers.create_offer(alice_registration, alice)
    received = transfers.accept_offer(offer.pk, bob)

    with pytest.raises(NotFoundError):
        check_in(alice_registration.event, old_code, checked_in_by=organizer)

    assert received.checkin_code
    assert check_in(alice_registration.event, received.checkin_code, checked_in_by=organizer).user == bob


def test_check_in_notifies_holder(
    alice_registration: Registration,
    alice: GatepassUser,
    organizer: GatepassUser,
    django_capture_on_commit_callbacks: t.Any,
) -> None:
    assert alice_registration.checkin_code

    with django_capture_on_commit_callbacks(execute=True):
        check_in(alice_registration.event, alice_registration.checkin_code, checked_in_by=organizer)

    assert Notification.objects.filter(user=alice, notification_type=NotificationType.CHECKED_IN).exists()


def _change_after_lookup(monkeypatch: pytest.MonkeyPatch, **changes: t.Any) -> None:
    """Apply ``changes`` to the row right after check_in has read it, as a concurrent scanner would."""
    original_first = RegistrationQuerySet.first

    def first(self: RegistrationQuerySet) -> Registration | None:
        found = original_first(self)
        if found is not None:
            Registration.objects.filter(pk=found.pk).update(**changes)
        return found

    monkeypatch.setattr(RegistrationQuerySet, "first", first)


def test_losing_a_concurrent_scan_reports_the_winner(
    alice_registration: Registration, organizer: GatepassUser, superuser: GatepassUser, monkeypatch: pytest.MonkeyPatch
) -> None:
    assert alice_registration.checkin_code
    winner_at = datetime(2026, 5, 1, 18, 29, tzinfo=UTC)
    _change_after_lookup(monkeypatch, checked_in=True, checked_in_at=winner_at, checked_in_by=superuser)

    with pytest.raises(AlreadyCheckedInError) as exc_info:
        check_in(alice_registration.event, alice_registration.checkin_code, checked_in_by=organizer)

    assert exc_info.value.checked_in_at == winner_at
    alice_registration.refresh_from_db()
    assert alice_registration.checked_in_by == superuser


def test_cancellation_between_lookup_and_update_is_not_found(
    alice_registration: Registration, organizer: GatepassUser, monkeypatch: pytest.MonkeyPatch
) -> None:
    assert alice_registration.checkin_code
    _change_after_lookup(monkeypatch, status=RegistrationStatus.CANCELLED)

    with pytest.raises(NotFoundError):
        check_in(alice_registration.event, alice_registration.checkin_code, checked_in_by=organizer)

    alice_registration.refresh_from_db()
    assert not alice_registration.checked_in
