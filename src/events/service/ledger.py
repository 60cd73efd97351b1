"""Row-level operations on registrations.

Every status change goes through :func:`transition`, which validates it against the
registration state machine and applies it as a conditional UPDATE, so a stale in-memory
copy can never overwrite a concurrent change.
"""

import typing as t
from uuid import UUID

import structlog
from django.db.models import Count, F, Max, Q
from django.utils import timezone

from events.exceptions import NotFoundError, StoreConflictError
from events.models import Event, Registration, RegistrationStatus, VoidedCheckinCode

logger = structlog.get_logger(__name__)


class CapacitySnapshot(t.NamedTuple):
    total: int | None
    confirmed: int
    remaining: int | None
    waitlisted: int
    pending: int


def lock_event(event_id: UUID) -> Event:
    """Lock the event row for the rest of the transaction. Admission decisions serialize on it."""
    try:
        return Event.objects.select_for_update().get(pk=event_id)
    except Event.DoesNotExist as e:
        raise NotFoundError("Event not found.") from e


def lock_registration(registration_id: UUID) -> Registration:
    """Lock a registration row for the rest of the transaction."""
    try:
        return Registration.objects.select_for_update(of=("self",)).select_related("event", "user").get(
            pk=registration_id
        )
    except Registration.DoesNotExist as e:
        raise NotFoundError("Registration not found.") from e


def get_registration(registration_id: UUID) -> Registration:
    """Fetch a registration without locking it."""
    try:
        return Registration.objects.with_related().get(pk=registration_id)
    except Registration.DoesNotExist as e:
        raise NotFoundError("Registration not found.") from e


def capacity_snapshot(event: Event) -> CapacitySnapshot:
    """Count registrations by status in one query."""
    counts = Registration.objects.filter(event=event).aggregate(
        confirmed=Count("id", filter=Q(status=RegistrationStatus.CONFIRMED)),
        waitlisted=Count("id", filter=Q(status=RegistrationStatus.WAITLISTED)),
        pending=Count("id", filter=Q(status=RegistrationStatus.PENDING)),
    )
    total = event.capacity_total
    remaining = None if total is None else max(total - counts["confirmed"], 0)
    return CapacitySnapshot(
        total=total,
        confirmed=counts["confirmed"],
        remaining=remaining,
        waitlisted=counts["waitlisted"],
        pending=counts["pending"],
    )


def has_capacity(event: Event) -> bool:
    """Whether one more registration can be confirmed. Call with the event row locked."""
    if event.capacity_total is None:
        return True
    return Registration.objects.filter(event=event).confirmed().count() < event.capacity_total


def next_waitlist_position(event: Event) -> int:
    """The position after the current tail of the waitlist."""
    tail = Registration.objects.filter(event=event, status=RegistrationStatus.WAITLISTED).aggregate(
        tail=Max("waitlist_position")
    )["tail"]
    return (tail or 0) + 1


def compact_waitlist(event: Event, after_position: int) -> int:
    """Close the gap left at ``after_position`` by moving everyone behind it up one place."""
    return Registration.objects.filter(
        event=event, status=RegistrationStatus.WAITLISTED, waitlist_position__gt=after_position
    ).update(waitlist_position=F("waitlist_position") - 1, updated_at=timezone.now())


def transition(registration: Registration, status: RegistrationStatus, **fields: t.Any) -> Registration:
    """Move a registration to ``status``, together with any extra field updates.

    Raises:
        InvalidTransitionError: if the state machine forbids the change.
        StoreConflictError: if the row changed since ``registration`` was read.
    """
    registration.assert_transition(status)
    previous = registration.status
    updated = Registration.objects.filter(pk=registration.pk, status=previous, checked_in=False).update(
        status=status, updated_at=timezone.now(), **fields
    )
    if not updated:
        logger.warning(
            "registration_transition_conflict",
            registration_id=str(registration.pk),
            from_status=previous,
            to_status=status,
        )
        raise StoreConflictError()
    registration.refresh_from_db()
    logger.info(
        "registration_transition",
        registration_id=str(registration.pk),
        event_id=str(registration.event_id),
        from_status=previous,
        to_status=status,
    )
    return registration


def void_checkin_code(registration: Registration) -> VoidedCheckinCode | None:
    """Retire the registration's current code so it can never be minted again for the event."""
    if not registration.checkin_code:
        return None
    return VoidedCheckinCode.objects.create(
        event_id=registration.event_id, registration=registration, code=registration.checkin_code
    )
