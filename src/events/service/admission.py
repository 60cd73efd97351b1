"""Capacity-aware registration, cancellation, waitlist promotion and organizer approval.

Every operation locks the event row first. Confirmed counts are only ever read under that
lock, so concurrent admissions for the same event serialize and capacity cannot be oversold.
"""

import typing as t

import structlog
from django.db import IntegrityError, transaction

from accounts.models import GatepassUser
from events.exceptions import (
    CapacityExceededError,
    DuplicateRegistrationError,
    EventNotOpenError,
    InvalidTransitionError,
    NotOwnerError,
    StoreConflictError,
)
from events.models import Event, InvitationChannel, Registration, RegistrationStatus
from events.service import channels, ledger, retry_on_store_conflict, transfers
from events.service.codes import mint_checkin_code
from events.service.notify import notify_on_commit, registration_context
from notifications.enums import NotificationType

logger = structlog.get_logger(__name__)

ADMISSION_NOTIFICATIONS = {
    RegistrationStatus.CONFIRMED: NotificationType.REGISTRATION_CONFIRMED,
    RegistrationStatus.PENDING: NotificationType.REGISTRATION_PENDING,
    RegistrationStatus.WAITLISTED: NotificationType.REGISTRATION_WAITLISTED,
}


@retry_on_store_conflict
@transaction.atomic
def register(
    event: Event,
    user: GatepassUser,
    *,
    channel_code: str | None = None,
    attendee_name: str | None = None,
) -> Registration:
    """Register the user for the event.

    Lands in ``pending`` when the event requires approval, ``confirmed`` (with a check-in code)
    while seats remain, and ``waitlisted`` at the tail of the waitlist otherwise.

    Raises:
        EventNotOpenError: if the event is not open.
        DuplicateRegistrationError: if the user already holds an active registration.
        CapacityExceededError: if the event is full and has no waitlist.
        NotFoundError: if ``channel_code`` is not an active channel of this event.
    """
    event = ledger.lock_event(event.pk)
    if not event.is_open:
        raise EventNotOpenError()
    if Registration.objects.active().filter(event=event, user=user).exists():
        raise DuplicateRegistrationError()

    channel = channels.resolve_channel(event, channel_code) if channel_code else None
    fields: dict[str, t.Any] = {
        "event": event,
        "user": user,
        "attendee_name": (attendee_name or user.display_name)[:150],
        "channel": channel,
    }
    if event.requires_approval:
        fields["status"] = RegistrationStatus.PENDING
    elif ledger.has_capacity(event):
        fields["status"] = RegistrationStatus.CONFIRMED
        fields["checkin_code"] = mint_checkin_code(event)
    elif event.waitlist_enabled:
        fields["status"] = RegistrationStatus.WAITLISTED
        fields["waitlist_position"] = ledger.next_waitlist_position(event)
    else:
        raise CapacityExceededError()

    registration = _insert_registration(event, user, fields)
    logger.info(
        "registration_created",
        registration_id=str(registration.id),
        event_id=str(event.id),
        user_id=str(user.id),
        status=registration.status,
        waitlist_position=registration.waitlist_position,
        channel_id=str(channel.id) if channel else None,
    )
    notify_on_commit(ADMISSION_NOTIFICATIONS[registration.status], user, registration_context(registration))
    return registration


def _insert_registration(event: Event, user: GatepassUser, fields: dict[str, t.Any]) -> Registration:
    try:
        with transaction.atomic():
            return Registration.objects.create(**fields)
    except IntegrityError as e:
        # The event lock makes this unreachable on PostgreSQL; other backends may still race.
        if Registration.objects.active().filter(event=event, user=user).exists():
            raise DuplicateRegistrationError() from e
        raise StoreConflictError() from e


def redeem_channel_code(code: str, user: GatepassUser, *, attendee_name: str | None = None) -> Registration:
    """Register through an invitation channel code, attributing the registration to the channel."""
    channel: InvitationChannel = channels.get_active_channel_by_code(code)
    return register(channel.event, user, channel_code=channel.code, attendee_name=attendee_name)


@retry_on_store_conflict
@transaction.atomic
def cancel(registration: Registration, *, actor: GatepassUser) -> Registration:
    """Cancel a registration on behalf of its holder or the event organizer.

    Cancelling a confirmed registration promotes the head of the waitlist into the freed seat.
    Cancelling a waitlisted one closes the gap it leaves.

    Raises:
        NotOwnerError: if the actor is neither the holder nor the organizer.
        InvalidTransitionError: if the registration is already terminal or checked in.
    """
    event = ledger.lock_event(registration.event_id)
    registration = ledger.lock_registration(registration.pk)
    if registration.user_id != actor.pk and not event.is_organizer(actor):
        raise NotOwnerError()

    previous_status = registration.status
    previous_position = registration.waitlist_position
    registration = ledger.transition(registration, RegistrationStatus.CANCELLED, waitlist_position=None)
    transfers.cancel_pending_offers(registration)

    if previous_status == RegistrationStatus.CONFIRMED:
        promote_next(event)
    elif previous_status == RegistrationStatus.WAITLISTED and previous_position is not None:
        ledger.compact_waitlist(event, previous_position)

    logger.info(
        "registration_cancelled",
        registration_id=str(registration.id),
        event_id=str(event.id),
        actor_id=str(actor.id),
        previous_status=previous_status,
    )
    notify_on_commit(
        NotificationType.REGISTRATION_CANCELLED, registration.user, registration_context(registration)
    )
    return registration


def promote_next(event: Event) -> Registration | None:
    """Confirm the head of the waitlist if a seat is free. Call with the event row locked."""
    if not ledger.has_capacity(event):
        return None
    head = Registration.objects.select_for_update(of=("self",)).filter(event=event).waitlisted().first()
    if head is None:
        return None

    position = head.waitlist_position
    head = ledger.transition(
        head, RegistrationStatus.CONFIRMED, waitlist_position=None, checkin_code=mint_checkin_code(event)
    )
    if position is not None:
        ledger.compact_waitlist(event, position)

    logger.info("waitlist_promoted", registration_id=str(head.id), event_id=str(event.id), from_position=position)
    notify_on_commit(NotificationType.WAITLIST_PROMOTED, head.user, registration_context(head))
    return head


@retry_on_store_conflict
@transaction.atomic
def approve(registration: Registration, *, actor: GatepassUser) -> Registration:
    """Confirm a pending registration, minting its check-in code.

    Raises:
        NotOwnerError: if the actor does not organize the event.
        InvalidTransitionError: if the registration is not pending.
        CapacityExceededError: if no seat is left.
    """
    event = ledger.lock_event(registration.event_id)
    if not event.is_organizer(actor):
        raise NotOwnerError("Only the organizer can approve registrations.")
    registration = ledger.lock_registration(registration.pk)
    if registration.status != RegistrationStatus.PENDING:
        raise InvalidTransitionError("Only pending registrations can be approved.")
    if not ledger.has_capacity(event):
        raise CapacityExceededError()

    registration = ledger.transition(
        registration, RegistrationStatus.CONFIRMED, checkin_code=mint_checkin_code(event)
    )
    logger.info("registration_approved", registration_id=str(registration.id), actor_id=str(actor.id))
    notify_on_commit(
        NotificationType.REGISTRATION_CONFIRMED, registration.user, registration_context(registration)
    )
    return registration


@retry_on_store_conflict
@transaction.atomic
def reject(registration: Registration, *, actor: GatepassUser) -> Registration:
    """Reject a pending registration.

    Raises:
        NotOwnerError: if the actor does not organize the event.
        InvalidTransitionError: if the registration is not pending.
    """
    event = ledger.lock_event(registration.event_id)
    if not event.is_organizer(actor):
        raise NotOwnerError("Only the organizer can reject registrations.")
    registration = ledger.lock_registration(registration.pk)
    registration = ledger.transition(registration, RegistrationStatus.REJECTED)
    logger.info("registration_rejected", registration_id=str(registration.id), actor_id=str(actor.id))
    notify_on_commit(
        NotificationType.REGISTRATION_REJECTED, registration.user, registration_context(registration)
    )
    return registration


def capacity(event: Event) -> ledger.CapacitySnapshot:
    """Current capacity figures for the event."""
    return ledger.capacity_snapshot(event)
