import typing as t

from django.db import transaction

from accounts.models import GatepassUser
from events.models import Registration, TransferOffer
from notifications.enums import NotificationType
from notifications.signals import notification_requested


def notify_on_commit(notification_type: NotificationType, user: GatepassUser, context: dict[str, t.Any]) -> None:
    """Request a notification once the surrounding transaction has committed.

    Nothing is sent for a unit that rolls back.
    """
    transaction.on_commit(
        lambda: notification_requested.send(
            sender=Registration, notification_type=notification_type, user=user, context=context
        )
    )


def registration_context(registration: Registration) -> dict[str, t.Any]:
    """Context shared by every registration notification."""
    return {
        "registration_id": str(registration.id),
        "event_id": str(registration.event_id),
        "event_name": registration.event.name,
        "attendee_name": registration.attendee_name,
        "status": registration.status,
        "waitlist_position": registration.waitlist_position,
    }


def offer_context(offer: TransferOffer) -> dict[str, t.Any]:
    """Context shared by every transfer offer notification."""
    return {
        "offer_id": str(offer.id),
        "registration_id": str(offer.registration_id),
        "event_id": str(offer.event_id),
        "kind": offer.kind,
        "expires_at": offer.expires_at.isoformat(),
    }
