import structlog
from django.db import transaction
from django.utils import timezone

from accounts.models import GatepassUser
from events.exceptions import AlreadyCheckedInError, NotFoundError
from events.models import Event, Registration, RegistrationStatus
from events.service.codes import normalize_code
from events.service.notify import notify_on_commit, registration_context
from notifications.enums import NotificationType

logger = structlog.get_logger(__name__)


@transaction.atomic
def check_in(event: Event, code: str, *, checked_in_by: GatepassUser) -> Registration:
    """Consume a check-in code at the door.

    The flag flips through a single conditional UPDATE, so of two scanners presenting the same
    code at the same time exactly one succeeds.

    Raises:
        NotFoundError: if the code does not belong to a confirmed registration of the event.
            Codes voided by a transfer and cancelled registrations never match.
        AlreadyCheckedInError: if the code was already used.
    """
    normalized = normalize_code(code)
    registration = (
        Registration.objects.select_related("user", "event")
        .filter(event=event, checkin_code=normalized, status=RegistrationStatus.CONFIRMED)
        .first()
    )
    if registration is None:
        logger.info("checkin_code_not_found", event_id=str(event.id))
        raise NotFoundError("Check-in code not found.")
    if registration.checked_in:
        logger.info("checkin_duplicate", registration_id=str(registration.id), event_id=str(event.id))
        raise AlreadyCheckedInError(checked_in_at=registration.checked_in_at)

    now = timezone.now()
    updated = Registration.objects.filter(
        pk=registration.pk,
        status=RegistrationStatus.CONFIRMED,
        checked_in=False,
        checkin_code=normalized,
    ).update(checked_in=True, checked_in_at=now, checked_in_by=checked_in_by, updated_at=now)

    registration.refresh_from_db()
    if not updated:
        if registration.checked_in:
            logger.info("checkin_lost_race", registration_id=str(registration.id), event_id=str(event.id))
            raise AlreadyCheckedInError(checked_in_at=registration.checked_in_at)
        # Cancelled or transferred between the lookup and the update.
        raise NotFoundError("Check-in code not found.")

    logger.info(
        "registration_checked_in",
        registration_id=str(registration.id),
        event_id=str(event.id),
        checked_in_by=str(checked_in_by.id),
    )
    notify_on_commit(NotificationType.CHECKED_IN, registration.user, registration_context(registration))
    return registration
