"""Time-boxed, single-acceptance offers that hand a confirmed registration to another user.

An offer moves from ``pending`` to exactly one of ``accepted``, ``cancelled`` or ``expired``
and never re-opens. Acceptance is won by a conditional UPDATE on the offer row; the
registration row is locked in the same transaction and reassigned, so of two concurrent
acceptors exactly one becomes the holder.
"""

from datetime import timedelta
from uuid import UUID

import structlog
from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from accounts.models import GatepassUser
from events.exceptions import (
    AlreadyTransferringError,
    DuplicateRegistrationError,
    NotFoundError,
    NotOwnerError,
    NotPendingError,
    NotRecipientError,
    NotTransferableError,
    OfferExpiredError,
    SelfTransferError,
    StoreConflictError,
)
from events.models import Registration, RegistrationStatus, TransferOffer
from events.service import ledger, retry_on_store_conflict
from events.service.codes import mint_checkin_code, mint_offer_code, normalize_code
from events.service.notify import notify_on_commit, offer_context, registration_context
from notifications.enums import NotificationType

logger = structlog.get_logger(__name__)

OfferStatus = TransferOffer.OfferStatus


def offer_window() -> timedelta:
    """How long an offer can be accepted."""
    return timedelta(minutes=settings.TRANSFER_OFFER_WINDOW_MINUTES)


def get_offer(offer_id: UUID) -> TransferOffer:
    """Fetch an offer by id."""
    offer = TransferOffer.objects.select_related("event", "registration").filter(pk=offer_id).first()
    if offer is None:
        raise NotFoundError("Transfer offer not found.")
    return offer


def get_offer_by_code(code: str) -> TransferOffer:
    """Fetch an offer by its shared claim code."""
    offer = TransferOffer.objects.select_related("event", "registration").filter(code=normalize_code(code)).first()
    if offer is None:
        raise NotFoundError("Transfer offer not found.")
    return offer


@retry_on_store_conflict
@transaction.atomic
def create_offer(
    registration: Registration,
    from_user: GatepassUser,
    *,
    kind: str = TransferOffer.OfferKind.QR,
    recipient: GatepassUser | None = None,
) -> TransferOffer:
    """Offer the registration for transfer.

    Raises:
        NotOwnerError: if ``from_user`` does not hold the registration.
        NotTransferableError: if the registration is not confirmed or already checked in.
        SelfTransferError: if a direct offer names the holder.
        AlreadyTransferringError: if a live offer for the registration already exists.
    """
    registration = ledger.lock_registration(registration.pk)
    if registration.user_id != from_user.pk:
        raise NotOwnerError()
    if not registration.is_transferable:
        raise NotTransferableError()
    if recipient is not None and recipient.pk == from_user.pk:
        raise SelfTransferError()

    expire_stale_offers(registration=registration)
    if TransferOffer.objects.pending().filter(registration=registration).exists():
        raise AlreadyTransferringError()

    try:
        with transaction.atomic():
            offer = TransferOffer.objects.create(
                registration=registration,
                event_id=registration.event_id,
                from_user=from_user,
                recipient=recipient,
                kind=kind,
                code=mint_offer_code(),
                expires_at=timezone.now() + offer_window(),
            )
    except IntegrityError as e:
        if TransferOffer.objects.pending().filter(registration=registration).exists():
            raise AlreadyTransferringError() from e
        raise StoreConflictError() from e

    logger.info(
        "offer_created",
        offer_id=str(offer.id),
        registration_id=str(registration.id),
        event_id=str(registration.event_id),
        kind=kind,
        expires_at=offer.expires_at.isoformat(),
    )
    notify_on_commit(
        NotificationType.TICKET_OFFER_CREATED, from_user, {**offer_context(offer), "offer_code": offer.code}
    )
    if recipient is not None:
        notify_on_commit(NotificationType.TICKET_OFFER_RECEIVED, recipient, offer_context(offer))
    return offer


def accept_offer(offer_id: UUID, to_user: GatepassUser) -> Registration:
    """Accept an offer by id and become the holder of its registration.

    Raises:
        NotFoundError: if the offer does not exist.
        SelfTransferError: if ``to_user`` made the offer.
        NotRecipientError: if a direct offer names someone else.
        DuplicateRegistrationError: if ``to_user`` already holds an active registration for the event.
        OfferExpiredError: if the acceptance window has passed.
        NotPendingError: if the offer was already accepted or cancelled.
        NotTransferableError: if the registration changed since the offer was made.
    """
    return _accept(get_offer(offer_id), to_user)


def claim_offer(code: str, to_user: GatepassUser) -> Registration:
    """Accept an offer by its shared QR or link code. Raises as :func:`accept_offer`."""
    return _accept(get_offer_by_code(code), to_user)


def _accept(offer: TransferOffer, to_user: GatepassUser) -> Registration:
    try:
        return _accept_atomically(offer.pk, to_user)
    except OfferExpiredError:
        # Recorded outside the rolled-back unit so the lapsed offer stays expired.
        _expire_offer(offer.pk)
        raise


@retry_on_store_conflict
@transaction.atomic
def _accept_atomically(offer_id: UUID, to_user: GatepassUser) -> Registration:
    offer = get_offer(offer_id)
    registration = ledger.lock_registration(offer.registration_id)

    # Losers of the claim see NotPending or Expired. Later refusals roll the claim back.
    now = timezone.now()
    won = TransferOffer.objects.filter(pk=offer.pk, status=OfferStatus.PENDING, expires_at__gte=now).update(
        status=OfferStatus.ACCEPTED, to_user=to_user, resolved_at=now, updated_at=now
    )
    if not won:
        offer.refresh_from_db()
        if offer.status == OfferStatus.EXPIRED or (offer.status == OfferStatus.PENDING and offer.is_expired(now)):
            logger.info("offer_accept_expired", offer_id=str(offer.id), user_id=str(to_user.id))
            raise OfferExpiredError()
        logger.info("offer_accept_lost", offer_id=str(offer.id), user_id=str(to_user.id), status=offer.status)
        raise NotPendingError()

    if offer.from_user_id == to_user.pk:
        raise SelfTransferError()
    if offer.kind == TransferOffer.OfferKind.DIRECT and offer.recipient_id != to_user.pk:
        raise NotRecipientError()
    if Registration.objects.active().filter(event_id=registration.event_id, user=to_user).exists():
        raise DuplicateRegistrationError("You already hold a registration for this event.")

    # The holder may have cancelled, checked in or changed since the offer was made.
    if registration.user_id != offer.from_user_id or not registration.is_transferable:
        raise NotTransferableError()

    previous_holder_id = registration.user_id
    try:
        with transaction.atomic():
            ledger.void_checkin_code(registration)
            updated = Registration.objects.filter(
                pk=registration.pk,
                user_id=previous_holder_id,
                status=RegistrationStatus.CONFIRMED,
                checked_in=False,
            ).update(
                user=to_user,
                attendee_name=to_user.display_name[:150],
                transferred_from_id=previous_holder_id,
                transferred_at=now,
                checkin_code=mint_checkin_code(registration.event),
                updated_at=now,
            )
    except IntegrityError as e:
        # A concurrent registration or promotion drew the same check-in code.
        raise StoreConflictError() from e
    if not updated:
        raise StoreConflictError()
    registration.refresh_from_db()

    logger.info(
        "offer_accepted",
        offer_id=str(offer.id),
        registration_id=str(registration.id),
        event_id=str(registration.event_id),
        from_user_id=str(previous_holder_id),
        to_user_id=str(to_user.id),
    )
    notify_on_commit(NotificationType.TICKET_TRANSFERRED, offer.from_user, offer_context(offer))
    notify_on_commit(NotificationType.TICKET_RECEIVED, to_user, registration_context(registration))
    return registration


def cancel_offer(offer: TransferOffer, actor: GatepassUser) -> TransferOffer:
    """Withdraw a pending offer.

    Raises:
        NotOwnerError: if the actor did not make the offer.
        OfferExpiredError: if the offer already lapsed.
        NotPendingError: if the offer was already accepted or cancelled.
    """
    if offer.from_user_id != actor.pk:
        raise NotOwnerError("Only the holder can cancel this offer.")
    now = timezone.now()
    updated = TransferOffer.objects.filter(pk=offer.pk, status=OfferStatus.PENDING, expires_at__gte=now).update(
        status=OfferStatus.CANCELLED, resolved_at=now, updated_at=now
    )
    offer.refresh_from_db()
    if not updated:
        if offer.effective_status == OfferStatus.EXPIRED:
            _expire_offer(offer.pk)
            raise OfferExpiredError()
        raise NotPendingError()
    logger.info("offer_cancelled", offer_id=str(offer.id), registration_id=str(offer.registration_id))
    return offer


def cancel_pending_offers(registration: Registration) -> int:
    """Cancel every pending offer of a registration that is leaving its holder's hands."""
    now = timezone.now()
    count = TransferOffer.objects.pending().filter(registration=registration).update(
        status=OfferStatus.CANCELLED, resolved_at=now, updated_at=now
    )
    if count:
        logger.info("offers_cancelled_with_registration", registration_id=str(registration.id), count=count)
    return count


def _expire_offer(offer_id: UUID) -> int:
    now = timezone.now()
    return TransferOffer.objects.filter(pk=offer_id, status=OfferStatus.PENDING, expires_at__lt=now).update(
        status=OfferStatus.EXPIRED, resolved_at=now, updated_at=now
    )


def expire_stale_offers(*, registration: Registration | None = None) -> int:
    """Flip lapsed pending offers to expired. Correctness never depends on this running."""
    offers: QuerySet[TransferOffer] = TransferOffer.objects.stale()
    if registration is not None:
        offers = offers.filter(registration=registration)
    now = timezone.now()
    count = offers.update(status=OfferStatus.EXPIRED, resolved_at=now, updated_at=now)
    if count:
        logger.info(
            "offers_expired",
            count=count,
            registration_id=str(registration.id) if registration is not None else None,
        )
    return count
