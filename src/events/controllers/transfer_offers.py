from uuid import UUID

from ninja_extra import api_controller, route

from accounts.models import GatepassUser
from common.authentication import I18nJWTAuth
from common.controllers import UserAwareController
from common.throttling import UserDefaultThrottle, WriteThrottle
from events import models, schema
from events.exceptions import NotFoundError
from events.service import ledger, transfers


@api_controller("/transfer-offers", auth=I18nJWTAuth(), tags=["Transfer Offers"], throttle=WriteThrottle())
class TransferOfferController(UserAwareController):
    @route.post("", url_name="create_transfer_offer", response={201: schema.TransferOfferSchema})
    def create_offer(self, payload: schema.TransferOfferCreateSchema) -> tuple[int, models.TransferOffer]:
        """Offer one of your confirmed registrations to someone else.

        QR and link offers can be claimed by whoever holds the code. Direct offers can only be
        accepted by the named recipient. Offers lapse after the acceptance window.
        """
        registration = ledger.get_registration(payload.registration_id)
        recipient = None
        if payload.recipient_id is not None:
            recipient = GatepassUser.objects.filter(pk=payload.recipient_id).first()
            if recipient is None:
                raise NotFoundError("Recipient not found.")
        offer = transfers.create_offer(registration, self.user(), kind=payload.kind, recipient=recipient)
        return 201, offer

    @route.post("/claim", url_name="claim_transfer_offer", response=schema.RegistrationSchema)
    def claim_offer(self, payload: schema.ClaimOfferSchema) -> models.Registration:
        """Accept an offer using the code from its QR or link."""
        return transfers.claim_offer(payload.code, self.user())

    @route.get(
        "/{uuid:offer_id}",
        url_name="get_transfer_offer",
        response=schema.TransferOfferSchema,
        throttle=UserDefaultThrottle(),
    )
    def get_offer(self, offer_id: UUID) -> schema.TransferOfferSchema:
        """Get an offer and its current status. Only its maker sees the claim code."""
        offer = transfers.get_offer(offer_id)
        data = schema.TransferOfferSchema.from_orm(offer)
        if offer.from_user_id != self.user().pk:
            data.code = None
        return data

    @route.post("/{uuid:offer_id}/accept", url_name="accept_transfer_offer", response=schema.RegistrationSchema)
    def accept_offer(self, offer_id: UUID) -> models.Registration:
        """Accept an offer and become the holder of the registration.

        The registration gets a fresh check-in code; the previous holder's code stops working.
        """
        return transfers.accept_offer(offer_id, self.user())

    @route.post("/{uuid:offer_id}/cancel", url_name="cancel_transfer_offer", response=schema.TransferOfferSchema)
    def cancel_offer(self, offer_id: UUID) -> models.TransferOffer:
        """Withdraw a pending offer you made."""
        return transfers.cancel_offer(transfers.get_offer(offer_id), self.user())
