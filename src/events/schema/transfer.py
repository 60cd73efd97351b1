"""Transfer offer schemas."""

from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import UUID4, model_validator

from common.schema import CodeString
from events.models import TransferOffer


class TransferOfferPublicSchema(ModelSchema):
    """An offer as anyone holding its link sees it. Expiry is computed, not stored."""

    id: UUID4
    event_id: UUID4
    registration_id: UUID4
    from_user_id: UUID4
    recipient_id: UUID4 | None = None
    to_user_id: UUID4 | None = None
    status: str

    class Meta:
        model = TransferOffer
        fields = ["id", "kind", "created_at", "expires_at", "resolved_at"]

    @staticmethod
    def resolve_status(obj: TransferOffer) -> str:
        """Lapsed pending offers read as expired."""
        return obj.effective_status


class TransferOfferSchema(TransferOfferPublicSchema):
    """An offer with the claim code to share. Only its maker gets the code."""

    code: str | None = None


class TransferOfferCreateSchema(Schema):
    registration_id: UUID
    kind: TransferOffer.OfferKind = TransferOffer.OfferKind.QR
    recipient_id: UUID | None = None

    @model_validator(mode="after")
    def validate_recipient(self) -> "TransferOfferCreateSchema":
        """Direct offers name a recipient; QR and link offers must not."""
        if self.kind == TransferOffer.OfferKind.DIRECT and self.recipient_id is None:
            raise ValueError("A direct transfer needs a recipient_id.")
        if self.kind != TransferOffer.OfferKind.DIRECT and self.recipient_id is not None:
            raise ValueError("Only direct transfers have a recipient_id.")
        return self


class ClaimOfferSchema(Schema):
    code: CodeString
