import typing as t
from datetime import datetime

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from accounts.models import GatepassUser
from common.models import TimeStampedModel

from .event import Event
from .registration import Registration


class TransferOfferQuerySet(models.QuerySet["TransferOffer"]):
    def pending(self) -> t.Self:
        """Offers still marked pending, including lapsed ones nobody has swept yet."""
        return self.filter(status=TransferOffer.OfferStatus.PENDING)

    def stale(self) -> t.Self:
        """Pending offers whose acceptance window has passed."""
        return self.pending().filter(expires_at__lt=timezone.now())

    def involving(self, user: GatepassUser) -> t.Self:
        """Offers the user made, received or accepted."""
        return self.filter(Q(from_user=user) | Q(recipient=user) | Q(to_user=user))


class TransferOffer(TimeStampedModel):
    """A time-limited offer to hand a confirmed registration to another user."""

    class OfferStatus(models.TextChoices):
        PENDING = "pending", "Pending"
        ACCEPTED = "accepted", "Accepted"
        CANCELLED = "cancelled", "Cancelled"
        EXPIRED = "expired", "Expired"

    class OfferKind(models.TextChoices):
        QR = "qr", "QR code"
        LINK = "link", "Link"
        DIRECT = "direct", "Direct"

    registration = models.ForeignKey(Registration, on_delete=models.CASCADE, related_name="transfer_offers")
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="transfer_offers")
    from_user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="offers_made")
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="offers_received",
        help_text="Only this user may accept a direct offer.",
    )
    to_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="offers_accepted",
        editable=False,
    )
    kind = models.CharField(max_length=10, choices=OfferKind.choices, default=OfferKind.QR)
    code = models.CharField(max_length=32, unique=True, editable=False)
    status = models.CharField(max_length=20, choices=OfferStatus.choices, default=OfferStatus.PENDING, db_index=True)
    expires_at = models.DateTimeField(db_index=True)
    resolved_at = models.DateTimeField(null=True, blank=True, editable=False)

    objects = TransferOfferQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["registration"],
                condition=Q(status="pending"),
                name="unique_pending_transfer_offer",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.kind} offer for {self.registration_id} ({self.status})"

    def clean(self) -> None:
        """Direct offers name a recipient; QR and link offers are claimed by whoever holds the code."""
        super().clean()
        if self.kind == self.OfferKind.DIRECT and not self.recipient_id:
            raise ValidationError({"recipient": "A direct transfer needs a recipient."})
        if self.kind != self.OfferKind.DIRECT and self.recipient_id:
            raise ValidationError({"recipient": "Only direct transfers have a recipient."})

    def is_expired(self, now: datetime | None = None) -> bool:
        """Expiry is enforced lazily: a pending offer past its window counts as expired."""
        now = now or timezone.now()
        return bool(now > self.expires_at)

    @property
    def effective_status(self) -> str:
        """Status as callers should see it, with lapsed pending offers shown as expired."""
        if self.status == self.OfferStatus.PENDING and self.is_expired():
            return self.OfferStatus.EXPIRED
        return self.status
