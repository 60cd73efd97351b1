import typing as t

from django.conf import settings
from django.db import models
from django.db.models import Count, Q

from common.models import TimeStampedModel

from .event import Event


class InvitationChannelQuerySet(models.QuerySet["InvitationChannel"]):
    def active(self) -> t.Self:
        """Channels whose code can still be redeemed."""
        return self.filter(is_active=True)

    def with_registration_count(self) -> t.Self:
        """Annotate how many non-cancelled registrations came through each channel."""
        return self.annotate(
            registration_count=Count("registrations", filter=~Q(registrations__status="cancelled"), distinct=True)
        )


class InvitationChannel(TimeStampedModel):
    """A named invitation code that attributes registrations to a distribution channel."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="channels")
    name = models.CharField(max_length=150)
    code = models.CharField(max_length=32, unique=True)
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )

    objects = InvitationChannelQuerySet.as_manager()

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(fields=["event", "name"], name="unique_event_channel_name"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.event_id})"
