import typing as t

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from accounts.models import GatepassUser
from common.models import TimeStampedModel


class EventQuerySet(models.QuerySet["Event"]):
    def organized_by(self, user: GatepassUser) -> t.Self:
        """Events the user organizes."""
        return self.filter(organizer=user)

    def open(self) -> t.Self:
        """Events currently accepting registrations."""
        return self.filter(status=Event.EventStatus.OPEN)


class EventManager(models.Manager["Event"]):
    def get_queryset(self) -> EventQuerySet:
        """Get the event queryset."""
        return EventQuerySet(self.model, using=self._db)

    def organized_by(self, user: GatepassUser) -> EventQuerySet:
        """Events the user organizes."""
        return self.get_queryset().organized_by(user)


class Event(TimeStampedModel):
    class EventStatus(models.TextChoices):
        DRAFT = "draft"
        OPEN = "open"
        CLOSED = "closed"

    name = models.CharField(max_length=255, db_index=True)
    organizer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="organized_events")
    status = models.CharField(choices=EventStatus.choices, max_length=10, default=EventStatus.DRAFT, db_index=True)
    capacity_total = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1)],
        help_text="Maximum number of confirmed registrations. Leave empty for unlimited.",
    )
    requires_approval = models.BooleanField(default=False)
    waitlist_enabled = models.BooleanField(
        default=True, help_text="Put registrations on a waitlist when the event is full instead of refusing them."
    )
    start = models.DateTimeField(null=True, blank=True, db_index=True)

    objects = EventManager()

    class Meta:
        ordering = ["start", "name"]

    def __str__(self) -> str:
        return self.name

    @property
    def is_open(self) -> bool:
        """Whether registrations are accepted."""
        return self.status == self.EventStatus.OPEN

    def is_organizer(self, user: GatepassUser) -> bool:
        """Organizers and superusers manage the event."""
        return bool(user.is_superuser or self.organizer_id == user.pk)
