import typing as t

from django.conf import settings
from django.db import models
from django.db.models import Q

from accounts.models import GatepassUser
from common.models import TimeStampedModel
from events.exceptions import InvalidTransitionError

from .event import Event
from .invitation import InvitationChannel


class RegistrationStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    WAITLISTED = "waitlisted", "Waitlisted"
    REJECTED = "rejected", "Rejected"
    CANCELLED = "cancelled", "Cancelled"


# Statuses that hold (or wait for) a seat. A user has at most one of these per event.
ACTIVE_STATUSES = (RegistrationStatus.PENDING, RegistrationStatus.CONFIRMED, RegistrationStatus.WAITLISTED)

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    RegistrationStatus.PENDING: frozenset(
        {RegistrationStatus.CONFIRMED, RegistrationStatus.REJECTED, RegistrationStatus.CANCELLED}
    ),
    RegistrationStatus.WAITLISTED: frozenset({RegistrationStatus.CONFIRMED, RegistrationStatus.CANCELLED}),
    RegistrationStatus.CONFIRMED: frozenset({RegistrationStatus.CANCELLED}),
    RegistrationStatus.REJECTED: frozenset(),
    RegistrationStatus.CANCELLED: frozenset(),
}


class RegistrationQuerySet(models.QuerySet["Registration"]):
    def active(self) -> t.Self:
        """Registrations holding or waiting for a seat."""
        return self.filter(status__in=ACTIVE_STATUSES)

    def confirmed(self) -> t.Self:
        """Registrations holding a seat."""
        return self.filter(status=RegistrationStatus.CONFIRMED)

    def waitlisted(self) -> t.Self:
        """Waitlisted registrations in promotion order."""
        return self.filter(status=RegistrationStatus.WAITLISTED).order_by("waitlist_position", "created_at")

    def for_user(self, user: GatepassUser) -> t.Self:
        """Registrations held by the user."""
        return self.filter(user=user)

    def with_related(self) -> t.Self:
        """Select the objects shown alongside a registration."""
        return self.select_related("event", "user", "channel")


class Registration(TimeStampedModel):
    """A user's claim to attend an event, carrying the check-in code once confirmed."""

    Status = RegistrationStatus

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="registrations")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="registrations")
    attendee_name = models.CharField(max_length=150, blank=True)
    status = models.CharField(
        max_length=20, choices=RegistrationStatus.choices, default=RegistrationStatus.PENDING, db_index=True
    )
    checkin_code = models.CharField(max_length=32, null=True, blank=True, editable=False)
    checked_in = models.BooleanField(default=False)
    checked_in_at = models.DateTimeField(null=True, blank=True, editable=False)
    checked_in_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="checked_in_registrations",
        editable=False,
    )
    waitlist_position = models.PositiveIntegerField(null=True, blank=True)
    transferred_at = models.DateTimeField(null=True, blank=True, editable=False)
    transferred_from = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transferred_registrations",
        editable=False,
    )
    channel = models.ForeignKey(
        InvitationChannel, on_delete=models.SET_NULL, null=True, blank=True, related_name="registrations"
    )

    objects = RegistrationQuerySet.as_manager()

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "user"],
                condition=Q(status__in=ACTIVE_STATUSES),
                name="unique_active_registration",
            ),
            models.UniqueConstraint(fields=["event", "checkin_code"], name="unique_event_checkin_code"),
            models.CheckConstraint(
                condition=Q(checked_in=False) | Q(checked_in_at__isnull=False),
                name="registration_checked_in_has_timestamp",
            ),
            models.CheckConstraint(
                condition=~Q(status=RegistrationStatus.CONFIRMED) | Q(checkin_code__isnull=False),
                name="registration_confirmed_has_checkin_code",
            ),
            models.CheckConstraint(
                condition=(
                    Q(status=RegistrationStatus.WAITLISTED, waitlist_position__isnull=False)
                    | (~Q(status=RegistrationStatus.WAITLISTED) & Q(waitlist_position__isnull=True))
                ),
                name="registration_waitlist_position_iff_waitlisted",
            ),
        ]
        indexes = [
            models.Index(fields=["event", "status"], name="registration_event_status_idx"),
            models.Index(fields=["event", "waitlist_position"], name="registration_waitlist_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.attendee_name or self.user_id} @ {self.event_id} ({self.status})"

    @property
    def is_active(self) -> bool:
        """Whether the registration holds or waits for a seat."""
        return self.status in ACTIVE_STATUSES

    @property
    def is_transferable(self) -> bool:
        """Only confirmed, unused tickets change hands."""
        return self.status == RegistrationStatus.CONFIRMED and not self.checked_in

    def can_transition_to(self, status: str) -> bool:
        """Whether moving to ``status`` is allowed from the current state."""
        if self.checked_in:
            return False
        return status in ALLOWED_TRANSITIONS.get(self.status, frozenset())

    def assert_transition(self, status: str) -> None:
        """Raise InvalidTransitionError unless moving to ``status`` is allowed."""
        if not self.can_transition_to(status):
            if self.checked_in:
                raise InvalidTransitionError(f"Registration is checked in and cannot become {status}.")
            raise InvalidTransitionError(f"Registration cannot go from {self.status} to {status}.")


class VoidedCheckinCode(TimeStampedModel):
    """A check-in code retired by a transfer. It can never be minted again for the event."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="voided_checkin_codes")
    registration = models.ForeignKey(Registration, on_delete=models.CASCADE, related_name="voided_checkin_codes")
    code = models.CharField(max_length=32)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["event", "code"], name="unique_event_voided_checkin_code"),
        ]

    def __str__(self) -> str:
        return f"voided code for {self.registration_id}"
