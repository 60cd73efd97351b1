"""Enums for the notification system."""

from django.db.models import TextChoices


class NotificationType(TextChoices):
    """All notification types in the system."""

    # Registration notifications
    REGISTRATION_CONFIRMED = "registration_confirmed"
    REGISTRATION_PENDING = "registration_pending"
    REGISTRATION_WAITLISTED = "registration_waitlisted"
    REGISTRATION_REJECTED = "registration_rejected"
    REGISTRATION_CANCELLED = "registration_cancelled"
    WAITLIST_PROMOTED = "waitlist_promoted"
    CHECKED_IN = "checked_in"

    # Transfer notifications
    TICKET_OFFER_CREATED = "ticket_offer_created"
    TICKET_OFFER_RECEIVED = "ticket_offer_received"
    TICKET_TRANSFERRED = "ticket_transferred"
    TICKET_RECEIVED = "ticket_received"
