# src/events/filters.py

from uuid import UUID

from ninja import Field, FilterSchema

from events.models import RegistrationStatus


class RegistrationFilterSchema(FilterSchema):
    """Filter schema for an organizer's registration list."""

    status: RegistrationStatus | None = None
    checked_in: bool | None = None
    channel_id: UUID | None = Field(None, q="channel_id")  # type: ignore[call-overload]


class MyRegistrationFilterSchema(FilterSchema):
    """Filter schema for the caller's own registrations."""

    status: RegistrationStatus | None = None
    event_id: UUID | None = Field(None, q="event_id")  # type: ignore[call-overload]
