"""Event, capacity and check-in schemas."""

from datetime import datetime

from ninja import ModelSchema, Schema
from pydantic import UUID4

from common.schema import CodeString
from events.models import Event, Registration


class EventSchema(ModelSchema):
    id: UUID4
    organizer_id: UUID4

    class Meta:
        model = Event
        fields = ["id", "name", "status", "capacity_total", "requires_approval", "waitlist_enabled", "start"]


class CapacitySchema(Schema):
    total: int | None = None
    confirmed: int
    remaining: int | None = None
    waitlisted: int
    pending: int


class CheckInRequestSchema(Schema):
    code: CodeString


class CheckInResponseSchema(Schema):
    registration_id: UUID4
    attendee_name: str
    checked_in_at: datetime

    @staticmethod
    def resolve_registration_id(obj: Registration) -> UUID4:
        return obj.id
