"""Registration schemas."""

from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import UUID4

from accounts.schema import MinimalUserSchema
from common.schema import CodeString, OneToOneFiftyString
from events.models import Registration


class RegistrationSchema(ModelSchema):
    """A registration as its holder sees it, check-in code included."""

    id: UUID4
    event_id: UUID4
    user: MinimalUserSchema
    channel_id: UUID4 | None = None

    class Meta:
        model = Registration
        fields = [
            "id",
            "attendee_name",
            "status",
            "checkin_code",
            "checked_in",
            "checked_in_at",
            "waitlist_position",
            "transferred_at",
            "created_at",
        ]


class AdminRegistrationSchema(ModelSchema):
    """A registration in the organizer's list. The check-in code stays with the holder."""

    id: UUID4
    user: MinimalUserSchema
    channel_id: UUID4 | None = None

    class Meta:
        model = Registration
        fields = [
            "id",
            "attendee_name",
            "status",
            "checked_in",
            "checked_in_at",
            "waitlist_position",
            "created_at",
        ]


class WaitlistEntrySchema(ModelSchema):
    id: UUID4
    user: MinimalUserSchema

    class Meta:
        model = Registration
        fields = ["id", "attendee_name", "waitlist_position", "created_at"]


class RegistrationCreateSchema(Schema):
    event_id: UUID
    channel_code: CodeString | None = None
    attendee_name: OneToOneFiftyString | None = None


class RedeemChannelCodeSchema(Schema):
    code: CodeString
    attendee_name: OneToOneFiftyString | None = None
