"""Invitation channel schemas."""

from ninja import ModelSchema, Schema
from pydantic import UUID4

from common.schema import OneToOneFiftyString
from events.models import InvitationChannel


class InvitationChannelSchema(ModelSchema):
    id: UUID4
    registration_count: int = 0

    class Meta:
        model = InvitationChannel
        fields = ["id", "name", "code", "is_active", "created_at"]


class InvitationChannelCreateSchema(Schema):
    name: OneToOneFiftyString
