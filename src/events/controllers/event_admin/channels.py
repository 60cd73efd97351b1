from uuid import UUID

from django.shortcuts import get_object_or_404
from ninja_extra import api_controller, route

from common.authentication import I18nJWTAuth
from common.throttling import UserDefaultThrottle, WriteThrottle
from events import models, schema
from events.controllers.permissions import IsEventOrganizer
from events.service import channels

from .base import EventAdminBaseController


@api_controller(
    "/event-admin/{event_id}",
    auth=I18nJWTAuth(),
    permissions=[IsEventOrganizer()],
    tags=["Event Admin"],
    throttle=WriteThrottle(),
)
class EventAdminChannelsController(EventAdminBaseController):
    """Invitation channel endpoints."""

    @route.get(
        "/channels",
        url_name="list_channels",
        response=list[schema.InvitationChannelSchema],
        throttle=UserDefaultThrottle(),
    )
    def list_channels(self, event_id: UUID) -> list[models.InvitationChannel]:
        """List the event's invitation channels with how many registrations each one brought in."""
        event = self.get_one(event_id)
        return list(channels.channel_stats(event))

    @route.post("/channels", url_name="create_channel", response={201: schema.InvitationChannelSchema})
    def create_channel(
        self, event_id: UUID, payload: schema.InvitationChannelCreateSchema
    ) -> tuple[int, models.InvitationChannel]:
        """Create a named invitation channel. Share its code to attribute registrations to it."""
        event = self.get_one(event_id)
        return 201, channels.create_channel(event, payload.name, actor=self.user())

    @route.post(
        "/channels/{channel_id}/deactivate",
        url_name="deactivate_channel",
        response=schema.InvitationChannelSchema,
    )
    def deactivate_channel(self, event_id: UUID, channel_id: UUID) -> models.InvitationChannel:
        """Stop accepting the channel's code."""
        event = self.get_one(event_id)
        channel = get_object_or_404(models.InvitationChannel, pk=channel_id, event=event)
        return channels.deactivate_channel(channel)
