import typing as t
from uuid import UUID

from ninja_extra import api_controller, route

from common.authentication import I18nJWTAuth
from common.controllers import UserAwareController
from common.throttling import CheckInThrottle, UserDefaultThrottle
from events import models, schema
from events.controllers.permissions import IsEventOrganizer
from events.service import admission, checkin


@api_controller("/events", auth=I18nJWTAuth(), tags=["Events"], throttle=UserDefaultThrottle())
class EventController(UserAwareController):
    def get_event(self, event_id: UUID) -> models.Event:
        """Fetch the event, running object permissions of the current route."""
        return t.cast(models.Event, self.get_object_or_exception(models.Event.objects.all(), pk=event_id))

    @route.get("/{uuid:event_id}", url_name="get_event", response=schema.EventSchema)
    def event_detail(self, event_id: UUID) -> models.Event:
        """Get an event, including whether it takes registrations and how many seats it has."""
        return self.get_event(event_id)

    @route.get("/{uuid:event_id}/capacity", url_name="event_capacity", response=schema.CapacitySchema)
    def capacity(self, event_id: UUID) -> dict[str, int | None]:
        """Seats taken and left, plus how many registrations wait on the waitlist or for approval.

        ``total`` and ``remaining`` are null for events without a capacity limit.
        """
        return admission.capacity(self.get_event(event_id))._asdict()

    @route.post(
        "/{uuid:event_id}/checkin",
        url_name="check_in",
        response=schema.CheckInResponseSchema,
        permissions=[IsEventOrganizer()],
        throttle=CheckInThrottle(),
    )
    def check_in(self, event_id: UUID, payload: schema.CheckInRequestSchema) -> models.Registration:
        """Check in the attendee holding ``code``.

        Each code works once. A second scan answers 409 with the time of the first check-in.
        """
        event = self.get_event(event_id)
        return checkin.check_in(event, payload.code, checked_in_by=self.user())
