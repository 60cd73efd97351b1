from uuid import UUID

from django.db.models import QuerySet
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_extra.searching import Searching, searching

from common.authentication import I18nJWTAuth
from common.throttling import UserDefaultThrottle
from events import models, schema
from events.controllers.permissions import IsEventOrganizer

from .base import EventAdminBaseController


@api_controller(
    "/event-admin/{event_id}",
    auth=I18nJWTAuth(),
    permissions=[IsEventOrganizer()],
    tags=["Event Admin"],
    throttle=UserDefaultThrottle(),
)
class EventAdminWaitlistController(EventAdminBaseController):
    """Event waitlist endpoints."""

    @route.get(
        "/waitlist",
        url_name="list_waitlist",
        response=PaginatedResponseSchema[schema.WaitlistEntrySchema],
    )
    @paginate(PageNumberPaginationExtra, page_size=20)
    @searching(Searching, search_fields=["attendee_name", "user__email", "user__preferred_name"])
    def list_waitlist(self, event_id: UUID) -> QuerySet[models.Registration]:
        """List the waitlist in promotion order.

        The first entry gets the next seat that frees up.
        """
        event = self.get_one(event_id)
        return models.Registration.objects.select_related("user").filter(event=event).waitlisted()
