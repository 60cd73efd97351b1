from uuid import UUID

from django.db.models import QuerySet
from ninja import Query
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_extra.searching import Searching, searching

from common.authentication import I18nJWTAuth
from common.throttling import UserDefaultThrottle, WriteThrottle
from events import filters, models, schema
from events.controllers.permissions import IsEventOrganizer
from events.service import admission

from .base import EventAdminBaseController


@api_controller(
    "/event-admin/{event_id}",
    auth=I18nJWTAuth(),
    permissions=[IsEventOrganizer()],
    tags=["Event Admin"],
    throttle=WriteThrottle(),
)
class EventAdminRegistrationsController(EventAdminBaseController):
    """Registration management endpoints for organizers."""

    @route.get(
        "/registrations",
        url_name="list_registrations",
        response=PaginatedResponseSchema[schema.AdminRegistrationSchema],
        throttle=UserDefaultThrottle(),
    )
    @paginate(PageNumberPaginationExtra, page_size=20)
    @searching(
        Searching,
        search_fields=["attendee_name", "user__email", "user__first_name", "user__last_name", "user__preferred_name"],
    )
    def list_registrations(
        self,
        event_id: UUID,
        params: filters.RegistrationFilterSchema = Query(...),  # type: ignore[type-arg]
    ) -> QuerySet[models.Registration]:
        """List registrations for an event with optional filters.

        Supports filtering by:
        - status: pending, confirmed, waitlisted, rejected or cancelled
        - checked_in: whether the attendee is already in
        - channel_id: the invitation channel the registration came through
        """
        event = self.get_one(event_id)
        qs = models.Registration.objects.select_related("user").filter(event=event).order_by("created_at")
        return params.filter(qs)

    @route.post(
        "/registrations/{registration_id}/approve",
        url_name="approve_registration",
        response=schema.AdminRegistrationSchema,
    )
    def approve(self, event_id: UUID, registration_id: UUID) -> models.Registration:
        """Approve a pending registration. Fails with 400 when the event is full."""
        event = self.get_one(event_id)
        return admission.approve(self.get_registration(event, registration_id), actor=self.user())

    @route.post(
        "/registrations/{registration_id}/reject",
        url_name="reject_registration",
        response=schema.AdminRegistrationSchema,
    )
    def reject(self, event_id: UUID, registration_id: UUID) -> models.Registration:
        """Reject a pending registration."""
        event = self.get_one(event_id)
        return admission.reject(self.get_registration(event, registration_id), actor=self.user())
