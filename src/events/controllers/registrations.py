from uuid import UUID

from django.db.models import QuerySet
from ninja import Query
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate

from common.authentication import I18nJWTAuth
from common.controllers import UserAwareController
from common.throttling import UserDefaultThrottle, WriteThrottle
from events import filters, models, schema
from events.exceptions import NotFoundError, NotOwnerError
from events.service import admission, ledger


@api_controller("/registrations", auth=I18nJWTAuth(), tags=["Registrations"], throttle=WriteThrottle())
class RegistrationController(UserAwareController):
    @route.post("", url_name="register", response={201: schema.RegistrationSchema})
    def register(self, payload: schema.RegistrationCreateSchema) -> tuple[int, models.Registration]:
        """Register the authenticated user for an event.

        Confirmed registrations come with a check-in code. When the event is full the
        registration joins the waitlist; events that require approval hold it as pending.
        """
        event = models.Event.objects.filter(pk=payload.event_id).first()
        if event is None:
            raise NotFoundError("Event not found.")
        registration = admission.register(
            event, self.user(), channel_code=payload.channel_code, attendee_name=payload.attendee_name
        )
        return 201, registration

    @route.post("/redeem", url_name="redeem_channel_code", response={201: schema.RegistrationSchema})
    def redeem(self, payload: schema.RedeemChannelCodeSchema) -> tuple[int, models.Registration]:
        """Register through an invitation code shared by the organizer."""
        registration = admission.redeem_channel_code(payload.code, self.user(), attendee_name=payload.attendee_name)
        return 201, registration

    @route.get(
        "/me",
        url_name="my_registrations",
        response=PaginatedResponseSchema[schema.RegistrationSchema],
        throttle=UserDefaultThrottle(),
    )
    @paginate(PageNumberPaginationExtra, page_size=20)
    def my_registrations(
        self,
        params: filters.MyRegistrationFilterSchema = Query(...),  # type: ignore[type-arg]
    ) -> QuerySet[models.Registration]:
        """List the authenticated user's registrations, newest first."""
        qs = models.Registration.objects.with_related().for_user(self.user()).order_by("-created_at")
        return params.filter(qs)

    @route.get(
        "/{uuid:registration_id}",
        url_name="get_registration",
        response=schema.RegistrationSchema,
        throttle=UserDefaultThrottle(),
    )
    def get_registration(self, registration_id: UUID) -> models.Registration:
        """Get a registration. Only its holder and the event organizer can see it."""
        registration = ledger.get_registration(registration_id)
        if registration.user_id != self.user().pk and not registration.event.is_organizer(self.user()):
            raise NotOwnerError()
        return registration

    @route.post("/{uuid:registration_id}/cancel", url_name="cancel_registration", response={204: None})
    def cancel(self, registration_id: UUID) -> tuple[int, None]:
        """Cancel a registration.

        Holders cancel their own registrations; organizers can cancel any registration of their
        event. A freed seat goes to the head of the waitlist.
        """
        registration = ledger.get_registration(registration_id)
        admission.cancel(registration, actor=self.user())
        return 204, None
