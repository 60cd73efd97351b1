import typing as t
from uuid import UUID

from django.db.models import QuerySet

from common.controllers import UserAwareController
from events import models
from events.exceptions import NotFoundError
from events.service import ledger


class EventAdminBaseController(UserAwareController):
    """Base controller for event admin endpoints.

    Provides common methods for retrieving the event and its registrations.
    Subclasses should be decorated with @api_controller to register routes.
    """

    def get_queryset(self) -> QuerySet[models.Event]:
        """Get the queryset of events."""
        return models.Event.objects.all()

    def get_one(self, event_id: UUID) -> models.Event:
        """Fetch the event, checking that the user organizes it."""
        return t.cast(models.Event, self.get_object_or_exception(self.get_queryset(), pk=event_id))

    def get_registration(self, event: models.Event, registration_id: UUID) -> models.Registration:
        """Fetch a registration of ``event``."""
        registration = ledger.get_registration(registration_id)
        if registration.event_id != event.pk:
            raise NotFoundError("Registration not found.")
        return registration
