from django.http import HttpRequest
from ninja_extra import ControllerBase
from ninja_extra.permissions import BasePermission

from events import models


class IsEventOrganizer(BasePermission):
    def has_permission(self, request: HttpRequest, controller: ControllerBase) -> bool:
        """Access is decided per event, once the route fetches it."""
        return True

    def has_object_permission(
        self,
        request: HttpRequest,
        controller: ControllerBase,
        obj: models.Event,
    ) -> bool:
        """Organizers (and superusers) manage their events."""
        return obj.is_organizer(request.user)  # type: ignore[arg-type]
