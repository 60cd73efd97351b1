"""Event admin controllers package.

This package splits the event admin endpoints into logical groupings.
"""

from .channels import EventAdminChannelsController
from .registrations import EventAdminRegistrationsController
from .waitlist import EventAdminWaitlistController

EVENT_ADMIN_CONTROLLERS: list[type] = [
    EventAdminRegistrationsController,
    EventAdminWaitlistController,
    EventAdminChannelsController,
]

__all__ = [
    "EventAdminChannelsController",
    "EventAdminRegistrationsController",
    "EventAdminWaitlistController",
    "EVENT_ADMIN_CONTROLLERS",
]
