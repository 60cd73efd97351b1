from .event import Event
from .invitation import InvitationChannel
from .registration import (
    ACTIVE_STATUSES,
    ALLOWED_TRANSITIONS,
    Registration,
    RegistrationStatus,
    VoidedCheckinCode,
)
from .transfer import TransferOffer

__all__ = [
    "ACTIVE_STATUSES",
    "ALLOWED_TRANSITIONS",
    "Event",
    "InvitationChannel",
    "Registration",
    "RegistrationStatus",
    "TransferOffer",
    "VoidedCheckinCode",
]
