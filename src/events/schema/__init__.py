"""Events schema package.

This package contains all schema definitions for the events app,
organized into modules that mirror the models package structure.
"""

from .event import CapacitySchema, CheckInRequestSchema, CheckInResponseSchema, EventSchema
from .invitation import InvitationChannelCreateSchema, InvitationChannelSchema
from .registration import (
    AdminRegistrationSchema,
    RedeemChannelCodeSchema,
    RegistrationCreateSchema,
    RegistrationSchema,
    WaitlistEntrySchema,
)
from .transfer import (
    ClaimOfferSchema,
    TransferOfferCreateSchema,
    TransferOfferPublicSchema,
    TransferOfferSchema,
)

__all__ = [
    "AdminRegistrationSchema",
    "CapacitySchema",
    "CheckInRequestSchema",
    "CheckInResponseSchema",
    "ClaimOfferSchema",
    "EventSchema",
    "InvitationChannelCreateSchema",
    "InvitationChannelSchema",
    "RedeemChannelCodeSchema",
    "RegistrationCreateSchema",
    "RegistrationSchema",
    "TransferOfferCreateSchema",
    "TransferOfferPublicSchema",
    "TransferOfferSchema",
    "WaitlistEntrySchema",
]
