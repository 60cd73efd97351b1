"""Domain errors for registration, admission, check-in and ticket transfer.

Every error carries a stable machine-readable ``code`` and the HTTP status the API
layer answers with. Store-level conflicts are the only retryable kind.
"""

import typing as t
from datetime import datetime

from django.utils.translation import gettext_lazy as _


class TicketingError(Exception):
    """Base class for all ticketing domain errors."""

    code: str = "ticketing_error"
    status_code: int = 400
    default_detail: t.Any = _("The request could not be processed.")

    def __init__(self, detail: str | None = None) -> None:
        """Use the default detail unless a more specific one is given."""
        self.detail = detail or str(self.default_detail)
        super().__init__(self.detail)

    def extra(self) -> dict[str, t.Any]:
        """Additional fields merged into the error response body."""
        return {}


class NotFoundError(TicketingError):
    """Raised when a registration, offer, channel or code does not exist."""

    code = "not_found"
    status_code = 404
    default_detail = _("Not found.")


class EventNotOpenError(TicketingError):
    """Raised when registering for an event that is not open."""

    code = "event_not_open"
    default_detail = _("This event is not open for registration.")


class CapacityExceededError(TicketingError):
    """Raised when an event is full and no waitlist is available."""

    code = "capacity_exceeded"
    default_detail = _("This event is at capacity.")


class DuplicateRegistrationError(TicketingError):
    """Raised when a user already holds an active registration for the event."""

    code = "duplicate_registration"
    status_code = 409
    default_detail = _("You are already registered for this event.")


class NotOwnerError(TicketingError):
    """Raised when the caller does not own the registration or offer."""

    code = "not_owner"
    status_code = 403
    default_detail = _("You do not own this ticket.")


class NotRecipientError(TicketingError):
    """Raised when a direct transfer offer is accepted by someone other than its recipient."""

    code = "not_recipient"
    status_code = 403
    default_detail = _("This offer was made to someone else.")


class NotTransferableError(TicketingError):
    """Raised when a registration is not in a state that allows transfer."""

    code = "not_transferable"
    default_detail = _("This ticket cannot be transferred.")


class SelfTransferError(TicketingError):
    """Raised when a holder tries to accept their own offer."""

    code = "self_transfer"
    default_detail = _("You cannot transfer a ticket to yourself.")


class AlreadyTransferringError(TicketingError):
    """Raised when a registration already has a pending transfer offer."""

    code = "already_transferring"
    status_code = 409
    default_detail = _("A transfer offer for this ticket is already pending.")


class NotPendingError(TicketingError):
    """Raised when an offer was already accepted or cancelled."""

    code = "not_pending"
    status_code = 409
    default_detail = _("This offer is no longer available.")


class OfferExpiredError(TicketingError):
    """Raised when an offer's acceptance window has passed."""

    code = "expired"
    status_code = 410
    default_detail = _("This offer has expired.")


class AlreadyCheckedInError(TicketingError):
    """Raised when a check-in code was already used."""

    code = "already_checked_in"
    status_code = 409
    default_detail = _("This ticket has already been checked in.")

    def __init__(self, checked_in_at: datetime | None = None, detail: str | None = None) -> None:
        """Remember when the first check-in happened."""
        self.checked_in_at = checked_in_at
        super().__init__(detail)

    def extra(self) -> dict[str, t.Any]:
        """Expose the original check-in time."""
        return {"checked_in_at": self.checked_in_at.isoformat() if self.checked_in_at else None}


class InvalidTransitionError(TicketingError):
    """Raised when a registration status change is not allowed."""

    code = "invalid_transition"
    default_detail = _("This registration cannot change to the requested status.")


class DuplicateChannelError(TicketingError):
    """Raised when an event already has an invitation channel with the same name."""

    code = "duplicate_channel"
    status_code = 409
    default_detail = _("A channel with this name already exists for this event.")


class StoreConflictError(TicketingError):
    """Raised when a conditional write lost a race or a unique code could not be minted.

    The whole atomic unit is safe to retry.
    """

    code = "store_conflict"
    status_code = 409
    default_detail = _("The request conflicted with a concurrent change. Please retry.")
