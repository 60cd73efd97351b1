"""Short, human-enterable codes for check-in, invitation channels and transfer offers.

Codes are drawn from an alphabet without look-alike characters and checked against a
scope-specific ``is_taken`` callback. The callback only makes collisions unlikely: the
unique constraints on the tables are what actually guarantee uniqueness.
"""

import secrets
import typing as t

import structlog
from django.conf import settings

from events.exceptions import StoreConflictError
from events.models import Event, InvitationChannel, Registration, TransferOffer, VoidedCheckinCode

logger = structlog.get_logger(__name__)


def normalize_code(raw: str) -> str:
    """Strip all whitespace and uppercase user input."""
    return "".join(raw.split()).upper()


def generate_code(
    *,
    is_taken: t.Callable[[str], bool],
    length: int,
    alphabet: str | None = None,
    max_attempts: int | None = None,
) -> str:
    """Draw a random code that ``is_taken`` does not reject.

    Raises:
        ValueError: if the length or alphabet is unusable.
        StoreConflictError: if every attempt collided.
    """
    alphabet = (alphabet or settings.CODE_ALPHABET).upper()
    max_attempts = max_attempts or settings.CODE_MAX_ATTEMPTS
    if length < 1 or not alphabet:
        raise ValueError("Codes need a positive length and a non-empty alphabet.")

    for attempt in range(1, max_attempts + 1):
        code = "".join(secrets.choice(alphabet) for _ in range(length))
        if not is_taken(code):
            return code
        logger.warning("code_collision", attempt=attempt, length=length)

    logger.error("code_generation_exhausted", attempts=max_attempts, length=length)
    raise StoreConflictError("Could not generate a unique code.")


def checkin_code_taken(event: Event) -> t.Callable[[str], bool]:
    """Live codes of the event and codes voided by transfers are both off limits."""

    def is_taken(code: str) -> bool:
        return (
            Registration.objects.filter(event=event, checkin_code=code).exists()
            or VoidedCheckinCode.objects.filter(event=event, code=code).exists()
        )

    return is_taken


def mint_checkin_code(event: Event) -> str:
    """A check-in code unique within the event."""
    return generate_code(is_taken=checkin_code_taken(event), length=settings.CHECKIN_CODE_LENGTH)


def mint_channel_code() -> str:
    """A globally unique invitation channel code."""
    return generate_code(
        is_taken=lambda code: InvitationChannel.objects.filter(code=code).exists(),
        length=settings.CHANNEL_CODE_LENGTH,
    )


def mint_offer_code() -> str:
    """A globally unique transfer offer claim code."""
    return generate_code(
        is_taken=lambda code: TransferOffer.objects.filter(code=code).exists(),
        length=settings.OFFER_CODE_LENGTH,
    )
