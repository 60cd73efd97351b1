import structlog
from django.db import IntegrityError, transaction
from django.db.models import QuerySet

from accounts.models import GatepassUser
from events.exceptions import DuplicateChannelError, NotFoundError, StoreConflictError
from events.models import Event, InvitationChannel
from events.service import retry_on_store_conflict
from events.service.codes import mint_channel_code, normalize_code

logger = structlog.get_logger(__name__)


@retry_on_store_conflict
@transaction.atomic
def create_channel(event: Event, name: str, *, actor: GatepassUser) -> InvitationChannel:
    """Create a named invitation channel with a fresh code."""
    if InvitationChannel.objects.filter(event=event, name=name).exists():
        raise DuplicateChannelError()
    try:
        with transaction.atomic():
            channel = InvitationChannel.objects.create(
                event=event, name=name, code=mint_channel_code(), created_by=actor
            )
    except IntegrityError as e:
        if InvitationChannel.objects.filter(event=event, name=name).exists():
            raise DuplicateChannelError() from e
        raise StoreConflictError() from e
    logger.info("channel_created", event_id=str(event.id), channel_id=str(channel.id), channel_name=name)
    return channel


def deactivate_channel(channel: InvitationChannel) -> InvitationChannel:
    """Stop accepting the channel's code. Registrations already attributed keep their channel."""
    InvitationChannel.objects.filter(pk=channel.pk).update(is_active=False)
    channel.refresh_from_db()
    logger.info("channel_deactivated", event_id=str(channel.event_id), channel_id=str(channel.id))
    return channel


def resolve_channel(event: Event, code: str) -> InvitationChannel:
    """Find the active channel of ``event`` with ``code``."""
    channel = InvitationChannel.objects.active().filter(event=event, code=normalize_code(code)).first()
    if channel is None:
        raise NotFoundError("Invitation code not found.")
    return channel


def get_active_channel_by_code(code: str) -> InvitationChannel:
    """Find an active channel by its global code."""
    channel = InvitationChannel.objects.active().select_related("event").filter(code=normalize_code(code)).first()
    if channel is None:
        raise NotFoundError("Invitation code not found.")
    return channel


def channel_stats(event: Event) -> QuerySet[InvitationChannel]:
    """Channels of the event, each annotated with its non-cancelled registration count."""
    return InvitationChannel.objects.filter(event=event).with_registration_count().order_by("created_at")
