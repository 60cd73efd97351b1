"""Celery tasks for notification dispatch."""

import typing as t

import structlog
from celery import shared_task
from django.utils import timezone

from notifications.models import Notification

logger = structlog.get_logger(__name__)


@shared_task(bind=True, max_retries=3)
def dispatch_notification(self: t.Any, notification_id: str) -> dict[str, t.Any]:
    """Hand a notification over to delivery.

    Delivery channels (e-mail, push, chat) live outside this service; dispatching marks the
    notification as picked up and records the hand-off in the logs.

    Args:
        self: Celery task instance (automatically passed when bind=True)
        notification_id: UUID of notification to dispatch

    Returns:
        Dict with dispatch stats
    """
    notification = Notification.objects.select_related("user").get(pk=notification_id)

    if notification.dispatched_at is not None:
        logger.info("notification_already_dispatched", notification_id=notification_id)
        return {"notification_id": notification_id, "dispatched": False}

    notification.dispatched_at = timezone.now()
    notification.save(update_fields=["dispatched_at", "updated_at"])

    logger.info(
        "notification_dispatched",
        notification_id=notification_id,
        notification_type=notification.notification_type,
        user_id=str(notification.user_id),
    )
    return {"notification_id": notification_id, "dispatched": True}
