"""Core notification dispatcher service."""

import typing as t

import structlog

from accounts.models import GatepassUser
from notifications.enums import NotificationType
from notifications.models import Notification

logger = structlog.get_logger(__name__)


def create_notification(
    notification_type: NotificationType | str,
    user: GatepassUser,
    context: dict[str, t.Any],
) -> Notification:
    """Create a notification record.

    Args:
        notification_type: Type of notification
        user: User to notify
        context: Notification context data

    Returns:
        Created Notification instance

    Raises:
        ValueError: If the notification type is unknown
    """
    if isinstance(notification_type, str):
        notification_type = NotificationType(notification_type)

    notification = Notification.objects.create(notification_type=notification_type, user=user, context=context)

    logger.info(
        "notification_created",
        notification_id=str(notification.id),
        notification_type=notification_type,
        user_id=str(user.id),
    )
    return notification
