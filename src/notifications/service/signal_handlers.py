"""Signal handlers for notification system."""

import typing as t

import structlog
from django.dispatch import receiver

from notifications.service.dispatcher import create_notification
from notifications.signals import notification_requested

logger = structlog.get_logger(__name__)


@receiver(notification_requested)
def handle_notification_request(sender: t.Any, **kwargs: t.Any) -> None:
    """Handle notification_requested signal.

    Creates notification record and dispatches to async task.

    IMPORTANT: This handler MUST NOT raise exceptions. Notifications are sent after the
    business transaction committed, so a failure here must never surface to the caller.

    Expected kwargs:
        - notification_type: NotificationType enum value or string
        - user: GatepassUser instance
        - context: JSON-serializable dict
    """
    try:
        notification_type = kwargs.get("notification_type")
        user = kwargs.get("user")
        context = kwargs.get("context", {})

        if not notification_type or not user:
            logger.error(
                "invalid_notification_request",
                notification_type=notification_type,
                sender=sender,
            )
            return

        notification = create_notification(notification_type=notification_type, user=user, context=context)

        from notifications.tasks import dispatch_notification

        dispatch_notification.delay(str(notification.id))

        logger.info(
            "notification_request_handled",
            notification_id=str(notification.id),
            notification_type=notification_type,
            user_id=str(user.id),
            sender=sender.__name__ if hasattr(sender, "__name__") else str(sender),
        )
    except Exception as e:
        user = kwargs.get("user")
        logger.exception(
            "notification_request_failed",
            notification_type=kwargs.get("notification_type"),
            user_id=str(user.id) if user else None,
            sender=sender.__name__ if hasattr(sender, "__name__") else str(sender),
            error=str(e),
            error_type=type(e).__name__,
        )
