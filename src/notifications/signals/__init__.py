"""Notification signals.

Services send ``notification_requested`` once their transaction has committed; the receiver
in ``notifications.service.signal_handlers`` persists and dispatches the notification.
"""

from django.dispatch import Signal

# Signal for requesting notification dispatch
# Expected kwargs:
#   - notification_type: NotificationType enum value
#   - user: GatepassUser instance
#   - context: JSON-serializable dict
notification_requested = Signal()

__all__ = ["notification_requested"]
