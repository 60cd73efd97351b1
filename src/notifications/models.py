"""Models for the notification system."""

from django.conf import settings
from django.db import models

from common.models import TimeStampedModel
from notifications.enums import NotificationType


class Notification(TimeStampedModel):
    """Core notification record - channel agnostic.

    All contextual information (event, registration, offer, etc.) is stored
    in the structured context JSON field. Only user FK is kept for efficient
    querying of user's notifications.
    """

    notification_type = models.CharField(
        max_length=50,
        db_index=True,
        choices=NotificationType.choices,
    )
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications")
    context = models.JSONField(default=dict, blank=True)
    dispatched_at = models.DateTimeField(null=True, blank=True, help_text="When the dispatcher task picked it up")

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "created_at"], name="notification_user_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.notification_type} for user {self.user_id} at {self.created_at}"
