import pytest
from freezegun import freeze_time

from accounts.models import GatepassUser
from notifications.enums import NotificationType
from notifications.models import Notification
from notifications.tasks import dispatch_notification

pytestmark = pytest.mark.django_db


@pytest.fixture
def notification(user: GatepassUser) -> Notification:
    return Notification.objects.create(notification_type=NotificationType.TICKET_RECEIVED, user=user, context={})


def test_marks_notification_dispatched(notification: Notification) -> None:
    with freeze_time("2026-05-01 12:00:00"):
        result = dispatch_notification(str(notification.id))

    notification.refresh_from_db()
    assert result == {"notification_id": str(notification.id), "dispatched": True}
    assert notification.dispatched_at is not None
    assert notification.dispatched_at.isoformat() == "2026-05-01T12:00:00+00:00"


def test_dispatch_is_idempotent(notification: Notification) -> None:
    dispatch_notification(str(notification.id))
    notification.refresh_from_db()
    first = notification.dispatched_at

    result = dispatch_notification.delay(str(notification.id)).get()

    notification.refresh_from_db()
    assert result["dispatched"] is False
    assert notification.dispatched_at == first
