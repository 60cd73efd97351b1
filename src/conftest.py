"""
Project-wide fixtures shared by every app's tests.
"""

import secrets
import string
import typing as t
from datetime import datetime, time, timedelta

import faker
import pytest
from django.core.cache import cache
from django.test.client import Client
from django.utils import timezone
from ninja_jwt.tokens import RefreshToken
from pytest import MonkeyPatch

from accounts.models import GatepassUser


@pytest.fixture(autouse=True)
def increase_rate_limit(monkeypatch: MonkeyPatch) -> None:
    """Increase the rate limits for AuthThrottle to allow testing."""
    monkeypatch.setattr("common.throttling.AuthThrottle.rate", "1000/min")


@pytest.fixture(autouse=True)
def enable_celery_eager_mode(settings: t.Any) -> None:
    """Enable Celery eager mode for tests so tasks execute synchronously.

    This ensures that Celery tasks run immediately in the same process,
    allowing tests to verify their side effects without async complications.
    """
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


@pytest.fixture(autouse=True)
def clear_cache() -> None:
    """Clear the cache before each test so throttling counters start from zero."""
    cache.clear()


class GatepassUserFactory:
    """Factory for creating GatepassUser instances for testing."""

    fake = faker.Faker()

    def create_user(self, **kwargs: t.Any) -> GatepassUser:
        username = kwargs.pop(
            "username", "".join(secrets.choice(string.ascii_lowercase) for _ in range(8)) + "@user.test"
        )
        email = kwargs.pop("email", username + ("@test.com" if "@" not in username else ""))
        password = kwargs.pop("password", "password")
        first_name = kwargs.pop("first_name", self.fake.first_name())
        last_name = kwargs.pop("last_name", self.fake.last_name())
        preferred_name = kwargs.pop("preferred_name", f"{first_name} {last_name}")
        return GatepassUser.objects.create_user(
            username=username,
            email=email,
            password=password,
            preferred_name=preferred_name,
            first_name=first_name,
            last_name=last_name,
            **kwargs,
        )

    def __call__(self, **kwargs: t.Any) -> GatepassUser:
        return self.create_user(**kwargs)


@pytest.fixture
def user_factory() -> GatepassUserFactory:
    return GatepassUserFactory()


@pytest.fixture
def user(user_factory: GatepassUserFactory) -> GatepassUser:
    return user_factory(username="attendee@example.com", preferred_name="Ada Attendee")


@pytest.fixture
def superuser(user_factory: GatepassUserFactory) -> GatepassUser:
    """A superuser."""
    return user_factory(is_superuser=True, is_staff=True)


def make_client(user: GatepassUser) -> Client:
    """API client authenticated as ``user``."""
    refresh = RefreshToken.for_user(user)
    return Client(HTTP_AUTHORIZATION=f"Bearer {str(refresh.access_token)}")  # type: ignore[attr-defined]


@pytest.fixture
def client_for() -> t.Callable[[GatepassUser], Client]:
    """Build API clients authenticated as arbitrary users."""
    return make_client


@pytest.fixture
def user_client(user: GatepassUser) -> Client:
    """API client for the default attendee."""
    return make_client(user)


@pytest.fixture
def next_week() -> datetime:
    today = timezone.now()
    same_time_next_week = today + timedelta(days=7)
    noon = time(hour=12, minute=0)
    return timezone.make_aware(
        datetime.combine(same_time_next_week.date(), noon),
        timezone.get_current_timezone(),
    )
