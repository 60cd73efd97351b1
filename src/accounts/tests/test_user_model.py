import pytest

from accounts.models import GatepassUser
from conftest import GatepassUserFactory

pytestmark = pytest.mark.django_db


class TestDisplayName:
    def test_prefers_preferred_name(self, user_factory: GatepassUserFactory) -> None:
        user = user_factory(preferred_name="Ada", first_name="Augusta", last_name="King")

        assert user.display_name == "Ada"

    def test_falls_back_to_full_name(self, user_factory: GatepassUserFactory) -> None:
        user = user_factory(first_name="Augusta", last_name="King")
        user.preferred_name = ""

        assert user.display_name == "Augusta King"

    def test_falls_back_to_username(self) -> None:
        user = GatepassUser(username="ada_lovelace@example.com")

        assert user.display_name == "Ada Lovelace"
