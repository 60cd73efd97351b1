import typing as t

import pytest
from django.conf import settings

from accounts.models import GatepassUser
from events.exceptions import StoreConflictError
from events.models import Event, Registration, RegistrationStatus, VoidedCheckinCode
from events.service import codes


class TestGenerateCode:
    def test_uses_only_the_alphabet(self) -> None:
        code = codes.generate_code(is_taken=lambda c: False, length=12, alphabet="AB2")

        assert len(code) == 12
        assert set(code) <= {"A", "B", "2"}

    def test_default_alphabet_has_no_look_alikes(self) -> None:
        code = codes.generate_code(is_taken=lambda c: False, length=200)

        assert not set(code) & {"0", "O", "1", "I"}
        assert code == code.upper()

    def test_lowercase_alphabet_still_yields_uppercase_codes(self) -> None:
        code = codes.generate_code(is_taken=lambda c: False, length=8, alphabet="abc")

        assert code == code.upper()

    def test_redraws_on_collision(self) -> None:
        seen: list[str] = []

        def is_taken(code: str) -> bool:
            seen.append(code)
            return len(seen) < 3

        code = codes.generate_code(is_taken=is_taken, length=8)

        assert len(seen) == 3
        assert code == seen[-1]

    def test_exhausted_attempts_raise_store_conflict(self) -> None:
        calls: list[str] = []

        def always_taken(code: str) -> bool:
            calls.append(code)
            return True

        with pytest.raises(StoreConflictError):
            codes.generate_code(is_taken=always_taken, length=8, max_attempts=4)

        assert len(calls) == 4

    @pytest.mark.parametrize("length,alphabet", [(0, "ABC"), (8, "")])
    def test_rejects_unusable_parameters(self, length: int, alphabet: str, settings: t.Any) -> None:
        settings.CODE_ALPHABET = ""
        with pytest.raises(ValueError):
            codes.generate_code(is_taken=lambda c: False, length=length, alphabet=alphabet)


@pytest.mark.parametrize("raw,expected", [("abcd2345", "ABCD2345"), ("  ab cd\t23 45 ", "ABCD2345")])
def test_normalize_code(raw: str, expected: str) -> None:
    assert codes.normalize_code(raw) == expected


@pytest.mark.django_db
class TestCheckinCodeScope:
    def test_live_codes_of_the_event_are_taken(self, event: Event, alice: GatepassUser) -> None:
        Registration.objects.create(
            event=event, user=alice, status=RegistrationStatus.CONFIRMED, checkin_code="ABCD2345"
        )

        assert codes.checkin_code_taken(event)("ABCD2345")

    def test_voided_codes_of_the_event_are_taken(self, event: Event, alice: GatepassUser) -> None:
        registration = Registration.objects.create(
            event=event, user=alice, status=RegistrationStatus.CONFIRMED, checkin_code="ABCD2345"
        )
        VoidedCheckinCode.objects.create(event=event, registration=registration, code="VOID2345")

        assert codes.checkin_code_taken(event)("VOID2345")

    def test_codes_of_other_events_are_free(
        self, event: Event, single_seat_event: Event, alice: GatepassUser
    ) -> None:
        Registration.objects.create(
            event=single_seat_event, user=alice, status=RegistrationStatus.CONFIRMED, checkin_code="ABCD2345"
        )

        assert not codes.checkin_code_taken(event)("ABCD2345")

    def test_minted_code_has_configured_length(self, event: Event) -> None:
        assert len(codes.mint_checkin_code(event)) == settings.CHECKIN_CODE_LENGTH
