import pytest

from events.exceptions import InvalidTransitionError
from events.models import ALLOWED_TRANSITIONS, Registration, RegistrationStatus

S = RegistrationStatus


@pytest.mark.parametrize(
    "current,target",
    [
        (S.PENDING, S.CONFIRMED),
        (S.PENDING, S.REJECTED),
        (S.PENDING, S.CANCELLED),
        (S.WAITLISTED, S.CONFIRMED),
        (S.WAITLISTED, S.CANCELLED),
        (S.CONFIRMED, S.CANCELLED),
    ],
)
def test_allowed_transitions(current: str, target: str) -> None:
    registration = Registration(status=current)

    assert registration.can_transition_to(target)
    registration.assert_transition(target)


@pytest.mark.parametrize(
    "current,target",
    [
        (S.CONFIRMED, S.PENDING),
        (S.CONFIRMED, S.WAITLISTED),
        (S.CONFIRMED, S.REJECTED),
        (S.WAITLISTED, S.REJECTED),
        (S.REJECTED, S.CONFIRMED),
        (S.CANCELLED, S.CONFIRMED),
        (S.CANCELLED, S.WAITLISTED),
    ],
)
def test_forbidden_transitions(current: str, target: str) -> None:
    registration = Registration(status=current)

    assert not registration.can_transition_to(target)
    with pytest.raises(InvalidTransitionError):
        registration.assert_transition(target)


def test_terminal_statuses_have_no_exits() -> None:
    assert ALLOWED_TRANSITIONS[S.REJECTED] == frozenset()
    assert ALLOWED_TRANSITIONS[S.CANCELLED] == frozenset()


def test_checked_in_registration_cannot_be_cancelled() -> None:
    registration = Registration(status=S.CONFIRMED, checked_in=True)

    with pytest.raises(InvalidTransitionError, match="checked in"):
        registration.assert_transition(S.CANCELLED)


def test_only_unused_confirmed_registrations_are_transferable() -> None:
    assert Registration(status=S.CONFIRMED).is_transferable
    assert not Registration(status=S.CONFIRMED, checked_in=True).is_transferable
    assert not Registration(status=S.WAITLISTED).is_transferable
    assert not Registration(status=S.CANCELLED).is_transferable
