import typing as t

import pytest
from django.db import OperationalError

from events.exceptions import StoreConflictError
from events.service import retry_on_store_conflict


class _SerializationFailure(Exception):
    sqlstate = "40001"


def _flaky(failures: list[Exception]) -> t.Callable[[], str]:
    calls: list[int] = []

    @retry_on_store_conflict
    def operation() -> str:
        calls.append(1)
        if failures:
            raise failures.pop(0)
        return f"done after {len(calls)}"

    return operation


def _serialization_failure() -> OperationalError:
    try:
        raise OperationalError("could not serialize access") from _SerializationFailure()
    except OperationalError as e:
        return e


def test_returns_first_success() -> None:
    assert _flaky([])() == "done after 1"


def test_retries_store_conflicts(settings: t.Any) -> None:
    settings.STORE_CONFLICT_MAX_RETRIES = 3

    assert _flaky([StoreConflictError(), StoreConflictError()])() == "done after 3"


def test_gives_up_after_max_retries(settings: t.Any) -> None:
    settings.STORE_CONFLICT_MAX_RETRIES = 2

    with pytest.raises(StoreConflictError):
        _flaky([StoreConflictError() for _ in range(3)])()


def test_retries_serialization_failures(settings: t.Any) -> None:
    settings.STORE_CONFLICT_MAX_RETRIES = 1

    assert _flaky([_serialization_failure()])() == "done after 2"


def test_exhausted_serialization_failures_become_store_conflicts(settings: t.Any) -> None:
    settings.STORE_CONFLICT_MAX_RETRIES = 1

    with pytest.raises(StoreConflictError) as exc_info:
        _flaky([_serialization_failure(), _serialization_failure()])()

    assert isinstance(exc_info.value.__cause__, OperationalError)


def test_retries_locked_sqlite_database(settings: t.Any) -> None:
    settings.STORE_CONFLICT_MAX_RETRIES = 1

    assert _flaky([OperationalError("database is locked")])() == "done after 2"


def test_other_errors_propagate_immediately() -> None:
    failures: list[Exception] = [OperationalError("no such table: events_event"), StoreConflictError()]
    operation = _flaky(failures)

    with pytest.raises(OperationalError, match="no such table"):
        operation()

    assert len(failures) == 1


def test_domain_errors_are_not_retried() -> None:
    failures: list[Exception] = [ValueError("boom"), StoreConflictError()]

    with pytest.raises(ValueError):
        _flaky(failures)()

    assert len(failures) == 1
