import functools
import typing as t

import structlog
from django.conf import settings
from django.db import OperationalError

from events.exceptions import StoreConflictError

logger = structlog.get_logger(__name__)

P = t.ParamSpec("P")
R = t.TypeVar("R")

# serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


def _is_retryable_operational_error(exc: OperationalError) -> bool:
    cause = exc.__cause__
    sqlstate = getattr(cause, "sqlstate", None) or getattr(cause, "pgcode", None)
    if sqlstate in RETRYABLE_SQLSTATES:
        return True
    return "database is locked" in str(exc)


def retry_on_store_conflict(func: t.Callable[P, R]) -> t.Callable[P, R]:
    """Re-run an atomic unit after it lost an optimistic-concurrency race.

    Must wrap the ``transaction.atomic`` boundary, so that every attempt starts from a clean
    (savepoint) state. Any other error propagates unchanged on the first attempt.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        max_retries = settings.STORE_CONFLICT_MAX_RETRIES
        attempt = 0
        while True:
            try:
                return func(*args, **kwargs)
            except (StoreConflictError, OperationalError) as exc:
                if isinstance(exc, OperationalError) and not _is_retryable_operational_error(exc):
                    raise
                attempt += 1
                if attempt > max_retries:
                    logger.warning("store_conflict_retries_exhausted", operation=func.__qualname__, attempts=attempt)
                    if isinstance(exc, StoreConflictError):
                        raise
                    raise StoreConflictError() from exc
                logger.info("store_conflict_retry", operation=func.__qualname__, attempt=attempt, error=str(exc))

    return wrapper
