"""Celery tasks for event management."""

import structlog
from celery import shared_task

from events.service import transfers

logger = structlog.get_logger(__name__)


@shared_task
def expire_stale_transfer_offers() -> int:
    """Flip transfer offers whose acceptance window has passed to expired.

    Offers are already treated as expired on every read once their window passes; this
    only keeps the stored status tidy. Idempotent and safe to run periodically.
    """
    count = transfers.expire_stale_offers()
    logger.info("stale_transfer_offers_swept", count=count)
    return count
