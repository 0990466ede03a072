"""
Scheduled archival of ended challenges.

A periodic APScheduler job flips every challenge whose end_at has passed to
"archived". The update only matches challenges that are not archived yet,
so overlapping or repeated runs never archive (or count) a challenge twice.

Error handling: best-effort with Sentry reporting. A failed run is logged
and retried on the next interval.
"""

import logging
from datetime import datetime, timezone

import sentry_sdk
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from .config import get_archive_sweep_minutes
from .database import get_transaction
from .queries.challenges import archive_ended_challenges as _archive_ended_query

logger = logging.getLogger(__name__)

ARCHIVE_JOB_ID = "archive_ended_challenges"

_scheduler: AsyncIOScheduler | None = None


async def archive_ended_challenges(now: datetime | None = None) -> int:
    """
    Archive every challenge whose end time has passed.

    Returns:
        Number of challenges archived by this run (0 when re-run)
    """
    now = now or datetime.now(timezone.utc)
    async with get_transaction() as conn:
        archived_ids = await _archive_ended_query(conn, now)

    if archived_ids:
        logger.info(f"Archived {len(archived_ids)} challenge(s): {archived_ids}")
    return len(archived_ids)


async def run_archive_sweep() -> None:
    """Scheduler entry point. Never raises."""
    try:
        await archive_ended_challenges()
    except Exception as e:
        logger.error(f"Archive sweep failed: {e}")
        sentry_sdk.capture_exception(e)


def init_archive_scheduler() -> AsyncIOScheduler:
    """
    Start the archival scheduler (idempotent).

    Call this during app startup (in FastAPI lifespan).
    """
    global _scheduler

    if _scheduler is not None:
        return _scheduler

    _scheduler = AsyncIOScheduler(
        job_defaults={
            "coalesce": True,  # Combine missed runs into one
            "max_instances": 1,
            "misfire_grace_time": 300,
        },
    )
    _scheduler.add_job(
        run_archive_sweep,
        trigger="interval",
        minutes=get_archive_sweep_minutes(),
        id=ARCHIVE_JOB_ID,
        replace_existing=True,
        next_run_time=datetime.now(timezone.utc),
    )
    _scheduler.start()
    logger.info(
        f"Archive scheduler started (every {get_archive_sweep_minutes()} minutes)"
    )
    return _scheduler


def shutdown_archive_scheduler() -> None:
    """Stop the scheduler. Call on shutdown."""
    global _scheduler

    if _scheduler is not None:
        _scheduler.shutdown(wait=False)
        _scheduler = None
