"""
APScheduler job definitions for automated data source syncs.

One job syncs every registered source on the SYNC_FREQUENCY schedule,
records each result in data_source_syncs and posts a webhook summary.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Optional, Tuple

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.exc import SQLAlchemyError

from ..archivist.database import get_session
from ..config.settings import settings
from ..harvester import sync_all
from .notifications import send_sync_summary

logger = logging.getLogger(__name__)

SCHEDULER_TIMEZONE = "America/New_York"

scheduler: Optional[AsyncIOScheduler] = None


def get_sync_schedule() -> Optional[Tuple[CronTrigger, str]]:
    """
    Cron trigger for SYNC_FREQUENCY.

    Supported frequencies:
        - "daily": Once per day at 9am EST (default)
        - "hourly": Top of every hour
        - "disabled": No scheduled sync (returns None)
    """
    frequency = settings.sync_frequency.lower().strip()

    if frequency == "disabled":
        return None
    if frequency == "hourly":
        return CronTrigger(minute=0, timezone=SCHEDULER_TIMEZONE), "hourly"
    if frequency != "daily":
        logger.warning(f"Unknown SYNC_FREQUENCY '{frequency}', defaulting to daily")
    return CronTrigger(hour=9, minute=0, timezone=SCHEDULER_TIMEZONE), "daily at 9am EST"


async def scheduled_sync_job() -> Optional[dict]:
    """Sync all sources, persist the results and notify webhooks."""
    job_id = datetime.now(timezone.utc).strftime("sync-%Y%m%d-%H%M%S")
    started = time.perf_counter()
    logger.info(f"Starting scheduled sync {job_id}")

    try:
        async with get_session() as session:
            report = await sync_all(session)
    except SQLAlchemyError as e:
        duration = time.perf_counter() - started
        logger.error(f"Scheduled sync {job_id} failed: {e}")
        await send_sync_summary(job_id, None, duration, error=str(e))
        return None

    duration = time.perf_counter() - started
    await send_sync_summary(job_id, report, duration)
    return report


def setup_scheduler() -> Optional[AsyncIOScheduler]:
    """Initialize and start the APScheduler; None when syncs are disabled."""
    global scheduler

    schedule = get_sync_schedule()
    if schedule is None:
        logger.info("Scheduled sync disabled")
        return None
    trigger, schedule_desc = schedule

    scheduler = AsyncIOScheduler(
        timezone=SCHEDULER_TIMEZONE,
        job_defaults={
            "coalesce": True,
            "max_instances": 1,
            "misfire_grace_time": 600,
        },
    )
    scheduler.add_job(
        scheduled_sync_job,
        trigger=trigger,
        id="scheduled_sync",
        name=f"Data Source Sync ({schedule_desc})",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(f"Scheduler started with sync frequency: {schedule_desc}")

    for job in scheduler.get_jobs():
        logger.info(f"Scheduled job: {job.id} - next run: {job.next_run_time}")

    return scheduler


def shutdown_scheduler():
    """Shutdown the scheduler without waiting for running jobs."""
    global scheduler
    if scheduler:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler shutdown complete")
        scheduler = None
