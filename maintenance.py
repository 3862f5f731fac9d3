"""Recurring cleanup jobs, run as asyncio tasks inside the server process.

Nothing is persisted between runs: after a restart the next chat boundary is
derived from the clock again, so missed boundaries during an outage are skipped.
"""
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from zoneinfo import ZoneInfo

from starlette.concurrency import run_in_threadpool

from storage.chat import clear_chat_messages
from storage.files import purge_expired_files

logger = logging.getLogger(__name__)


def next_boundary(now: datetime, tz: ZoneInfo, hour: int = 0) -> datetime:
    """Next occurrence of `hour`:00 wall-clock time in `tz`, strictly after `now`."""
    local_now = now.astimezone(tz)
    candidate = datetime(local_now.year, local_now.month, local_now.day, hour, tzinfo=tz)
    if candidate <= local_now:
        next_day = local_now.date() + timedelta(days=1)
        candidate = datetime(next_day.year, next_day.month, next_day.day, hour, tzinfo=tz)
    return candidate


def seconds_until_next_boundary(now: datetime, tz: ZoneInfo, hour: int = 0) -> float:
    return (next_boundary(now, tz, hour) - now).total_seconds()


def purge_chat_history(boundary: datetime) -> int:
    """Delete chat messages created before the boundary; later ones stay."""
    deleted = clear_chat_messages(before=boundary)
    logger.info("Chat retention: purged %d message(s) older than %s", deleted, boundary.isoformat())
    return deleted


def purge_files(now: Optional[datetime] = None) -> int:
    deleted = purge_expired_files(now)
    if deleted:
        logger.info("Expired-file purge: removed %d file(s)", deleted)
    return deleted


async def chat_retention_loop(tz_name: str, hour: int = 0):
    tz = ZoneInfo(tz_name)
    while True:
        now = datetime.now(timezone.utc)
        boundary = next_boundary(now, tz, hour)
        delay = (boundary - now).total_seconds()
        logger.info("Chat retention: next purge at %s (in %.0fs)", boundary.isoformat(), delay)
        await asyncio.sleep(delay)
        try:
            await run_in_threadpool(purge_chat_history, boundary)
        except Exception:
            logger.exception("Chat retention purge failed")


async def file_purge_loop(interval_seconds: int):
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await run_in_threadpool(purge_files)
        except Exception:
            logger.exception("Expired-file purge failed")


def start_maintenance(settings) -> List[asyncio.Task]:
    return [
        asyncio.create_task(
            chat_retention_loop(settings.chat_retention_timezone, settings.chat_retention_hour),
            name="chat-retention",
        ),
        asyncio.create_task(file_purge_loop(settings.file_purge_interval_seconds), name="file-purge"),
    ]


async def stop_maintenance(tasks: List[asyncio.Task]):
    for task in tasks:
        task.cancel()
    for task in tasks:
        try:
            await task
        except asyncio.CancelledError:
            pass
