#!/usr/bin/env python3
"""Abandon interviews left in progress for too long.

Run periodically (cron or similar):

    python abandon_stale_sessions.py            # uses STALE_SESSION_HOURS
    python abandon_stale_sessions.py --hours 6
"""
import argparse
import asyncio
import logging
from datetime import timedelta

from interview_grader.config import settings
from interview_grader.database import Database
from interview_grader.services.lifecycle import InterviewLifecycle

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=settings.log_level.upper(),
)
logger = logging.getLogger(__name__)


async def main(hours: int):
    await Database.connect()
    try:
        lifecycle = InterviewLifecycle(Database.get_database())
        count = await lifecycle.abandon_stale(timedelta(hours=hours))
        print(f"Abandoned {count} stale interview(s) idle for more than {hours}h")
    finally:
        await Database.disconnect()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--hours", type=int, default=settings.stale_session_hours)
    args = parser.parse_args()
    asyncio.run(main(args.hours))
