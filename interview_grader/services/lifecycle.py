"""Interview session state machine."""
import logging
from datetime import datetime, timedelta
from typing import Dict, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from interview_grader.exceptions import StateError
from interview_grader.models.interview import InterviewSession, InterviewStatus

logger = logging.getLogger(__name__)

START = "start"
COMPLETE = "complete"
ABANDON = "abandon"

# Every legal move. Anything missing here is rejected.
TRANSITIONS: Dict[Tuple[InterviewStatus, str], InterviewStatus] = {
    (InterviewStatus.GENERATED, START): InterviewStatus.IN_PROGRESS,
    (InterviewStatus.IN_PROGRESS, COMPLETE): InterviewStatus.COMPLETED,
    (InterviewStatus.GENERATED, ABANDON): InterviewStatus.ABANDONED,
    (InterviewStatus.IN_PROGRESS, ABANDON): InterviewStatus.ABANDONED,
}

_REJECTION_MESSAGES = {
    START: "Interview has already been started or completed",
    COMPLETE: "Interview is not in progress",
    ABANDON: "Interview has already finished",
}


def next_status(current: InterviewStatus, action: str) -> InterviewStatus:
    """Look up the target state for an action or raise StateError."""
    target = TRANSITIONS.get((InterviewStatus(current), action))
    if target is None:
        message = _REJECTION_MESSAGES.get(action, f"Unknown transition '{action}'")
        raise StateError(f"{message} (status: {InterviewStatus(current).value})")
    return target


class InterviewLifecycle:
    """Applies transitions to stored sessions.

    Each write is a compare-and-set on the current status, so two racing
    transitions cannot both succeed.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def start(self, session: InterviewSession) -> InterviewSession:
        now = datetime.utcnow()
        return await self._transition(session, START, {"started_at": now})

    async def complete(self, session: InterviewSession) -> InterviewSession:
        now = datetime.utcnow()
        changes = {"completed_at": now, "duration": 0}
        if session.started_at:
            changes["duration"] = max(0, int((now - session.started_at).total_seconds()))
        return await self._transition(session, COMPLETE, changes)

    async def abandon(self, session: InterviewSession) -> InterviewSession:
        return await self._transition(session, ABANDON, {})

    async def abandon_stale(self, idle_for: timedelta) -> int:
        """Abandon in-progress sessions started longer than ``idle_for`` ago.

        Meant to be run periodically from outside the API process.
        """
        cutoff = datetime.utcnow() - idle_for
        stale = await self.db.interview_sessions.find({
            "status": InterviewStatus.IN_PROGRESS.value,
            "started_at": {"$lt": cutoff},
        }).to_list(length=None)
        abandoned = 0
        for data in stale:
            session = InterviewSession(**data)
            try:
                await self.abandon(session)
            except StateError:
                # Finished or abandoned by someone else since we read it
                logger.info("Skipping session %s, state changed during sweep", session.id)
                continue
            abandoned += 1
        logger.info("Stale session sweep abandoned %d session(s)", abandoned)
        return abandoned

    async def _transition(self, session: InterviewSession, action: str, changes: dict) -> InterviewSession:
        target = next_status(session.status, action)
        update = dict(changes)
        update["status"] = target.value
        update["updated_at"] = datetime.utcnow()

        updated = await self.db.interview_sessions.find_one_and_update(
            {"_id": session.id, "status": InterviewStatus(session.status).value},
            {"$set": update},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise StateError("Interview status changed concurrently, reload and retry")

        logger.info(
            "Interview %s: %s -> %s",
            session.id, InterviewStatus(session.status).value, target.value,
        )
        return InterviewSession(**updated)
