"""Database connection and utilities."""
import logging
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from typing import Optional
from interview_grader.config import settings

logger = logging.getLogger(__name__)


class Database:
    """MongoDB database connection manager."""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def connect(cls):
        """Connect to MongoDB and make sure the unique indexes exist."""
        cls.client = AsyncIOMotorClient(settings.mongodb_url)
        cls.db = cls.client[settings.mongodb_db_name]
        await ensure_indexes(cls.db)
        logger.info("Connected to MongoDB: %s", settings.mongodb_db_name)

    @classmethod
    async def disconnect(cls):
        """Disconnect from MongoDB."""
        if cls.client:
            cls.client.close()
            logger.info("Disconnected from MongoDB")

    @classmethod
    def get_database(cls) -> AsyncIOMotorDatabase:
        """Get database instance."""
        if cls.db is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return cls.db


async def ensure_indexes(db: AsyncIOMotorDatabase):
    """Create the indexes the uniqueness rules rely on.

    The unique indexes are the authoritative guard against two concurrent
    submissions for the same question or two results for the same session.
    """
    await db.answers.create_index(
        [("interview_id", ASCENDING), ("user_id", ASCENDING), ("question_number", ASCENDING)],
        unique=True,
        name="uniq_answer_per_question",
    )
    await db.answers.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
    await db.final_results.create_index(
        [("interview_id", ASCENDING), ("user_id", ASCENDING)],
        unique=True,
        name="uniq_result_per_interview",
    )
    await db.final_results.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
    await db.interview_sessions.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
    await db.interview_sessions.create_index([("status", ASCENDING)])


# Dependency for FastAPI routes
async def get_db() -> AsyncIOMotorDatabase:
    """Get database dependency for routes."""
    return Database.get_database()
