import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-used-only-by-the-test-suite")

from datetime import datetime, timedelta

import pytest
from bson import ObjectId
from mongomock_motor import AsyncMongoMockClient

from interview_grader.database import ensure_indexes
from interview_grader.models.answer import AIEvaluation, Answer
from interview_grader.models.interview import InterviewSession, InterviewStatus
from interview_grader.services.answer_ledger import AnswerLedger
from interview_grader.services.evaluation import EvaluationConsistencyEnforcer
from tests.helpers import GOOD_ANSWER, StubBehavioralClient, StubEvaluator, make_questions


@pytest.fixture
async def db():
    client = AsyncMongoMockClient()
    database = client["interview_grader_test"]
    await ensure_indexes(database)
    return database


@pytest.fixture
def user_id():
    return ObjectId()


@pytest.fixture
def evaluator():
    return StubEvaluator()


@pytest.fixture
def behavioral_client():
    return StubBehavioralClient()


@pytest.fixture
def ledger(db, evaluator, behavioral_client):
    return AnswerLedger(db, EvaluationConsistencyEnforcer(evaluator, timeout=1), behavioral_client)


@pytest.fixture
def make_session(db):
    """Insert a session in the given state and return it."""

    async def factory(owner, status=InterviewStatus.IN_PROGRESS, n=3, started_minutes_ago=10):
        now = datetime.utcnow()
        session = InterviewSession(
            user_id=owner,
            tech_stack=["Python", "MongoDB"],
            hardness_level="Medium",
            experience_level="Mid",
            number_of_questions=n,
            questions=make_questions(n),
            status=status,
            started_at=None if status == InterviewStatus.GENERATED else now - timedelta(minutes=started_minutes_ago),
            completed_at=now if status == InterviewStatus.COMPLETED else None,
            duration=started_minutes_ago * 60 if status == InterviewStatus.COMPLETED else 0,
        )
        result = await db.interview_sessions.insert_one(session.to_document())
        session.id = result.inserted_id
        return session

    return factory


@pytest.fixture
def store_answer(db):
    """Insert an answer directly, bypassing scoring."""

    async def factory(session, question_number, scores=(80, 80, 80, 80), behavior=None):
        relevance, completeness, accuracy, communication = scores
        answer = Answer(
            interview_id=session.id,
            user_id=session.user_id,
            question_number=question_number,
            question_text=session.get_question(question_number).question_text,
            answer_text=GOOD_ANSWER,
            answer_duration=60,
            ai_evaluation=AIEvaluation(
                relevance=relevance,
                completeness=completeness,
                technical_accuracy=accuracy,
                communication=communication,
                overall_score=int(sum(scores) / 4 + 0.5),
            ),
            behavioral_analysis=behavior,
        )
        result = await db.answers.insert_one(answer.to_document())
        answer.id = result.inserted_id
        return answer

    return factory
