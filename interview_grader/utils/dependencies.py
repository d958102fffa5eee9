"""Authentication and service dependencies."""
from functools import lru_cache

import jwt
from bson import ObjectId
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from motor.motor_asyncio import AsyncIOMotorDatabase

from interview_grader.config import settings
from interview_grader.database import get_db
from interview_grader.services.ai_evaluator import OpenAIEvaluator
from interview_grader.services.analytics import ResultAnalytics
from interview_grader.services.answer_ledger import AnswerLedger
from interview_grader.services.behavioral_client import BehavioralAnalysisClient
from interview_grader.services.behavioral_report import BehavioralReports
from interview_grader.services.evaluation import EvaluationConsistencyEnforcer
from interview_grader.services.interview_service import InterviewService
from interview_grader.services.lifecycle import InterviewLifecycle
from interview_grader.services.result_compiler import ResultCompiler


security = HTTPBearer()


def decode_token(token: str):
    """Decode a bearer token, returning None when it is invalid or expired."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.InvalidTokenError:
        return None


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> ObjectId:
    """Get the authenticated candidate's id from the JWT ``sub`` claim."""
    payload = decode_token(credentials.credentials)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if not user_id or not ObjectId.is_valid(user_id):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )
    return ObjectId(user_id)


@lru_cache
def get_text_evaluator() -> OpenAIEvaluator:
    return OpenAIEvaluator()


@lru_cache
def get_behavioral_client() -> BehavioralAnalysisClient:
    return BehavioralAnalysisClient()


def get_interview_service(
    db: AsyncIOMotorDatabase = Depends(get_db),
    evaluator: OpenAIEvaluator = Depends(get_text_evaluator),
) -> InterviewService:
    return InterviewService(db, question_generator=evaluator)


def get_lifecycle(db: AsyncIOMotorDatabase = Depends(get_db)) -> InterviewLifecycle:
    return InterviewLifecycle(db)


def get_answer_ledger(
    db: AsyncIOMotorDatabase = Depends(get_db),
    evaluator: OpenAIEvaluator = Depends(get_text_evaluator),
    behavioral_client: BehavioralAnalysisClient = Depends(get_behavioral_client),
) -> AnswerLedger:
    return AnswerLedger(db, EvaluationConsistencyEnforcer(evaluator), behavioral_client)


def get_result_compiler(
    db: AsyncIOMotorDatabase = Depends(get_db),
    evaluator: OpenAIEvaluator = Depends(get_text_evaluator),
) -> ResultCompiler:
    return ResultCompiler(db, narrator=evaluator)


def get_result_analytics(db: AsyncIOMotorDatabase = Depends(get_db)) -> ResultAnalytics:
    return ResultAnalytics(db)


def get_behavioral_reports(db: AsyncIOMotorDatabase = Depends(get_db)) -> BehavioralReports:
    return BehavioralReports(db)
