"""Answer submission, scoring and bookkeeping."""
import logging
from datetime import datetime
from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel, Field
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from interview_grader.exceptions import DuplicateError, NotFoundError, StateError, ValidationError
from interview_grader.models.answer import (
    MAX_ANSWER_LENGTH,
    AIEvaluation,
    Answer,
    BehavioralAnalysis,
)
from interview_grader.models.common import parse_object_id
from interview_grader.models.interview import InterviewQuestion, InterviewSession, InterviewStatus
from interview_grader.schemas.evaluator import EvaluationRequest
from interview_grader.services.behavioral import aggregate_behavioral_signals
from interview_grader.services.evaluation import EvaluationConsistencyEnforcer
from interview_grader.services.quality_gate import check_answer_quality
from interview_grader.utils.helpers import average, round_score

logger = logging.getLogger(__name__)

EVALUATION_DIMENSIONS = ("relevance", "completeness", "technical_accuracy", "communication")


class AnswerSubmission(BaseModel):
    """One entry of a batch submission."""
    question_number: int
    answer_text: str
    answer_duration: int = Field(0)


def clean_answer_text(answer_text: str) -> str:
    text = (answer_text or "").strip()
    if not text:
        raise ValidationError("Answer text is required")
    if len(text) > MAX_ANSWER_LENGTH:
        raise ValidationError(f"Answer must be at most {MAX_ANSWER_LENGTH} characters")
    return text


def check_duration(duration: Optional[int]) -> int:
    duration = duration or 0
    if duration < 0:
        raise ValidationError("Answer duration must be a positive integer")
    return int(duration)


class AnswerLedger:
    """Accepts answers for in-progress interviews and keeps them consistent.

    Scoring goes quality gate -> evaluator -> consistency enforcement. At most
    one answer per (interview, user, question) is stored; the unique index is
    the final word on that, the lookup before scoring only saves an AI call.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        enforcer: EvaluationConsistencyEnforcer,
        behavioral_client=None,
    ):
        self.db = db
        self.enforcer = enforcer
        self.behavioral_client = behavioral_client

    # Scoring

    async def score_answer(self, session: InterviewSession, question: InterviewQuestion, answer_text: str) -> AIEvaluation:
        verdict = check_answer_quality(question.question_text, answer_text)
        if verdict is not None:
            logger.info(
                "Quality gate fired for interview %s Q%d: %s",
                session.id, question.question_number, verdict.reason,
            )
            return verdict.to_evaluation()

        request = EvaluationRequest(
            question_text=question.question_text,
            answer_text=answer_text,
            expected_answer=question.expected_answer,
            subject_areas=session.tech_stack,
            experience_level=session.experience_level,
        )
        return await self.enforcer.evaluate(request)

    async def _measure_behavior(
        self,
        session: InterviewSession,
        user_id,
        media_reference: str,
        duration: int,
        question_number: Optional[int] = None,
    ) -> BehavioralAnalysis:
        if self.behavioral_client is None:
            raise ValidationError("Behavioral analysis is not configured")
        return await self.behavioral_client.analyze_or_fallback(
            media_reference=media_reference,
            duration=duration,
            scope="per_answer" if question_number is not None else "whole_session",
            interview_id=str(session.id),
            user_id=str(user_id),
            question_number=question_number,
        )

    # Preconditions

    def _check_session(self, session: InterviewSession, user_id):
        if session.user_id != user_id:
            raise NotFoundError("Interview not found")
        if session.status != InterviewStatus.IN_PROGRESS:
            raise StateError("Interview is not in progress")

    def _get_question(self, session: InterviewSession, question_number: int) -> InterviewQuestion:
        question = session.get_question(question_number)
        if question is None:
            raise NotFoundError(f"Question {question_number} not found")
        return question

    async def _ensure_unanswered(self, session: InterviewSession, user_id, question_number: int):
        existing = await self.db.answers.find_one({
            "interview_id": session.id,
            "user_id": user_id,
            "question_number": question_number,
        })
        if existing:
            raise DuplicateError(f"Answer already submitted for question {question_number}")

    async def _record(
        self,
        session: InterviewSession,
        user_id,
        question_number: int,
        answer_text: str,
        answer_duration: int,
        behavioral: Optional[BehavioralAnalysis],
    ) -> Answer:
        question = self._get_question(session, question_number)
        text = clean_answer_text(answer_text)
        duration = check_duration(answer_duration)
        await self._ensure_unanswered(session, user_id, question_number)

        evaluation = await self.score_answer(session, question, text)
        answer = Answer(
            interview_id=session.id,
            user_id=user_id,
            question_number=question_number,
            question_text=question.question_text,
            answer_text=text,
            answer_duration=duration,
            ai_evaluation=evaluation,
            behavioral_analysis=behavioral,
        )
        try:
            result = await self.db.answers.insert_one(answer.to_document())
        except DuplicateKeyError as e:
            raise DuplicateError(f"Answer already submitted for question {question_number}") from e
        answer.id = result.inserted_id
        logger.info(
            "Stored answer for interview %s Q%d (overall %d, %s)",
            session.id, question_number, evaluation.overall_score, evaluation.source,
        )
        return answer

    # Public operations

    async def submit_answer(
        self,
        session: InterviewSession,
        user_id,
        question_number: int,
        answer_text: str,
        answer_duration: int = 0,
        behavioral: Optional[BehavioralAnalysis] = None,
        media_reference: Optional[str] = None,
    ) -> Answer:
        """Score and store one answer."""
        user_id = parse_object_id(user_id, "user ID")
        self._check_session(session, user_id)
        self._get_question(session, question_number)

        if behavioral is None and media_reference:
            # Validate cheaply before paying for the media analysis
            clean_answer_text(answer_text)
            await self._ensure_unanswered(session, user_id, question_number)
            behavioral = await self._measure_behavior(
                session, user_id, media_reference, check_duration(answer_duration), question_number
            )

        return await self._record(session, user_id, question_number, answer_text, answer_duration, behavioral)

    async def submit_all(
        self,
        session: InterviewSession,
        user_id,
        answers: List[AnswerSubmission],
        behavioral: Optional[BehavioralAnalysis] = None,
        media_reference: Optional[str] = None,
        total_duration: int = 0,
    ) -> List[Answer]:
        """Store a batch of answers sharing one behavioral measurement.

        Not transactional: answers are stored one by one, and if one of them
        fails the ones before it stay stored.
        """
        user_id = parse_object_id(user_id, "user ID")
        self._check_session(session, user_id)
        if not answers:
            raise ValidationError("Answers must be an array with at least one answer")

        if behavioral is None and media_reference:
            behavioral = await self._measure_behavior(
                session, user_id, media_reference, check_duration(total_duration)
            )

        created = []
        for entry in answers:
            created.append(await self._record(
                session, user_id, entry.question_number, entry.answer_text, entry.answer_duration, behavioral
            ))
        return created

    async def get_answer(self, answer_id, user_id) -> Answer:
        data = await self.db.answers.find_one({
            "_id": parse_object_id(answer_id, "answer ID"),
            "user_id": parse_object_id(user_id, "user ID"),
        })
        if not data:
            raise NotFoundError("Answer not found")
        return Answer(**data)

    async def _session_for(self, answer: Answer) -> InterviewSession:
        data = await self.db.interview_sessions.find_one({"_id": answer.interview_id})
        if not data:
            raise NotFoundError("Interview not found")
        return InterviewSession(**data)

    async def update_answer(
        self,
        answer_id,
        user_id,
        answer_text: Optional[str] = None,
        answer_duration: Optional[int] = None,
        behavioral: Optional[BehavioralAnalysis] = None,
        media_reference: Optional[str] = None,
    ) -> Answer:
        """Edit an answer while its interview is in progress.

        A new text is scored again from scratch.
        """
        answer = await self.get_answer(answer_id, user_id)
        session = await self._session_for(answer)
        self._check_session(session, answer.user_id)

        changes: Dict = {}
        if answer_text is not None:
            text = clean_answer_text(answer_text)
            question = self._get_question(session, answer.question_number)
            changes["answer_text"] = text
            changes["ai_evaluation"] = (await self.score_answer(session, question, text)).model_dump()
        if answer_duration is not None:
            changes["answer_duration"] = check_duration(answer_duration)
        if behavioral is None and media_reference:
            behavioral = await self._measure_behavior(
                session, answer.user_id, media_reference,
                changes.get("answer_duration", answer.answer_duration), answer.question_number,
            )
        if behavioral is not None:
            changes["behavioral_analysis"] = behavioral.model_dump()

        if not changes:
            return answer
        changes["updated_at"] = datetime.utcnow()

        updated = await self.db.answers.find_one_and_update(
            {"_id": answer.id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise NotFoundError("Answer not found")
        return Answer(**updated)

    async def delete_answer(self, answer_id, user_id):
        """Remove an answer while its interview is in progress."""
        answer = await self.get_answer(answer_id, user_id)
        session = await self._session_for(answer)
        self._check_session(session, answer.user_id)
        await self.db.answers.delete_one({"_id": answer.id})
        logger.info("Deleted answer %s of interview %s", answer.id, session.id)

    async def list_answers(self, session: InterviewSession, user_id) -> List[Answer]:
        """Answers for an interview, in question order."""
        cursor = self.db.answers.find({
            "interview_id": session.id,
            "user_id": parse_object_id(user_id, "user ID"),
        }).sort("question_number", 1)
        return [Answer(**data) for data in await cursor.to_list(length=None)]

    async def answer_statistics(self, session: InterviewSession, user_id) -> Dict:
        """Running averages for an interview, usable before it is completed."""
        answers = await self.list_answers(session, user_id)
        total_questions = len(session.questions)

        scores = [a.ai_evaluation.overall_score for a in answers if a.ai_evaluation.overall_score > 0]
        durations = [a.answer_duration for a in answers if a.answer_duration > 0]
        dimension_averages = {
            dimension: round_score(average(
                getattr(a.ai_evaluation, dimension) for a in answers
                if getattr(a.ai_evaluation, dimension) > 0
            ))
            for dimension in EVALUATION_DIMENSIONS
        }

        behavioral_records = [a.behavioral_analysis for a in answers]
        behavioral_summary = None
        if any(r is not None and r.overall_score > 0 for r in behavioral_records):
            behavioral_summary = aggregate_behavioral_signals(behavioral_records)

        return {
            "total_answers": len(answers),
            "average_score": round_score(average(scores)),
            "average_duration": round_score(average(durations)),
            "dimension_averages": dimension_averages,
            "behavioral_summary": behavioral_summary,
            "completion_percentage": round_score(len(answers) * 100 / total_questions) if total_questions else 0,
        }
