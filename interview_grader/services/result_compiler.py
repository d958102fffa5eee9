"""Compiles the graded report for a completed interview."""
import asyncio
import logging
import time
from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from interview_grader.config import settings
from interview_grader.exceptions import (
    DuplicateError,
    NotFoundError,
    StateError,
    UpstreamServiceError,
    ValidationError,
)
from interview_grader.models.answer import Answer
from interview_grader.models.common import parse_object_id
from interview_grader.models.interview import InterviewSession, InterviewStatus
from interview_grader.models.result import CategoryScores, FinalResult, ResultMetadata
from interview_grader.schemas.evaluator import NarrativeResponse
from interview_grader.services.behavioral import BehavioralSummary, aggregate_behavioral_signals
from interview_grader.utils.helpers import average, round_score

logger = logging.getLogger(__name__)

CATEGORY_WEIGHTS = {
    "technical_knowledge": 0.25,
    "communication": 0.20,
    "problem_solving": 0.25,
    "confidence": 0.15,
    "behavioral_signal": 0.15,
}

CATEGORY_LABELS = {
    "technical_knowledge": "Technical knowledge",
    "communication": "Communication",
    "problem_solving": "Problem solving",
    "confidence": "Confidence",
    "behavioral_signal": "Interview presence",
}

STRENGTH_THRESHOLD = 80
WEAKNESS_THRESHOLD = 60
MAX_LIST_ITEMS = 6

CATEGORY_ADVICE = {
    "technical_knowledge": "Revisit the core concepts of your stack and practice explaining them in detail",
    "communication": "Structure answers as context, approach and outcome to keep them clear",
    "problem_solving": "Answer the question that was asked and cover every part of it with specific examples",
    "confidence": "Rehearse answers out loud to build confidence under interview conditions",
    "behavioral_signal": "Practice recorded mock interviews focusing on eye contact and steady pacing",
}


def compute_category_scores(answers: List[Answer], behavioral: BehavioralSummary) -> CategoryScores:
    """Average the per-answer evaluations into the five graded categories."""
    relevance = average(a.ai_evaluation.relevance for a in answers)
    completeness = average(a.ai_evaluation.completeness for a in answers)
    return CategoryScores(
        technical_knowledge=round_score(average(a.ai_evaluation.technical_accuracy for a in answers)),
        communication=round_score(average(a.ai_evaluation.communication for a in answers)),
        problem_solving=round_score((relevance + completeness) / 2),
        confidence=behavioral.average_confidence,
        behavioral_signal=behavioral.average_overall_score,
    )


def weighted_overall(scores: CategoryScores) -> int:
    """Fixed 25/20/25/15/15 weighting of the category scores."""
    values = scores.model_dump()
    return round_score(sum(values[name] * weight for name, weight in CATEGORY_WEIGHTS.items()))


def category_strengths(scores: CategoryScores) -> List[str]:
    return [
        f"{CATEGORY_LABELS[name]} ({value}/100)"
        for name, value in scores.model_dump().items()
        if value >= STRENGTH_THRESHOLD
    ]


def category_weaknesses(scores: CategoryScores) -> List[str]:
    return [
        f"{CATEGORY_LABELS[name]} ({value}/100)"
        for name, value in scores.model_dump().items()
        if value < WEAKNESS_THRESHOLD
    ]


def merge_items(base: List[str], extra: List[str], limit: int = MAX_LIST_ITEMS) -> List[str]:
    """Append ``extra`` after ``base``, dropping blanks and case-insensitive repeats."""
    merged, seen = [], set()
    for item in list(base) + list(extra or []):
        text = (item or "").strip()
        if not text or text.lower() in seen:
            continue
        seen.add(text.lower())
        merged.append(text)
        if len(merged) == limit:
            break
    return merged


def local_narrative(scores: CategoryScores, overall: int, answered: int, total: int) -> NarrativeResponse:
    """Deterministic narrative used when the collaborator is unavailable."""
    values = scores.model_dump()
    weak = [name for name, value in values.items() if value < 70]
    recommendations = [CATEGORY_ADVICE[name] for name in weak]
    if not recommendations:
        recommendations = ["Keep practicing with harder questions to stretch your strongest areas"]
    recommendations.append("Continue learning and practicing")

    best = max(values, key=lambda name: values[name])
    worst = min(values, key=lambda name: values[name])
    feedback = (
        f"You completed {answered} out of {total} questions with an overall score of {overall}/100. "
        f"Your strongest area was {CATEGORY_LABELS[best].lower()} ({values[best]}/100) "
        f"and the area with most room for improvement was {CATEGORY_LABELS[worst].lower()} "
        f"({values[worst]}/100). Focus on giving comprehensive answers backed by specific examples."
    )
    return NarrativeResponse(recommendations=recommendations, narrative_feedback=feedback)


class ResultCompiler:
    """Builds and stores exactly one FinalResult per completed interview.

    Every number in the report is computed here. The narrator (normally
    :class:`~interview_grader.services.ai_evaluator.OpenAIEvaluator`) only
    contributes recommendations, prose and extra strengths/weaknesses.
    """

    def __init__(self, db: AsyncIOMotorDatabase, narrator=None, timeout: Optional[float] = None):
        self.db = db
        self.narrator = narrator
        self.timeout = timeout if timeout is not None else settings.evaluator_timeout_seconds

    async def _answers(self, session: InterviewSession, user_id) -> List[Answer]:
        cursor = self.db.answers.find({"interview_id": session.id, "user_id": user_id}).sort("question_number", 1)
        return [Answer(**data) for data in await cursor.to_list(length=None)]

    async def _narrate(self, session, answers, behavioral, scores, overall):
        """Returns (narrative, source)."""
        if self.narrator is not None:
            try:
                narrative = await asyncio.wait_for(
                    self.narrator.write_narrative(session, answers, behavioral.describe()),
                    timeout=self.timeout,
                )
                return narrative, "evaluator"
            except asyncio.TimeoutError:
                logger.warning("Narrative generation timed out, using local narrative")
            except UpstreamServiceError as e:
                logger.warning("Narrative generation failed (%s), using local narrative", e)
        return local_narrative(scores, overall, len(answers), len(session.questions)), "local"

    async def generate_result(self, session: InterviewSession, user_id) -> Dict:
        """Grade a completed interview.

        Returns ``{"result": FinalResult, "behavioral_summary": BehavioralSummary}``.
        """
        started = time.monotonic()
        user_id = parse_object_id(user_id, "user ID")
        if session.user_id != user_id:
            raise NotFoundError("Interview not found")
        if session.status != InterviewStatus.COMPLETED:
            raise StateError("Interview must be completed before generating results")

        existing = await self.db.final_results.find_one({"interview_id": session.id, "user_id": user_id})
        if existing:
            raise DuplicateError("Final result already exists for this interview")

        answers = await self._answers(session, user_id)
        if not answers:
            raise ValidationError("No answers found for this interview")

        behavioral = aggregate_behavioral_signals(a.behavioral_analysis for a in answers)
        scores = compute_category_scores(answers, behavioral)
        overall = weighted_overall(scores)

        narrative, narrative_source = await self._narrate(session, answers, behavioral, scores, overall)

        result = FinalResult(
            interview_id=session.id,
            user_id=user_id,
            overall_score=overall,
            category_scores=scores,
            strengths=merge_items(category_strengths(scores), narrative.strengths),
            weaknesses=merge_items(category_weaknesses(scores), narrative.weaknesses),
            recommendations=merge_items([], narrative.recommendations),
            detailed_feedback=narrative.narrative_feedback,
            completion_time=session.duration or 0,
            questions_answered=len(answers),
            total_questions=len(session.questions),
            metadata=ResultMetadata(
                ai_model=getattr(self.narrator, "model", None),
                narrative_source=narrative_source,
                processing_time=int((time.monotonic() - started) * 1000),
            ),
        )

        try:
            inserted = await self.db.final_results.insert_one(result.to_document())
        except DuplicateKeyError as e:
            raise DuplicateError("Final result already exists for this interview") from e
        result.id = inserted.inserted_id

        logger.info(
            "Stored result %s for interview %s: overall %d (%s)",
            result.id, session.id, result.overall_score, result.grade,
        )
        return {"result": result, "behavioral_summary": behavioral}

    async def get_result(self, session: InterviewSession, user_id) -> Dict:
        """Stored result of an interview with a fresh behavioral summary."""
        user_id = parse_object_id(user_id, "user ID")
        data = await self.db.final_results.find_one({"interview_id": session.id, "user_id": user_id})
        if not data:
            raise NotFoundError("Final result not found for this interview")

        answers = await self._answers(session, user_id)
        return {
            "result": FinalResult(**data),
            "answers_count": len(answers),
            "behavioral_summary": aggregate_behavioral_signals(a.behavioral_analysis for a in answers),
        }
