"""Validation and normalization of evaluator scores."""
import asyncio
import logging
from typing import Any, Optional

from pydantic import ValidationError as SchemaError

from interview_grader.config import settings
from interview_grader.exceptions import UpstreamServiceError
from interview_grader.models.answer import AIEvaluation
from interview_grader.schemas.evaluator import EvaluationRequest, EvaluatorResponse
from interview_grader.utils.helpers import average, round_score

logger = logging.getLogger(__name__)

SHORT_ANSWER_LENGTH = 20
SHORT_ANSWER_CAPS = {
    "relevance": 40,
    "completeness": 30,
    "technical_accuracy": 25,
    "communication": 35,
}


def fallback_evaluation() -> AIEvaluation:
    """Conservative scores used whenever the evaluator cannot be trusted."""
    return AIEvaluation(
        relevance=30,
        completeness=25,
        technical_accuracy=22,
        communication=35,
        overall_score=28,
        feedback=(
            "Automatic evaluation was unavailable for this answer, so a conservative "
            "score was recorded. Review the question and make sure your answer covers "
            "the key concepts with concrete examples."
        ),
        suggestions=[
            "Provide more specific examples",
            "Include technical details where relevant",
            "Structure your answer more clearly",
        ],
        source="fallback",
    )


def normalize_evaluation(raw: Any, answer_text: str) -> AIEvaluation:
    """Turn an evaluator reply into a stored evaluation.

    The reported overall score is ignored; it is always recomputed from the
    four sub-scores, after capping them for very short answers.
    """
    try:
        response = raw if isinstance(raw, EvaluatorResponse) else EvaluatorResponse.model_validate(raw)
    except SchemaError as e:
        raise UpstreamServiceError(f"Malformed evaluator response: {e}") from e

    scores = {
        "relevance": response.relevance,
        "completeness": response.completeness,
        "technical_accuracy": response.technical_accuracy,
        "communication": response.communication,
    }
    # Re-checked here as well; ``raw`` may have been built without validation
    for name, value in scores.items():
        if not 0 <= value <= 100:
            raise UpstreamServiceError(f"Evaluator score '{name}' out of range: {value}")

    if len((answer_text or "").strip()) < SHORT_ANSWER_LENGTH:
        scores = {name: min(value, SHORT_ANSWER_CAPS[name]) for name, value in scores.items()}

    return AIEvaluation(
        **scores,
        overall_score=round_score(average(scores.values())),
        feedback=response.feedback,
        suggestions=response.suggestions,
        source="evaluator",
    )


class EvaluationConsistencyEnforcer:
    """Calls the evaluator under a timeout and normalizes what comes back.

    ``evaluator`` is anything with an async ``evaluate_answer(request)``
    method, normally :class:`~interview_grader.services.ai_evaluator.OpenAIEvaluator`.
    It must report every collaborator failure as
    :class:`~interview_grader.exceptions.UpstreamServiceError`; only that and
    timeouts are replaced with the fallback evaluation. Any other exception is
    a bug in the evaluator and propagates.
    """

    def __init__(self, evaluator, timeout: Optional[float] = None):
        self.evaluator = evaluator
        self.timeout = timeout if timeout is not None else settings.evaluator_timeout_seconds

    async def evaluate(self, request: EvaluationRequest) -> AIEvaluation:
        try:
            raw = await asyncio.wait_for(self.evaluator.evaluate_answer(request), timeout=self.timeout)
            return normalize_evaluation(raw, request.answer_text)
        except asyncio.TimeoutError:
            logger.warning("Evaluator timed out after %ss, using fallback evaluation", self.timeout)
        except UpstreamServiceError as e:
            logger.warning("Evaluator failed (%s), using fallback evaluation", e)
        return fallback_evaluation()
