"""OpenAI adapter for the text-evaluation collaborator.

Everything the model sends back is treated as untrusted text: the JSON
object is pulled out, validated against the collaborator schemas, and any
problem along the way surfaces as ``UpstreamServiceError``.
"""
import json
import logging
import re
from typing import List, Optional

import openai
from openai import AsyncOpenAI
from pydantic import BaseModel, ValidationError as SchemaError

from interview_grader.config import settings
from interview_grader.exceptions import UpstreamServiceError
from interview_grader.models.answer import Answer
from interview_grader.models.interview import InterviewSession
from interview_grader.schemas.evaluator import (
    EvaluationRequest,
    EvaluatorResponse,
    GeneratedQuestion,
    NarrativeResponse,
)
from interview_grader.utils.prompt_generator import (
    evaluate_answer_prompt,
    generate_questions_prompt,
    narrative_prompt,
)

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def extract_json_object(text: Optional[str]) -> dict:
    """Pull the first-to-last brace block out of a model reply and decode it."""
    if not text:
        raise UpstreamServiceError("Empty response from evaluator")
    match = _JSON_OBJECT.search(text)
    if not match:
        raise UpstreamServiceError("Invalid response format - no JSON object found")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise UpstreamServiceError(f"Evaluator returned malformed JSON: {e}") from e
    if not isinstance(data, dict):
        raise UpstreamServiceError("Evaluator returned JSON that is not an object")
    return data


def parse_model_reply(text: Optional[str], schema: type) -> BaseModel:
    """Decode a reply and validate it against ``schema``."""
    data = extract_json_object(text)
    try:
        return schema.model_validate(data)
    except SchemaError as e:
        raise UpstreamServiceError(f"Evaluator response failed validation: {e}") from e


class OpenAIEvaluator:
    """Scores answers, writes report narratives and drafts questions."""

    def __init__(self, client: Optional[AsyncOpenAI] = None, model: Optional[str] = None):
        self.client = client or AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.evaluator_timeout_seconds,
            max_retries=1,
        )
        self.model = model or settings.openai_model

    async def _complete_json(self, prompt: str, temperature: float) -> Optional[str]:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
                temperature=temperature,
            )
        except openai.OpenAIError as e:
            raise UpstreamServiceError(f"OpenAI request failed: {e}") from e

        if not response.choices:
            raise UpstreamServiceError("OpenAI returned no choices")
        return response.choices[0].message.content

    async def evaluate_answer(self, request: EvaluationRequest) -> EvaluatorResponse:
        prompt = evaluate_answer_prompt(
            question_text=request.question_text,
            answer_text=request.answer_text,
            expected_answer=request.expected_answer,
            tech_stack=request.subject_areas,
            experience_level=request.experience_level,
        )
        content = await self._complete_json(prompt, temperature=0.0)
        return parse_model_reply(content, EvaluatorResponse)

    async def write_narrative(
        self,
        session: InterviewSession,
        answers: List[Answer],
        behavioral_summary: str,
    ) -> NarrativeResponse:
        prompt = narrative_prompt(session, answers, behavioral_summary)
        content = await self._complete_json(prompt, temperature=0.3)
        return parse_model_reply(content, NarrativeResponse)

    async def generate_questions(
        self,
        tech_stack: List[str],
        hardness_level: str,
        experience_level: str,
        number_of_questions: int,
    ) -> List[GeneratedQuestion]:
        prompt = generate_questions_prompt(tech_stack, hardness_level, experience_level, number_of_questions)
        content = await self._complete_json(prompt, temperature=0.7)
        data = extract_json_object(content)

        raw_questions = data.get("questions")
        if not isinstance(raw_questions, list):
            raise UpstreamServiceError("Question generator did not return a 'questions' list")
        try:
            questions = [GeneratedQuestion.model_validate(q) for q in raw_questions]
        except SchemaError as e:
            raise UpstreamServiceError(f"Generated question failed validation: {e}") from e

        if len(questions) != number_of_questions:
            raise UpstreamServiceError(
                f"Expected {number_of_questions} questions, got {len(questions)}"
            )
        logger.info("Generated %d questions with %s", len(questions), self.model)
        return questions
