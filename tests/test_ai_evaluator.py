import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from interview_grader.exceptions import UpstreamServiceError
from interview_grader.models.interview import InterviewSession
from interview_grader.schemas.evaluator import EvaluationRequest
from interview_grader.services.ai_evaluator import OpenAIEvaluator, extract_json_object
from tests.helpers import GOOD_ANSWER, make_questions


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def evaluator_replying(*contents):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(side_effect=[completion(c) for c in contents])
    return OpenAIEvaluator(client=client, model="gpt-test"), client


REQUEST = EvaluationRequest(
    question_text="What is a Python decorator?",
    answer_text=GOOD_ANSWER,
    expected_answer="Wraps a function",
    subject_areas=["Python"],
    experience_level="Mid",
)


def test_extract_json_object_ignores_surrounding_text():
    assert extract_json_object('Sure! ```json\n{"a": 1}\n``` hope it helps') == {"a": 1}


@pytest.mark.parametrize("text", [None, "", "no json here", "{not json}", "[1, 2]"])
def test_extract_json_object_failures(text):
    with pytest.raises(UpstreamServiceError):
        extract_json_object(text)


async def test_evaluate_answer_validates_reply():
    reply = json.dumps({
        "relevance": 90, "completeness": 85, "technicalAccuracy": 88, "communication": 82,
        "overall": 40, "feedback": "Good", "suggestions": ["More detail"],
    })
    evaluator, client = evaluator_replying(reply)

    response = await evaluator.evaluate_answer(REQUEST)

    assert response.technical_accuracy == 88
    assert response.overall == 40
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-test"
    assert kwargs["response_format"] == {"type": "json_object"}
    assert "What is a Python decorator?" in kwargs["messages"][0]["content"]


async def test_schema_violation_becomes_upstream_error():
    evaluator, _ = evaluator_replying(json.dumps({"relevance": "very", "completeness": 1}))
    with pytest.raises(UpstreamServiceError):
        await evaluator.evaluate_answer(REQUEST)


async def test_api_error_becomes_upstream_error():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        side_effect=openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1"))
    )
    with pytest.raises(UpstreamServiceError):
        await OpenAIEvaluator(client=client).evaluate_answer(REQUEST)


async def test_write_narrative_accepts_camel_case():
    evaluator, client = evaluator_replying(json.dumps({
        "strengths": ["Clear"], "weaknesses": [], "recommendations": ["Practice"],
        "narrativeFeedback": "Well done.",
    }))
    session = InterviewSession(
        user_id="0123456789abcdef01234567",
        tech_stack=["Python"],
        number_of_questions=3,
        questions=make_questions(3),
    )

    narrative = await evaluator.write_narrative(session, [], "Behavioral analysis not available")

    assert narrative.narrative_feedback == "Well done."
    assert narrative.recommendations == ["Practice"]
    prompt = client.chat.completions.create.call_args.kwargs["messages"][0]["content"]
    assert "Do NOT produce any numeric score" in prompt


async def test_generate_questions_returns_requested_count():
    questions = [
        {"question_text": f"Question {i}?", "category": "Technical", "expected_answer": "x"}
        for i in range(3)
    ]
    evaluator, _ = evaluator_replying(json.dumps({"questions": questions}))
    generated = await evaluator.generate_questions(["Python"], "Easy", "Junior", 3)
    assert [q.question_text for q in generated] == ["Question 0?", "Question 1?", "Question 2?"]


@pytest.mark.parametrize("payload", [
    {"questions": [{"question_text": "Only one?"}]},
    {"questions": "not a list"},
    {"items": []},
])
async def test_generate_questions_rejects_wrong_shape(payload):
    evaluator, _ = evaluator_replying(json.dumps(payload))
    with pytest.raises(UpstreamServiceError):
        await evaluator.generate_questions(["Python"], "Easy", "Junior", 3)
