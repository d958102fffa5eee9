import json

import httpx
import pytest

from interview_grader.exceptions import UpstreamServiceError
from interview_grader.services.behavioral_client import (
    BehavioralAnalysisClient,
    fallback_behavioral_analysis,
    process_analysis,
)

PAYLOAD = {
    "confidence": 82.4,
    "eye_contact": 75,
    "speech_clarity": 79.5,
    "overall_score": 78,
    "emotions": {"happy": 40, "neutral": 50, "fear": 10},
    "feedback": "Steady delivery.",
    "frame_count": 120,
    "analysis_duration": 4.2,
}


def client_for(handler):
    return BehavioralAnalysisClient(
        base_url="http://behavioral.test", timeout=1, transport=httpx.MockTransport(handler)
    )


def test_process_analysis_rounds_and_maps_fields():
    analysis = process_analysis(PAYLOAD)
    assert analysis.confidence == 82
    assert analysis.speech_clarity == 80
    assert analysis.emotions.neutral == 50
    assert analysis.emotions.angry == 0
    assert analysis.frame_count == 120
    assert not analysis.is_fallback


@pytest.mark.parametrize("bad", [
    ["not", "a", "dict"],
    {**PAYLOAD, "confidence": "high"},
    {**PAYLOAD, "emotions": "sad"},
    {**PAYLOAD, "frame_count": "many"},
    {**PAYLOAD, "frame_count": -3},
    {**PAYLOAD, "analysis_duration": [1, 2]},
    {**PAYLOAD, "feedback": {"text": "x"}},
])
def test_process_analysis_rejects_bad_payloads(bad):
    with pytest.raises(UpstreamServiceError):
        process_analysis(bad)


async def test_per_answer_scope_posts_to_answer_endpoint():
    seen = {}

    def handler(request: httpx.Request):
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=PAYLOAD)

    analysis = await client_for(handler).analyze(
        media_reference="s3://bucket/clip.webm",
        duration=45,
        scope="per_answer",
        interview_id="abc",
        user_id="def",
        question_number=2,
    )

    assert seen["path"] == "/facial-analysis"
    assert seen["body"]["question_number"] == 2
    assert seen["body"]["analysis_type"] == "per_answer"
    assert analysis.overall_score == 78


async def test_whole_session_scope_posts_to_session_endpoint():
    seen = {}

    def handler(request: httpx.Request):
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=PAYLOAD)

    await client_for(handler).analyze(
        media_reference="s3://bucket/session.webm",
        duration=600,
        scope="whole_session",
        interview_id="abc",
        user_id="def",
    )
    assert seen["path"] == "/facial-analysis/session"
    assert "question_number" not in seen["body"]


async def test_http_error_becomes_upstream_error():
    client = client_for(lambda request: httpx.Response(500, text="crashed"))
    with pytest.raises(UpstreamServiceError):
        await client.analyze(
            media_reference="x", duration=1, scope="per_answer", interview_id="a", user_id="b"
        )


async def test_fallback_when_service_unreachable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    analysis = await client_for(handler).analyze_or_fallback(
        media_reference="x", duration=1, scope="per_answer", interview_id="a", user_id="b"
    )
    assert analysis == fallback_behavioral_analysis()
    assert analysis.is_fallback
    assert (analysis.confidence, analysis.eye_contact, analysis.speech_clarity, analysis.overall_score) == (
        70, 65, 70, 68
    )


async def test_fallback_on_invalid_json():
    analysis = await client_for(lambda request: httpx.Response(200, text="<html>")).analyze_or_fallback(
        media_reference="x", duration=1, scope="per_answer", interview_id="a", user_id="b"
    )
    assert analysis.is_fallback


async def test_health_check_reports_down_instead_of_raising():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    assert (await client_for(handler).health_check())["status"] == "down"
    healthy = client_for(lambda request: httpx.Response(200, json={"status": "ok"}))
    assert await healthy.health_check() == {"status": "ok"}


@pytest.mark.parametrize("field,value", [
    ("frame_count", "many"),
    ("analysis_duration", [1, 2]),
    ("feedback", {"text": "x"}),
    ("emotions", {"happy": "lots"}),
])
async def test_fallback_on_malformed_fields(field, value):
    client = client_for(lambda request: httpx.Response(200, json={**PAYLOAD, field: value}))

    analysis = await client.analyze_or_fallback(
        media_reference="x", duration=1, scope="per_answer", interview_id="a", user_id="b"
    )

    assert analysis.is_fallback
    assert analysis == fallback_behavioral_analysis()
