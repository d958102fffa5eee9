import pytest
from bson import ObjectId

from interview_grader.exceptions import NotFoundError
from interview_grader.services.behavioral import aggregate_behavioral_signals
from interview_grader.services.behavioral_report import BehavioralReports, behavioral_insights
from tests.helpers import behavioral


async def test_interview_report(db, user_id, make_session, store_answer):
    session = await make_session(user_id, n=4)
    await store_answer(session, 1, behavior=behavioral(80, confidence=60))
    await store_answer(session, 2, behavior=behavioral(80, confidence=70))
    await store_answer(session, 3, behavior=behavioral(80, confidence=90, emotions={"happy": 70, "neutral": 20}))
    await store_answer(session, 4)

    report = await BehavioralReports(db).interview_report(session, user_id)

    assert report["analyzed_questions"] == 3
    assert report["total_questions"] == 4
    assert report["analysis_completeness"] == 75
    assert report["summary"].average_confidence == 73
    assert report["summary"].dominant_emotion == "neutral"
    assert [q["question_number"] for q in report["question_breakdown"]] == [1, 2, 3]
    assert [p["dominant_emotion"] for p in report["timeline"]] == ["neutral", "neutral", "happy"]
    assert [p["position"] for p in report["timeline"]] == [1, 2, 3]

    by_category = {i["category"]: i for i in report["insights"]}
    assert by_category["confidence"]["type"] == "improvement"
    assert by_category["emotions"]["type"] == "strength"
    assert by_category["trend"]["trend"] == "improving"


async def test_declining_confidence_is_reported(db, user_id, make_session, store_answer):
    session = await make_session(user_id, n=3)
    await store_answer(session, 1, behavior=behavioral(80, confidence=90))
    await store_answer(session, 2, behavior=behavioral(80, confidence=50))

    report = await BehavioralReports(db).interview_report(session, user_id)

    trend = [i for i in report["insights"] if i["category"] == "trend"]
    assert trend == [{
        "type": "concern",
        "category": "trend",
        "message": "Confidence decreased during the interview, consider pacing strategies",
        "trend": "declining",
    }]


async def test_interview_without_measurements(db, user_id, make_session, store_answer):
    session = await make_session(user_id)
    await store_answer(session, 1)

    with pytest.raises(NotFoundError):
        await BehavioralReports(db).interview_report(session, user_id)


def test_insights_for_a_single_answer():
    summary = aggregate_behavioral_signals([behavioral(80, confidence=85)])

    insights = behavioral_insights(summary, [85])

    assert [(i["category"], i["type"]) for i in insights] == [
        ("confidence", "strength"),
        ("eye_contact", "improvement"),
        ("speech_clarity", "improvement"),
        ("emotions", "strength"),
    ]
    assert insights[0]["score"] == 85


async def test_user_summary(db, user_id, make_session, store_answer):
    first = await make_session(user_id)
    second = await make_session(user_id)
    stranger = await make_session(ObjectId())
    await store_answer(first, 1, behavior=behavioral(70, confidence=60))
    await store_answer(first, 2, behavior=behavioral(90, confidence=80))
    await store_answer(first, 3)
    await store_answer(second, 1, behavior=behavioral(80, confidence=90))
    await store_answer(stranger, 1, behavior=behavioral(10, confidence=10))

    data = await BehavioralReports(db).user_summary(user_id)

    assert data["total_interviews_analyzed"] == 2
    assert data["total_questions_analyzed"] == 3
    assert data["overall_average_confidence"] == 77
    assert data["overall_average_score"] == 80
    summaries = {s["interview_id"]: s for s in data["interview_summaries"]}
    assert summaries[first.id]["average_confidence"] == 70
    assert summaries[first.id]["questions_analyzed"] == 2
    assert summaries[second.id]["average_overall_score"] == 80


async def test_user_summary_limit(db, user_id, make_session, store_answer):
    session = await make_session(user_id)
    await store_answer(session, 1, behavior=behavioral(70))
    await store_answer(session, 2, behavior=behavioral(90))

    data = await BehavioralReports(db).user_summary(user_id, limit=1)

    assert data["total_questions_analyzed"] == 1
    assert data["limit_applied"] == 1


async def test_user_summary_without_measurements(db, user_id):
    with pytest.raises(NotFoundError):
        await BehavioralReports(db).user_summary(user_id)


async def test_compare_interviews(db, user_id, make_session, store_answer):
    first = await make_session(user_id)
    second = await make_session(user_id)
    await store_answer(first, 1, behavior=behavioral(60, confidence=60))
    await store_answer(second, 1, behavior=behavioral(80, confidence=75))

    data = await BehavioralReports(db).compare_interviews(str(first.id), second.id, user_id)

    assert data["changes"] == {"confidence": 15, "eye_contact": 0, "speech_clarity": 0, "overall_score": 20}
    assert data["improvements"] == ["confidence", "overall_score"]
    assert data["declines"] == []
    assert data["overall_improvement"] is True
    assert data["interview1"]["metrics"]["confidence"] == 60
    assert data["interview2"]["questions_analyzed"] == 1


async def test_compare_needs_measurements_on_both_sides(db, user_id, make_session, store_answer):
    first = await make_session(user_id)
    second = await make_session(user_id)
    await store_answer(first, 1, behavior=behavioral(60))
    await store_answer(second, 1)

    with pytest.raises(NotFoundError):
        await BehavioralReports(db).compare_interviews(first.id, second.id, user_id)


async def test_compare_is_owner_scoped(db, user_id, make_session, store_answer):
    mine = await make_session(user_id)
    theirs = await make_session(ObjectId())
    await store_answer(mine, 1, behavior=behavioral(60))
    await store_answer(theirs, 1, behavior=behavioral(60))

    with pytest.raises(NotFoundError):
        await BehavioralReports(db).compare_interviews(mine.id, theirs.id, user_id)
