"""Behavioral reports: one interview in detail, a candidate's history, and comparisons."""
import logging
import math
from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from interview_grader.exceptions import NotFoundError
from interview_grader.models.answer import EMOTION_CHANNELS, Answer, EmotionDistribution
from interview_grader.models.common import parse_object_id
from interview_grader.models.interview import InterviewSession
from interview_grader.services.behavioral import BehavioralSummary, aggregate_behavioral_signals
from interview_grader.services.interview_service import InterviewService
from interview_grader.utils.helpers import average, round_score

logger = logging.getLogger(__name__)

# Confidence must move by more than this between halves to count as a trend
TREND_MARGIN = 5

COMPARED_METRICS = {
    "confidence": "average_confidence",
    "eye_contact": "average_eye_contact",
    "speech_clarity": "average_speech_clarity",
    "overall_score": "average_overall_score",
}


def dominant_emotion(emotions: EmotionDistribution) -> str:
    """Strongest channel of one measurement; the first channel wins ties."""
    return max(EMOTION_CHANNELS, key=lambda channel: getattr(emotions, channel))


def _insight(kind: str, category: str, message: str, **extra) -> Dict:
    return {"type": kind, "category": category, "message": message, **extra}


def behavioral_insights(summary: BehavioralSummary, confidences: List[float]) -> List[Dict]:
    """Strengths, improvement areas and concerns for one interview.

    ``confidences`` are the per-answer confidence values in question order;
    they drive the trend insight.
    """
    insights = []

    confidence = summary.average_confidence
    if confidence >= 80:
        insights.append(_insight(
            "strength", "confidence",
            "Excellent confidence levels maintained throughout the interview", score=confidence,
        ))
    elif confidence >= 60:
        insights.append(_insight(
            "improvement", "confidence",
            "Good confidence with room for improvement in certain areas", score=confidence,
        ))
    else:
        insights.append(_insight(
            "concern", "confidence",
            "Consider working on building confidence for future interviews", score=confidence,
        ))

    eye_contact = summary.average_eye_contact
    if eye_contact >= 75:
        insights.append(_insight(
            "strength", "eye_contact",
            "Maintained excellent eye contact with the interviewer", score=eye_contact,
        ))
    elif eye_contact >= 50:
        insights.append(_insight(
            "improvement", "eye_contact",
            "Good eye contact, try to maintain it more consistently", score=eye_contact,
        ))
    else:
        insights.append(_insight(
            "concern", "eye_contact",
            "Focus on maintaining better eye contact with the interviewer", score=eye_contact,
        ))

    clarity = summary.average_speech_clarity
    if clarity >= 75:
        insights.append(_insight(
            "strength", "speech_clarity",
            "Speech was clear and well-articulated throughout", score=clarity,
        ))
    else:
        insights.append(_insight(
            "improvement", "speech_clarity",
            "Work on speaking more clearly and at an appropriate pace", score=clarity,
        ))

    emotion = summary.dominant_emotion
    if emotion in ("happy", "neutral"):
        insights.append(_insight(
            "strength", "emotions", "Maintained a positive and professional demeanor", emotion=emotion,
        ))
    elif emotion in ("fear", "sad"):
        insights.append(_insight(
            "improvement", "emotions",
            "Try to project more confidence and positivity during interviews", emotion=emotion,
        ))

    if len(confidences) > 1:
        middle = math.ceil(len(confidences) / 2)
        first_half = average(confidences[:middle])
        second_half = average(confidences[middle:])
        if second_half > first_half + TREND_MARGIN:
            insights.append(_insight(
                "strength", "trend", "Confidence improved as the interview progressed", trend="improving",
            ))
        elif first_half > second_half + TREND_MARGIN:
            insights.append(_insight(
                "concern", "trend",
                "Confidence decreased during the interview, consider pacing strategies", trend="declining",
            ))

    return insights


def summary_metrics(summary: BehavioralSummary) -> Dict[str, int]:
    return {metric: getattr(summary, field) for metric, field in COMPARED_METRICS.items()}


class BehavioralReports:
    """Read-only views over the behavioral measurements stored with answers."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.interviews = InterviewService(db)

    async def _measured_answers(self, query: Dict, limit: Optional[int] = None, sort=None) -> List[Answer]:
        cursor = self.db.answers.find({**query, "behavioral_analysis": {"$ne": None}})
        cursor = cursor.sort(*(sort or ("question_number", 1)))
        if limit:
            cursor = cursor.limit(limit)
        return [Answer(**data) for data in await cursor.to_list(length=None)]

    async def interview_report(self, session: InterviewSession, user_id) -> Dict:
        """Per-question breakdown, timeline and insights for one interview."""
        answers = await self._measured_answers({
            "interview_id": session.id,
            "user_id": parse_object_id(user_id, "user ID"),
        })
        if not answers:
            raise NotFoundError("No behavioral analysis data found for this interview")

        summary = aggregate_behavioral_signals(a.behavioral_analysis for a in answers)
        breakdown = [
            {
                "question_number": a.question_number,
                "question_text": a.question_text,
                "answer_duration": a.answer_duration,
                "behavioral_analysis": a.behavioral_analysis,
                "submitted_at": a.submitted_at,
            }
            for a in answers
        ]
        timeline = [
            {
                "question_number": a.question_number,
                "position": position,
                "confidence": round_score(a.behavioral_analysis.confidence),
                "eye_contact": round_score(a.behavioral_analysis.eye_contact),
                "speech_clarity": round_score(a.behavioral_analysis.speech_clarity),
                "dominant_emotion": dominant_emotion(a.behavioral_analysis.emotions),
            }
            for position, a in enumerate(answers, start=1)
        ]
        confidences = [a.behavioral_analysis.confidence for a in answers]

        return {
            "interview_id": session.id,
            "tech_stack": session.tech_stack,
            "hardness_level": session.hardness_level,
            "experience_level": session.experience_level,
            "total_questions": session.number_of_questions,
            "analyzed_questions": len(answers),
            "summary": summary,
            "question_breakdown": breakdown,
            "timeline": timeline,
            "insights": behavioral_insights(summary, confidences),
            "analysis_completeness": round_score(len(answers) * 100 / session.number_of_questions),
        }

    async def user_summary(self, user_id, limit: int = 10) -> Dict:
        """Averages over the candidate's most recent measured answers, grouped by interview."""
        user_id = parse_object_id(user_id, "user ID")
        answers = await self._measured_answers({"user_id": user_id}, limit=limit, sort=("created_at", -1))
        if not answers:
            raise NotFoundError("No behavioral analysis data found for this user")

        groups: Dict = {}
        for answer in answers:
            groups.setdefault(answer.interview_id, []).append(answer)

        cursor = self.db.interview_sessions.find({"_id": {"$in": list(groups)}, "user_id": user_id})
        sessions = {data["_id"]: InterviewSession(**data) for data in await cursor.to_list(length=None)}

        interview_summaries = []
        for interview_id, group in groups.items():
            session = sessions.get(interview_id)
            if session is None:
                logger.warning("Answers reference missing interview %s", interview_id)
                continue
            summary = aggregate_behavioral_signals(a.behavioral_analysis for a in group)
            interview_summaries.append({
                "interview_id": interview_id,
                "interview_date": session.created_at,
                "tech_stack": session.tech_stack,
                "hardness_level": session.hardness_level,
                "questions_analyzed": len(group),
                "average_confidence": summary.average_confidence,
                "average_overall_score": summary.average_overall_score,
            })

        overall = aggregate_behavioral_signals(a.behavioral_analysis for a in answers)
        return {
            "total_interviews_analyzed": len(groups),
            "total_questions_analyzed": len(answers),
            "overall_average_confidence": overall.average_confidence,
            "overall_average_score": overall.average_overall_score,
            "interview_summaries": interview_summaries,
            "limit_applied": limit,
        }

    async def compare_interviews(self, first_id, second_id, user_id) -> Dict:
        """How the second interview's behavioral averages differ from the first's."""
        first = await self.interviews.get_session(first_id, user_id)
        second = await self.interviews.get_session(second_id, user_id)
        owner = parse_object_id(user_id, "user ID")

        first_answers = await self._measured_answers({"interview_id": first.id, "user_id": owner})
        second_answers = await self._measured_answers({"interview_id": second.id, "user_id": owner})
        if not first_answers or not second_answers:
            raise NotFoundError("Behavioral analysis data not found for one or both interviews")

        before = summary_metrics(aggregate_behavioral_signals(a.behavioral_analysis for a in first_answers))
        after = summary_metrics(aggregate_behavioral_signals(a.behavioral_analysis for a in second_answers))
        changes = {metric: after[metric] - before[metric] for metric in COMPARED_METRICS}

        return {
            "interview1": {"id": first.id, "metrics": before, "questions_analyzed": len(first_answers)},
            "interview2": {"id": second.id, "metrics": after, "questions_analyzed": len(second_answers)},
            "changes": changes,
            "improvements": [metric for metric, delta in changes.items() if delta > 0],
            "declines": [metric for metric, delta in changes.items() if delta < 0],
            "overall_improvement": changes["overall_score"] > 0,
            "time_difference": int((second.created_at - first.created_at).total_seconds()),
        }
