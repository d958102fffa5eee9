"""Stub collaborators and builders shared by the tests."""
from typing import List, Optional

from interview_grader.models.answer import BehavioralAnalysis, EmotionDistribution
from interview_grader.models.interview import InterviewQuestion
from interview_grader.schemas.evaluator import EvaluatorResponse, NarrativeResponse

GOOD_ANSWER = (
    "A Python decorator is a function that takes another function and returns a new "
    "function, usually wrapping the original call to add behaviour such as logging."
)

QUESTION_TEXTS = [
    "What is a Python decorator and when would you use one?",
    "Explain how database indexes speed up queries.",
    "Describe how you would debug a memory leak in a service.",
    "How do you handle disagreements during code review?",
]
QUESTION_CATEGORIES = ["Technical", "Technical", "Problem Solving", "Behavioral"]


class StubEvaluator:
    """Records requests and replies with fixed scores (or raises)."""

    model = "stub-model"

    def __init__(self, reply: Optional[dict] = None, error: Optional[Exception] = None):
        self.reply = reply if reply is not None else {
            "relevance": 90, "completeness": 85, "technicalAccuracy": 88, "communication": 82,
            "overall": 10, "feedback": "Clear and accurate.", "suggestions": ["Add an example"],
        }
        self.error = error
        self.requests = []

    async def evaluate_answer(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return EvaluatorResponse.model_validate(self.reply)


class StubNarrator:
    model = "stub-model"

    def __init__(self, narrative: Optional[NarrativeResponse] = None, error: Optional[Exception] = None):
        self.narrative = narrative or NarrativeResponse(
            strengths=["Explains trade-offs well"],
            weaknesses=["Rarely mentions testing"],
            recommendations=["Practice system design questions"],
            narrative_feedback="A solid interview overall.",
        )
        self.error = error
        self.calls = 0

    async def write_narrative(self, session, answers, behavioral_summary):
        self.calls += 1
        if self.error:
            raise self.error
        return self.narrative


def behavioral(overall: float, confidence: float = 75, emotions: Optional[dict] = None) -> BehavioralAnalysis:
    return BehavioralAnalysis(
        confidence=confidence,
        eye_contact=70,
        speech_clarity=72,
        overall_score=overall,
        emotions=EmotionDistribution(**(emotions or {"neutral": 60, "happy": 30, "fear": 10})),
        feedback="ok",
        frame_count=30,
        analysis_duration=1.5,
    )


class StubBehavioralClient:
    def __init__(self, analysis: Optional[BehavioralAnalysis] = None):
        self.analysis = analysis or behavioral(80)
        self.calls = []

    async def analyze_or_fallback(self, **kwargs):
        self.calls.append(kwargs)
        return self.analysis


def make_questions(n: int = 3) -> List[InterviewQuestion]:
    return [
        InterviewQuestion(
            question_number=i + 1,
            question_text=QUESTION_TEXTS[i % len(QUESTION_TEXTS)],
            category=QUESTION_CATEGORIES[i % len(QUESTION_CATEGORIES)],
            expected_answer="Key points",
        )
        for i in range(n)
    ]
