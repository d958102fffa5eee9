"""Behavioral report schemas."""
from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import datetime

from interview_grader.models.answer import BehavioralAnalysis
from interview_grader.services.behavioral import BehavioralSummary


class QuestionBehavior(BaseModel):
    question_number: int
    question_text: str
    answer_duration: int
    behavioral_analysis: BehavioralAnalysis
    submitted_at: datetime


class TimelinePoint(BaseModel):
    question_number: int
    position: int
    confidence: int
    eye_contact: int
    speech_clarity: int
    dominant_emotion: str


class BehavioralInsight(BaseModel):
    type: str
    category: str
    message: str
    score: Optional[int] = None
    emotion: Optional[str] = None
    trend: Optional[str] = None


class InterviewBehaviorResponse(BaseModel):
    """Behavioral report for one interview."""
    interview_id: str
    tech_stack: List[str]
    hardness_level: str
    experience_level: str
    total_questions: int
    analyzed_questions: int
    summary: BehavioralSummary
    question_breakdown: List[QuestionBehavior]
    timeline: List[TimelinePoint]
    insights: List[BehavioralInsight]
    analysis_completeness: int

    @classmethod
    def from_report(cls, report: Dict) -> "InterviewBehaviorResponse":
        return cls(**{**report, "interview_id": str(report["interview_id"])})


class InterviewBehaviorSummary(BaseModel):
    interview_id: str
    interview_date: datetime
    tech_stack: List[str]
    hardness_level: str
    questions_analyzed: int
    average_confidence: int
    average_overall_score: int


class UserBehaviorSummaryResponse(BaseModel):
    total_interviews_analyzed: int
    total_questions_analyzed: int
    overall_average_confidence: int
    overall_average_score: int
    interview_summaries: List[InterviewBehaviorSummary]
    limit_applied: int

    @classmethod
    def from_summary(cls, data: Dict) -> "UserBehaviorSummaryResponse":
        summaries = [{**s, "interview_id": str(s["interview_id"])} for s in data["interview_summaries"]]
        return cls(**{**data, "interview_summaries": summaries})


class InterviewBehaviorMetrics(BaseModel):
    id: str
    metrics: Dict[str, int]
    questions_analyzed: int


class BehaviorComparisonResponse(BaseModel):
    interview1: InterviewBehaviorMetrics
    interview2: InterviewBehaviorMetrics
    changes: Dict[str, int]
    improvements: List[str]
    declines: List[str]
    overall_improvement: bool
    time_difference: int

    @classmethod
    def from_comparison(cls, data: Dict) -> "BehaviorComparisonResponse":
        return cls(**{
            **data,
            "interview1": {**data["interview1"], "id": str(data["interview1"]["id"])},
            "interview2": {**data["interview2"], "id": str(data["interview2"]["id"])},
        })
