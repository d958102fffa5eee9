"""Answer schemas."""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime

from interview_grader.models.answer import AIEvaluation, Answer, BehavioralAnalysis
from interview_grader.services.answer_ledger import AnswerSubmission
from interview_grader.services.behavioral import BehavioralSummary


class SubmitAnswerRequest(BaseModel):
    """Request to submit one answer.

    Either a ready ``behavioral_analysis`` or a ``media_reference`` for the
    behavioral service may be given.
    """
    interview_id: str
    question_number: int = Field(..., ge=1)
    answer_text: str
    answer_duration: int = 0
    behavioral_analysis: Optional[BehavioralAnalysis] = None
    media_reference: Optional[str] = None


class SubmitAllAnswersRequest(BaseModel):
    """Request to submit every answer of an interview at once."""
    interview_id: str
    answers: List[AnswerSubmission]
    behavioral_analysis: Optional[BehavioralAnalysis] = None
    media_reference: Optional[str] = None
    total_duration: int = 0


class UpdateAnswerRequest(BaseModel):
    answer_text: Optional[str] = None
    answer_duration: Optional[int] = None
    behavioral_analysis: Optional[BehavioralAnalysis] = None
    media_reference: Optional[str] = None


class AnswerResponse(BaseModel):
    """Response schema for answer."""
    id: str
    interview_id: str
    user_id: str
    question_number: int
    question_text: str
    answer_text: str
    answer_duration: int
    ai_evaluation: AIEvaluation
    behavioral_analysis: Optional[BehavioralAnalysis]
    submitted_at: datetime
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_answer(cls, answer: Answer) -> "AnswerResponse":
        return cls(
            id=str(answer.id),
            interview_id=str(answer.interview_id),
            user_id=str(answer.user_id),
            question_number=answer.question_number,
            question_text=answer.question_text,
            answer_text=answer.answer_text,
            answer_duration=answer.answer_duration,
            ai_evaluation=answer.ai_evaluation,
            behavioral_analysis=answer.behavioral_analysis,
            submitted_at=answer.submitted_at,
            created_at=answer.created_at,
            updated_at=answer.updated_at,
        )


class SubmitAllAnswersResponse(BaseModel):
    answers: List[AnswerResponse]
    total_submitted: int


class AnswerListResponse(BaseModel):
    answers: List[AnswerResponse]
    total_answers: int
    total_questions: int
    completion_percentage: int


class AnswerStatsResponse(BaseModel):
    """Running statistics for an interview's answers."""
    total_answers: int
    average_score: int
    average_duration: int
    dimension_averages: Dict[str, int]
    behavioral_summary: Optional[BehavioralSummary]
    completion_percentage: int
