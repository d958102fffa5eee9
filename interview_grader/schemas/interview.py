"""Interview schemas."""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime

from interview_grader.models.interview import (
    MAX_QUESTIONS,
    MIN_QUESTIONS,
    ExperienceLevel,
    HardnessLevel,
    InterviewSession,
    QuestionCategory,
)


class GenerateInterviewRequest(BaseModel):
    """Request to generate a new interview."""
    tech_stack: List[str] = Field(..., min_length=1, max_length=10)
    hardness_level: HardnessLevel
    experience_level: ExperienceLevel
    number_of_questions: int = Field(5, ge=MIN_QUESTIONS, le=MAX_QUESTIONS)


class PaginationResponse(BaseModel):
    page: int
    limit: int
    total: int
    pages: int
    has_next: bool
    has_prev: bool


class QuestionResponse(BaseModel):
    """A question as shown to the candidate (without the expected answer)."""
    question_number: int
    question_text: str
    category: QuestionCategory


class InterviewSessionResponse(BaseModel):
    """Response schema for an interview."""
    id: str
    user_id: str
    tech_stack: List[str]
    hardness_level: str
    experience_level: str
    number_of_questions: int
    questions: List[QuestionResponse]
    status: str
    started_at: Optional[datetime]
    completed_at: Optional[datetime]
    duration: int
    generated_by: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_session(cls, session: InterviewSession) -> "InterviewSessionResponse":
        return cls(
            id=str(session.id),
            user_id=str(session.user_id),
            tech_stack=session.tech_stack,
            hardness_level=session.hardness_level,
            experience_level=session.experience_level,
            number_of_questions=session.number_of_questions,
            questions=[
                QuestionResponse(
                    question_number=q.question_number,
                    question_text=q.question_text,
                    category=q.category,
                )
                for q in session.questions
            ],
            status=session.status.value,
            started_at=session.started_at,
            completed_at=session.completed_at,
            duration=session.duration,
            generated_by=session.metadata.generated_by,
            created_at=session.created_at,
            updated_at=session.updated_at,
        )


class InterviewListResponse(BaseModel):
    sessions: List[InterviewSessionResponse]
    pagination: PaginationResponse


class InterviewOverviewResponse(BaseModel):
    """Distribution of a candidate's interviews."""
    total: int
    status_distribution: Dict[str, int]
    hardness_distribution: Dict[str, int]
    experience_distribution: Dict[str, int]
    average_questions: int
