"""Final result models."""
from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import List, Optional
from datetime import datetime
from bson import ObjectId
from interview_grader.models.common import PyObjectId
from interview_grader.utils.helpers import round_score

# (threshold, grade), checked top-down
GRADE_LADDER = [
    (95, "A+"),
    (90, "A"),
    (85, "B+"),
    (80, "B"),
    (75, "C+"),
    (70, "C"),
    (60, "D"),
]
PASSING_SCORE = 70


def grade_for(score: float) -> str:
    """Letter grade for an overall score."""
    for threshold, grade in GRADE_LADDER:
        if score >= threshold:
            return grade
    return "F"


def is_passing(score: float) -> bool:
    return score >= PASSING_SCORE


def performance_level(score: float) -> str:
    """Human label for an overall score."""
    if score >= 90:
        return "Excellent"
    if score >= 80:
        return "Very Good"
    if score >= 70:
        return "Good"
    if score >= 60:
        return "Average"
    if score >= 50:
        return "Below Average"
    return "Poor"


class CategoryScores(BaseModel):
    """The five graded dimensions."""
    technical_knowledge: int = Field(..., ge=0, le=100)
    communication: int = Field(..., ge=0, le=100)
    problem_solving: int = Field(..., ge=0, le=100)
    confidence: int = Field(..., ge=0, le=100)
    behavioral_signal: int = Field(..., ge=0, le=100)


class ResultMetadata(BaseModel):
    ai_model: Optional[str] = None
    behavioral_model: str = "behavioral-signal-service"
    narrative_source: str = "evaluator"
    processing_time: int = Field(0, description="Milliseconds spent compiling")
    generated_at: datetime = Field(default_factory=datetime.utcnow)


class FinalResult(BaseModel):
    """Graded report for a completed interview.

    ``grade``, ``passed`` and ``completion_percentage`` are always derived
    here from the other fields, whatever was passed in or stored.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_encoders={ObjectId: str}
    )

    id: Optional[PyObjectId] = Field(default=None, alias="_id")
    interview_id: PyObjectId
    user_id: PyObjectId

    overall_score: int = Field(..., ge=0, le=100)
    category_scores: CategoryScores
    grade: str = "F"
    passed: bool = False

    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    detailed_feedback: str

    completion_time: int = Field(0, ge=0, description="Interview duration in seconds")
    questions_answered: int = Field(..., ge=0)
    total_questions: int = Field(..., ge=1)
    completion_percentage: int = 0

    metadata: ResultMetadata = Field(default_factory=ResultMetadata)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @model_validator(mode="after")
    def derive_grade(self):
        self.grade = grade_for(self.overall_score)
        self.passed = is_passing(self.overall_score)
        self.completion_percentage = round_score(self.questions_answered * 100 / self.total_questions)
        return self

    @property
    def performance_level(self) -> str:
        return performance_level(self.overall_score)

    def to_document(self) -> dict:
        """Serialize for insertion into MongoDB."""
        return self.model_dump(by_alias=True, exclude={"id"})
