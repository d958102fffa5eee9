"""Contracts of the text-evaluation collaborator."""
import math
from pydantic import BaseModel, Field, ConfigDict, AliasChoices, field_validator
from typing import List, Optional


class EvaluationRequest(BaseModel):
    """Everything the evaluator needs to score one answer."""
    question_text: str
    answer_text: str
    expected_answer: Optional[str] = None
    subject_areas: List[str] = Field(default_factory=list)
    experience_level: str = "Junior"


class EvaluatorResponse(BaseModel):
    """Raw per-answer scores as reported by the evaluator.

    The four sub-scores must be real numbers in [0, 100]; strings and
    booleans are rejected rather than coerced.
    """

    model_config = ConfigDict(populate_by_name=True)

    relevance: float = Field(..., strict=True)
    completeness: float = Field(..., strict=True)
    technical_accuracy: float = Field(
        ..., strict=True,
        validation_alias=AliasChoices("technicalAccuracy", "technical_accuracy"),
    )
    communication: float = Field(..., strict=True)
    overall: Optional[float] = Field(
        None,
        validation_alias=AliasChoices("overall", "overallScore", "overall_score"),
    )
    feedback: str = ""
    suggestions: List[str] = Field(default_factory=list)

    @field_validator("relevance", "completeness", "technical_accuracy", "communication", mode="before")
    @classmethod
    def reject_bool(cls, value):
        if isinstance(value, bool):
            raise ValueError("score must be a number, not a boolean")
        return value

    @field_validator("relevance", "completeness", "technical_accuracy", "communication")
    @classmethod
    def check_range(cls, value: float) -> float:
        if not math.isfinite(value) or not 0 <= value <= 100:
            raise ValueError("score must be between 0 and 100")
        return value


class NarrativeResponse(BaseModel):
    """Written part of the final report. Carries no scores on purpose."""

    model_config = ConfigDict(populate_by_name=True)

    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    narrative_feedback: str = Field(
        ..., min_length=1,
        validation_alias=AliasChoices("narrativeFeedback", "narrative_feedback", "detailedFeedback"),
    )


class GeneratedQuestion(BaseModel):
    """A question as produced by the question generator, before numbering."""

    model_config = ConfigDict(populate_by_name=True)

    question_text: str = Field(
        ..., min_length=1,
        validation_alias=AliasChoices("question_text", "questionText"),
    )
    category: str = "Technical"
    expected_answer: Optional[str] = Field(
        None, validation_alias=AliasChoices("expected_answer", "expectedAnswer"),
    )
