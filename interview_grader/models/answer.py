"""Answer models."""
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional, Literal
from datetime import datetime
from bson import ObjectId
from interview_grader.models.common import PyObjectId

EMOTION_CHANNELS = ("happy", "sad", "angry", "fear", "surprise", "disgust", "neutral")
MAX_ANSWER_LENGTH = 5000

EvaluationSource = Literal["evaluator", "quality_gate", "fallback"]


class EmotionDistribution(BaseModel):
    """Share of each emotion channel observed while answering (0-100)."""
    happy: float = Field(0, ge=0, le=100)
    sad: float = Field(0, ge=0, le=100)
    angry: float = Field(0, ge=0, le=100)
    fear: float = Field(0, ge=0, le=100)
    surprise: float = Field(0, ge=0, le=100)
    disgust: float = Field(0, ge=0, le=100)
    neutral: float = Field(0, ge=0, le=100)


class BehavioralAnalysis(BaseModel):
    """Video-derived behavioral measurement attached to an answer."""
    confidence: float = Field(0, ge=0, le=100)
    eye_contact: float = Field(0, ge=0, le=100)
    speech_clarity: float = Field(0, ge=0, le=100)
    overall_score: float = Field(0, ge=0, le=100)
    emotions: EmotionDistribution = Field(default_factory=EmotionDistribution)
    feedback: str = ""
    frame_count: int = Field(0, ge=0)
    analysis_duration: float = Field(0, ge=0)
    is_fallback: bool = False


class AIEvaluation(BaseModel):
    """Text evaluation of an answer after consistency enforcement."""
    relevance: float = Field(..., ge=0, le=100)
    completeness: float = Field(..., ge=0, le=100)
    technical_accuracy: float = Field(..., ge=0, le=100)
    communication: float = Field(..., ge=0, le=100)
    overall_score: int = Field(..., ge=0, le=100)
    feedback: str = ""
    suggestions: List[str] = Field(default_factory=list)
    source: EvaluationSource = "evaluator"
    reason: Optional[str] = Field(None, description="Why the quality gate short-circuited scoring")


class Answer(BaseModel):
    """One candidate response to one question of one interview."""

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_encoders={ObjectId: str}
    )

    id: Optional[PyObjectId] = Field(default=None, alias="_id")
    interview_id: PyObjectId
    user_id: PyObjectId
    question_number: int = Field(..., ge=1)
    question_text: str
    answer_text: str = Field(..., max_length=MAX_ANSWER_LENGTH)
    answer_duration: int = Field(0, ge=0, description="Seconds spent answering")

    ai_evaluation: AIEvaluation
    behavioral_analysis: Optional[BehavioralAnalysis] = None

    submitted_at: datetime = Field(default_factory=datetime.utcnow)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def to_document(self) -> dict:
        """Serialize for insertion into MongoDB."""
        return self.model_dump(by_alias=True, exclude={"id"})
