"""Interview session models."""
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import List, Optional, Literal
from datetime import datetime
from bson import ObjectId
from interview_grader.models.common import PyObjectId


class InterviewStatus(str, Enum):
    """Lifecycle states of an interview session."""
    GENERATED = "generated"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


QuestionCategory = Literal["Technical", "Behavioral", "Problem Solving"]
HardnessLevel = Literal["Easy", "Medium", "Hard"]
ExperienceLevel = Literal["Fresher", "Junior", "Mid", "Senior", "Lead"]

QUESTION_CATEGORIES = ("Technical", "Behavioral", "Problem Solving")
MIN_QUESTIONS = 3
MAX_QUESTIONS = 20


class InterviewQuestion(BaseModel):
    """One question of a generated interview."""
    question_number: int = Field(..., ge=1)
    question_text: str = Field(..., min_length=1)
    category: QuestionCategory = "Technical"
    expected_answer: Optional[str] = Field(None, description="Key points the evaluator should look for")


class GenerationMetadata(BaseModel):
    """How the questions were produced."""
    generated_by: str = "AI"
    ai_model: Optional[str] = None
    generation_prompt: Optional[str] = None


class InterviewSession(BaseModel):
    """A generated interview owned by one candidate."""

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_encoders={ObjectId: str}
    )

    id: Optional[PyObjectId] = Field(default=None, alias="_id")
    user_id: PyObjectId = Field(..., description="The candidate who owns the interview")

    tech_stack: List[str] = Field(default_factory=list)
    hardness_level: HardnessLevel = "Medium"
    experience_level: ExperienceLevel = "Junior"
    number_of_questions: int = Field(..., ge=MIN_QUESTIONS, le=MAX_QUESTIONS)
    questions: List[InterviewQuestion] = Field(default_factory=list)

    status: InterviewStatus = InterviewStatus.GENERATED
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration: int = Field(0, description="Seconds between start and completion")

    metadata: GenerationMetadata = Field(default_factory=GenerationMetadata)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @field_validator("questions")
    @classmethod
    def check_numbering(cls, questions: List[InterviewQuestion]) -> List[InterviewQuestion]:
        numbers = [q.question_number for q in questions]
        if numbers != list(range(1, len(questions) + 1)):
            raise ValueError("Question numbers must be unique and contiguous from 1")
        return questions

    def get_question(self, question_number: int) -> Optional[InterviewQuestion]:
        """Look up a question by its number."""
        for question in self.questions:
            if question.question_number == question_number:
                return question
        return None

    def to_document(self) -> dict:
        """Serialize for insertion into MongoDB."""
        data = self.model_dump(by_alias=True, exclude={"id"})
        data["status"] = self.status.value
        return data
