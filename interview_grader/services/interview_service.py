"""Service for generating and looking up interviews."""
import logging
from collections import Counter
from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from interview_grader.exceptions import NotFoundError, UpstreamServiceError, ValidationError
from interview_grader.models.common import parse_object_id
from interview_grader.models.interview import (
    MAX_QUESTIONS,
    MIN_QUESTIONS,
    QUESTION_CATEGORIES,
    GenerationMetadata,
    InterviewQuestion,
    InterviewSession,
    InterviewStatus,
)
from interview_grader.schemas.evaluator import GeneratedQuestion
from interview_grader.utils.helpers import pagination_meta, round_score

logger = logging.getLogger(__name__)

FALLBACK_QUESTIONS = [
    GeneratedQuestion(
        question_text="Tell me about your experience with the technologies mentioned in your profile.",
        category="Technical",
        expected_answer="Should demonstrate knowledge of mentioned technologies",
    ),
    GeneratedQuestion(
        question_text="Describe a challenging project you worked on and how you overcame the difficulties.",
        category="Problem Solving",
        expected_answer="Should show problem-solving skills and resilience",
    ),
    GeneratedQuestion(
        question_text="How do you stay updated with the latest technology trends?",
        category="Behavioral",
        expected_answer="Should show commitment to continuous learning",
    ),
    GeneratedQuestion(
        question_text="Explain a complex technical concept to someone without a technical background.",
        category="Technical",
        expected_answer="Should demonstrate communication skills and deep understanding",
    ),
    GeneratedQuestion(
        question_text="Describe your approach to debugging and troubleshooting issues.",
        category="Problem Solving",
        expected_answer="Should show systematic problem-solving approach",
    ),
    GeneratedQuestion(
        question_text="Tell me about a time you disagreed with a teammate and how you resolved it.",
        category="Behavioral",
        expected_answer="Should show collaboration and constructive conflict handling",
    ),
    GeneratedQuestion(
        question_text="How would you design and test a new feature in {stack}?",
        category="Technical",
        expected_answer="Should cover design trade-offs, testing strategy and delivery",
    ),
    GeneratedQuestion(
        question_text="Walk me through how you would find the cause of a slow request in production.",
        category="Problem Solving",
        expected_answer="Should show measurement first, then narrowing down the bottleneck",
    ),
]


def fallback_questions(tech_stack: List[str], number_of_questions: int) -> List[GeneratedQuestion]:
    """Deterministic question set, cycled until the requested count is reached."""
    stack = ", ".join(tech_stack) or "your main technology"
    questions = []
    for i in range(number_of_questions):
        template = FALLBACK_QUESTIONS[i % len(FALLBACK_QUESTIONS)]
        questions.append(template.model_copy(update={"question_text": template.question_text.format(stack=stack)}))
    return questions


def number_questions(generated: List[GeneratedQuestion]) -> List[InterviewQuestion]:
    """Give questions contiguous numbers from 1, fixing unknown categories."""
    return [
        InterviewQuestion(
            question_number=i,
            question_text=q.question_text.strip(),
            category=q.category if q.category in QUESTION_CATEGORIES else "Technical",
            expected_answer=q.expected_answer,
        )
        for i, q in enumerate(generated, start=1)
    ]


class InterviewService:
    def __init__(self, db: AsyncIOMotorDatabase, question_generator=None):
        self.db = db
        self.question_generator = question_generator

    async def generate_interview(
        self,
        user_id,
        tech_stack: List[str],
        hardness_level: str,
        experience_level: str,
        number_of_questions: int,
    ) -> InterviewSession:
        """Create a new interview in the ``generated`` state."""
        if not MIN_QUESTIONS <= number_of_questions <= MAX_QUESTIONS:
            raise ValidationError(f"Number of questions must be between {MIN_QUESTIONS} and {MAX_QUESTIONS}")
        tech_stack = [tech.strip() for tech in tech_stack if tech and tech.strip()]
        if not 1 <= len(tech_stack) <= 10:
            raise ValidationError("Tech stack must contain 1-10 technologies")

        ai_model = None
        generated = None
        if self.question_generator is not None:
            try:
                generated = await self.question_generator.generate_questions(
                    tech_stack, hardness_level, experience_level, number_of_questions
                )
                ai_model = getattr(self.question_generator, "model", None)
            except UpstreamServiceError as e:
                logger.warning("Question generation failed (%s), using fallback questions", e)

        if generated is not None and len(generated) != number_of_questions:
            logger.warning(
                "Question generator returned %d questions instead of %d, using fallback questions",
                len(generated), number_of_questions,
            )
            generated = None
            ai_model = None

        if generated is None:
            generated = fallback_questions(tech_stack, number_of_questions)

        session = InterviewSession(
            user_id=parse_object_id(user_id, "user ID"),
            tech_stack=tech_stack,
            hardness_level=hardness_level,
            experience_level=experience_level,
            number_of_questions=number_of_questions,
            questions=number_questions(generated),
            metadata=GenerationMetadata(
                generated_by="AI" if ai_model else "fallback",
                ai_model=ai_model,
                generation_prompt=f"{', '.join(tech_stack)} - {experience_level} - {hardness_level}",
            ),
        )

        result = await self.db.interview_sessions.insert_one(session.to_document())
        session.id = result.inserted_id
        logger.info("Generated interview %s with %d questions", session.id, len(session.questions))
        return session

    async def get_session(self, session_id, user_id) -> InterviewSession:
        """Fetch an interview owned by ``user_id``."""
        data = await self.db.interview_sessions.find_one({
            "_id": parse_object_id(session_id, "interview ID"),
            "user_id": parse_object_id(user_id, "user ID"),
        })
        if not data:
            raise NotFoundError("Interview not found")
        return InterviewSession(**data)

    async def list_sessions(
        self,
        user_id,
        status: Optional[InterviewStatus] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Dict:
        query = {"user_id": parse_object_id(user_id, "user ID")}
        if status:
            query["status"] = InterviewStatus(status).value

        cursor = (
            self.db.interview_sessions.find(query)
            .sort("created_at", -1)
            .skip((page - 1) * limit)
            .limit(limit)
        )
        sessions = [InterviewSession(**data) for data in await cursor.to_list(length=limit)]
        total = await self.db.interview_sessions.count_documents(query)
        return {"sessions": sessions, "pagination": pagination_meta(page, limit, total)}

    async def session_overview(self, user_id) -> Dict:
        """Status, difficulty and experience distributions for a candidate."""
        sessions = await self.db.interview_sessions.find(
            {"user_id": parse_object_id(user_id, "user ID")}
        ).to_list(length=None)

        statuses = Counter(s.get("status") for s in sessions)
        total = len(sessions)
        average_questions = (
            round_score(sum(s.get("number_of_questions", 0) for s in sessions) / total) if total else 0
        )
        return {
            "total": total,
            "status_distribution": {status.value: statuses.get(status.value, 0) for status in InterviewStatus},
            "hardness_distribution": dict(Counter(s.get("hardness_level") for s in sessions)),
            "experience_distribution": dict(Counter(s.get("experience_level") for s in sessions)),
            "average_questions": average_questions,
        }

