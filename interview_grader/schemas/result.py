"""Final result schemas."""
from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import datetime

from interview_grader.models.result import CategoryScores, FinalResult, ResultMetadata
from interview_grader.schemas.interview import PaginationResponse
from interview_grader.services.behavioral import BehavioralSummary


class FinalResultResponse(BaseModel):
    """Response schema for a final result."""
    id: str
    interview_id: str
    user_id: str
    overall_score: int
    category_scores: CategoryScores
    grade: str
    passed: bool
    performance_level: str
    strengths: List[str]
    weaknesses: List[str]
    recommendations: List[str]
    detailed_feedback: str
    completion_time: int
    questions_answered: int
    total_questions: int
    completion_percentage: int
    metadata: ResultMetadata
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_result(cls, result: FinalResult) -> "FinalResultResponse":
        data = result.model_dump(exclude={"id", "interview_id", "user_id"})
        return cls(
            id=str(result.id),
            interview_id=str(result.interview_id),
            user_id=str(result.user_id),
            performance_level=result.performance_level,
            **data,
        )


class GeneratedResultResponse(BaseModel):
    result: FinalResultResponse
    behavioral_summary: BehavioralSummary


class InterviewResultResponse(BaseModel):
    result: FinalResultResponse
    answers_count: int
    behavioral_summary: BehavioralSummary


class ResultListResponse(BaseModel):
    results: List[FinalResultResponse]
    pagination: PaginationResponse


class CategoryTrend(BaseModel):
    average: int
    best: int
    latest: int
    trend: int


class PerformanceInsights(BaseModel):
    most_improved_category: Optional[str]
    strongest_category: Optional[str]
    needs_improvement: List[str]


class PerformanceAnalyticsResponse(BaseModel):
    """Progress across all of a candidate's results."""
    total_interviews: int
    average_score: int
    best_score: int
    improvement_trend: int
    pass_rate: int
    recent_results: List[FinalResultResponse]
    category_trends: Dict[str, CategoryTrend]
    grade_distribution: Dict[str, int]
    insights: PerformanceInsights


class ResultComparison(BaseModel):
    overall_score_change: int
    category_changes: Dict[str, int]
    improvements: List[str]
    declines: List[str]
    time_difference: int
    grade_change: bool


class ResultComparisonResponse(BaseModel):
    result1: FinalResultResponse
    result2: FinalResultResponse
    comparison: ResultComparison
