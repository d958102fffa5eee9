"""Final result router."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from bson import ObjectId

from interview_grader.exceptions import InterviewGraderError
from interview_grader.schemas.result import (
    FinalResultResponse,
    GeneratedResultResponse,
    InterviewResultResponse,
    PerformanceAnalyticsResponse,
    ResultComparisonResponse,
    ResultListResponse,
)
from interview_grader.services.analytics import ResultAnalytics
from interview_grader.services.interview_service import InterviewService
from interview_grader.services.result_compiler import ResultCompiler
from interview_grader.utils.dependencies import (
    get_current_user_id,
    get_interview_service,
    get_result_analytics,
    get_result_compiler,
)

router = APIRouter(prefix="/api/v1/results", tags=["Results"])


@router.post("/generate/{interview_id}", response_model=GeneratedResultResponse, status_code=status.HTTP_201_CREATED)
async def generate_result(
    interview_id: str,
    user_id: ObjectId = Depends(get_current_user_id),
    interviews: InterviewService = Depends(get_interview_service),
    compiler: ResultCompiler = Depends(get_result_compiler),
):
    """Grade a completed interview. Only one result per interview is kept."""
    try:
        session = await interviews.get_session(interview_id, user_id)
        data = await compiler.generate_result(session, user_id)
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return GeneratedResultResponse(
        result=FinalResultResponse.from_result(data["result"]),
        behavioral_summary=data["behavioral_summary"],
    )


@router.get("/interview/{interview_id}", response_model=InterviewResultResponse)
async def get_interview_result(
    interview_id: str,
    user_id: ObjectId = Depends(get_current_user_id),
    interviews: InterviewService = Depends(get_interview_service),
    compiler: ResultCompiler = Depends(get_result_compiler),
):
    try:
        session = await interviews.get_session(interview_id, user_id)
        data = await compiler.get_result(session, user_id)
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return InterviewResultResponse(
        result=FinalResultResponse.from_result(data["result"]),
        answers_count=data["answers_count"],
        behavioral_summary=data["behavioral_summary"],
    )


@router.get("/", response_model=ResultListResponse)
async def list_results(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    sort: str = Query("-created_at"),
    user_id: ObjectId = Depends(get_current_user_id),
    analytics: ResultAnalytics = Depends(get_result_analytics),
):
    """List the candidate's results."""
    try:
        data = await analytics.list_results(user_id, page=page, limit=limit, sort=sort)
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return ResultListResponse(
        results=[FinalResultResponse.from_result(r) for r in data["results"]],
        pagination=data["pagination"],
    )


@router.get("/analytics/performance", response_model=PerformanceAnalyticsResponse)
async def performance_analytics(
    user_id: ObjectId = Depends(get_current_user_id),
    analytics: ResultAnalytics = Depends(get_result_analytics),
):
    """Progress across every result of the candidate."""
    data = await analytics.performance_analytics(user_id)
    data["recent_results"] = [FinalResultResponse.from_result(r) for r in data["recent_results"]]
    return data


@router.get("/compare/{first_id}/{second_id}", response_model=ResultComparisonResponse)
async def compare_results(
    first_id: str,
    second_id: str,
    user_id: ObjectId = Depends(get_current_user_id),
    analytics: ResultAnalytics = Depends(get_result_analytics),
):
    try:
        data = await analytics.compare_results(first_id, second_id, user_id)
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return ResultComparisonResponse(
        result1=FinalResultResponse.from_result(data["result1"]),
        result2=FinalResultResponse.from_result(data["result2"]),
        comparison=data["comparison"],
    )


@router.get("/{result_id}", response_model=FinalResultResponse)
async def get_result(
    result_id: str,
    user_id: ObjectId = Depends(get_current_user_id),
    analytics: ResultAnalytics = Depends(get_result_analytics),
):
    try:
        result = await analytics.get_result_by_id(result_id, user_id)
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return FinalResultResponse.from_result(result)
