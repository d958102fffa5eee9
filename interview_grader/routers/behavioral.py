"""Behavioral report router."""
from fastapi import APIRouter, Depends, HTTPException, Query
from bson import ObjectId

from interview_grader.exceptions import InterviewGraderError
from interview_grader.schemas.behavioral import (
    BehaviorComparisonResponse,
    InterviewBehaviorResponse,
    UserBehaviorSummaryResponse,
)
from interview_grader.services.behavioral_report import BehavioralReports
from interview_grader.services.interview_service import InterviewService
from interview_grader.utils.dependencies import (
    get_behavioral_reports,
    get_current_user_id,
    get_interview_service,
)

router = APIRouter(prefix="/api/v1/behavioral", tags=["Behavioral"])


@router.get("/interview/{interview_id}", response_model=InterviewBehaviorResponse)
async def interview_behavior(
    interview_id: str,
    user_id: ObjectId = Depends(get_current_user_id),
    interviews: InterviewService = Depends(get_interview_service),
    reports: BehavioralReports = Depends(get_behavioral_reports),
):
    """Question-by-question behavioral breakdown of one interview."""
    try:
        session = await interviews.get_session(interview_id, user_id)
        report = await reports.interview_report(session, user_id)
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return InterviewBehaviorResponse.from_report(report)


@router.get("/user/summary", response_model=UserBehaviorSummaryResponse)
async def user_behavior_summary(
    limit: int = Query(10, ge=1, le=50),
    user_id: ObjectId = Depends(get_current_user_id),
    reports: BehavioralReports = Depends(get_behavioral_reports),
):
    try:
        data = await reports.user_summary(user_id, limit=limit)
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return UserBehaviorSummaryResponse.from_summary(data)


@router.get("/compare/{first_id}/{second_id}", response_model=BehaviorComparisonResponse)
async def compare_behavior(
    first_id: str,
    second_id: str,
    user_id: ObjectId = Depends(get_current_user_id),
    reports: BehavioralReports = Depends(get_behavioral_reports),
):
    try:
        data = await reports.compare_interviews(first_id, second_id, user_id)
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return BehaviorComparisonResponse.from_comparison(data)
