"""Interview router."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from bson import ObjectId
from typing import Optional

from interview_grader.exceptions import InterviewGraderError
from interview_grader.models.interview import InterviewStatus
from interview_grader.schemas.interview import (
    GenerateInterviewRequest,
    InterviewListResponse,
    InterviewOverviewResponse,
    InterviewSessionResponse,
)
from interview_grader.services.interview_service import InterviewService
from interview_grader.services.lifecycle import InterviewLifecycle
from interview_grader.utils.dependencies import (
    get_current_user_id,
    get_interview_service,
    get_lifecycle,
)

router = APIRouter(prefix="/api/v1/interviews", tags=["Interviews"])


@router.post("/generate", response_model=InterviewSessionResponse, status_code=status.HTTP_201_CREATED)
async def generate_interview(
    request: GenerateInterviewRequest,
    user_id: ObjectId = Depends(get_current_user_id),
    service: InterviewService = Depends(get_interview_service),
):
    """Generate a new interview."""
    try:
        session = await service.generate_interview(
            user_id=user_id,
            tech_stack=request.tech_stack,
            hardness_level=request.hardness_level,
            experience_level=request.experience_level,
            number_of_questions=request.number_of_questions,
        )
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return InterviewSessionResponse.from_session(session)


@router.get("/", response_model=InterviewListResponse)
async def list_interviews(
    status_filter: Optional[InterviewStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    user_id: ObjectId = Depends(get_current_user_id),
    service: InterviewService = Depends(get_interview_service),
):
    """List the candidate's interviews, newest first."""
    try:
        data = await service.list_sessions(user_id, status=status_filter, page=page, limit=limit)
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return InterviewListResponse(
        sessions=[InterviewSessionResponse.from_session(s) for s in data["sessions"]],
        pagination=data["pagination"],
    )


@router.get("/stats/overview", response_model=InterviewOverviewResponse)
async def interview_overview(
    user_id: ObjectId = Depends(get_current_user_id),
    service: InterviewService = Depends(get_interview_service),
):
    return await service.session_overview(user_id)


@router.get("/{interview_id}", response_model=InterviewSessionResponse)
async def get_interview(
    interview_id: str,
    user_id: ObjectId = Depends(get_current_user_id),
    service: InterviewService = Depends(get_interview_service),
):
    """Get interview details."""
    try:
        session = await service.get_session(interview_id, user_id)
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return InterviewSessionResponse.from_session(session)


async def _apply(action: str, interview_id, user_id, service: InterviewService, lifecycle: InterviewLifecycle):
    try:
        session = await service.get_session(interview_id, user_id)
        session = await getattr(lifecycle, action)(session)
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return InterviewSessionResponse.from_session(session)


@router.post("/{interview_id}/start", response_model=InterviewSessionResponse)
async def start_interview(
    interview_id: str,
    user_id: ObjectId = Depends(get_current_user_id),
    service: InterviewService = Depends(get_interview_service),
    lifecycle: InterviewLifecycle = Depends(get_lifecycle),
):
    """Move a generated interview to in progress."""
    return await _apply("start", interview_id, user_id, service, lifecycle)


@router.post("/{interview_id}/complete", response_model=InterviewSessionResponse)
async def complete_interview(
    interview_id: str,
    user_id: ObjectId = Depends(get_current_user_id),
    service: InterviewService = Depends(get_interview_service),
    lifecycle: InterviewLifecycle = Depends(get_lifecycle),
):
    """Finish an in-progress interview."""
    return await _apply("complete", interview_id, user_id, service, lifecycle)


@router.post("/{interview_id}/abandon", response_model=InterviewSessionResponse)
async def abandon_interview(
    interview_id: str,
    user_id: ObjectId = Depends(get_current_user_id),
    service: InterviewService = Depends(get_interview_service),
    lifecycle: InterviewLifecycle = Depends(get_lifecycle),
):
    """Cancel an interview that has not been completed."""
    return await _apply("abandon", interview_id, user_id, service, lifecycle)
