"""Answer router."""
from fastapi import APIRouter, Depends, HTTPException, status
from bson import ObjectId

from interview_grader.exceptions import InterviewGraderError
from interview_grader.schemas.answer import (
    AnswerListResponse,
    AnswerResponse,
    AnswerStatsResponse,
    SubmitAllAnswersRequest,
    SubmitAllAnswersResponse,
    SubmitAnswerRequest,
    UpdateAnswerRequest,
)
from interview_grader.services.answer_ledger import AnswerLedger
from interview_grader.services.interview_service import InterviewService
from interview_grader.utils.dependencies import (
    get_answer_ledger,
    get_current_user_id,
    get_interview_service,
)
from interview_grader.utils.helpers import round_score

router = APIRouter(prefix="/api/v1/answers", tags=["Answers"])


@router.post("/", response_model=AnswerResponse, status_code=status.HTTP_201_CREATED)
async def submit_answer(
    request: SubmitAnswerRequest,
    user_id: ObjectId = Depends(get_current_user_id),
    interviews: InterviewService = Depends(get_interview_service),
    ledger: AnswerLedger = Depends(get_answer_ledger),
):
    """Submit and score one answer."""
    try:
        session = await interviews.get_session(request.interview_id, user_id)
        answer = await ledger.submit_answer(
            session,
            user_id,
            question_number=request.question_number,
            answer_text=request.answer_text,
            answer_duration=request.answer_duration,
            behavioral=request.behavioral_analysis,
            media_reference=request.media_reference,
        )
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return AnswerResponse.from_answer(answer)


@router.post("/submit-all", response_model=SubmitAllAnswersResponse, status_code=status.HTTP_201_CREATED)
async def submit_all_answers(
    request: SubmitAllAnswersRequest,
    user_id: ObjectId = Depends(get_current_user_id),
    interviews: InterviewService = Depends(get_interview_service),
    ledger: AnswerLedger = Depends(get_answer_ledger),
):
    """Submit a batch of answers sharing one behavioral measurement."""
    try:
        session = await interviews.get_session(request.interview_id, user_id)
        answers = await ledger.submit_all(
            session,
            user_id,
            request.answers,
            behavioral=request.behavioral_analysis,
            media_reference=request.media_reference,
            total_duration=request.total_duration,
        )
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return SubmitAllAnswersResponse(
        answers=[AnswerResponse.from_answer(a) for a in answers],
        total_submitted=len(answers),
    )


@router.get("/interview/{interview_id}", response_model=AnswerListResponse)
async def list_interview_answers(
    interview_id: str,
    user_id: ObjectId = Depends(get_current_user_id),
    interviews: InterviewService = Depends(get_interview_service),
    ledger: AnswerLedger = Depends(get_answer_ledger),
):
    """All answers of an interview in question order."""
    try:
        session = await interviews.get_session(interview_id, user_id)
        answers = await ledger.list_answers(session, user_id)
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    total_questions = len(session.questions)
    return AnswerListResponse(
        answers=[AnswerResponse.from_answer(a) for a in answers],
        total_answers=len(answers),
        total_questions=total_questions,
        completion_percentage=round_score(len(answers) * 100 / total_questions) if total_questions else 0,
    )


@router.get("/stats/{interview_id}", response_model=AnswerStatsResponse)
async def answer_statistics(
    interview_id: str,
    user_id: ObjectId = Depends(get_current_user_id),
    interviews: InterviewService = Depends(get_interview_service),
    ledger: AnswerLedger = Depends(get_answer_ledger),
):
    try:
        session = await interviews.get_session(interview_id, user_id)
        return await ledger.answer_statistics(session, user_id)
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/{answer_id}", response_model=AnswerResponse)
async def get_answer(
    answer_id: str,
    user_id: ObjectId = Depends(get_current_user_id),
    ledger: AnswerLedger = Depends(get_answer_ledger),
):
    try:
        answer = await ledger.get_answer(answer_id, user_id)
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return AnswerResponse.from_answer(answer)


@router.put("/{answer_id}", response_model=AnswerResponse)
async def update_answer(
    answer_id: str,
    request: UpdateAnswerRequest,
    user_id: ObjectId = Depends(get_current_user_id),
    ledger: AnswerLedger = Depends(get_answer_ledger),
):
    """Edit an answer while the interview is still in progress."""
    try:
        answer = await ledger.update_answer(
            answer_id,
            user_id,
            answer_text=request.answer_text,
            answer_duration=request.answer_duration,
            behavioral=request.behavioral_analysis,
            media_reference=request.media_reference,
        )
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return AnswerResponse.from_answer(answer)


@router.delete("/{answer_id}")
async def delete_answer(
    answer_id: str,
    user_id: ObjectId = Depends(get_current_user_id),
    ledger: AnswerLedger = Depends(get_answer_ledger),
):
    try:
        await ledger.delete_answer(answer_id, user_id)
    except InterviewGraderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"message": "Answer deleted successfully"}
