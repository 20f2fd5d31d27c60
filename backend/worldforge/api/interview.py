"""
Interview API: start, reply, resume, edit, progress, and the configuration of a completed interview.
All scoped by the X-User-Id header. Engine errors map to one status code each:
  not found 404, unknown topic / invalid name 400, name taken and wrong phase 409,
  text generation or extraction failure 502, invalid configuration 422.
"""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from worldforge.api.deps import get_current_user_id, get_interview_service
from worldforge.exceptions import (
    ConfigurationInvalidError,
    InterviewError,
    InterviewNotFoundError,
    InterviewStateError,
    InvalidAnswerError,
    UnknownTopicError,
    UpstreamError,
    WorldNameTakenError,
)
from worldforge.schemas.api import (
    EditRequest,
    EditResponse,
    InterviewResponse,
    ProgressResponse,
    ReplyRequest,
    ReplyResponse,
)
from worldforge.schemas.interview import InterviewSession
from worldforge.schemas.world import WorldConfiguration
from worldforge.services.interview_service import InterviewService
from worldforge.services.topic_catalog import TOTAL_TOPICS, find_topic

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/interview", tags=["interview"])


def _http_error(e: InterviewError) -> HTTPException:
    if isinstance(e, InterviewNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, (UnknownTopicError, InvalidAnswerError)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if isinstance(e, WorldNameTakenError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": str(e), "suggestions": e.suggestions},
        )
    if isinstance(e, InterviewStateError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if isinstance(e, ConfigurationInvalidError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "message": str(e),
                "issues": [{"field": i.field, "message": i.message} for i in e.issues],
            },
        )
    if isinstance(e, UpstreamError):
        logger.warning("Upstream failure: %s", e)
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


def _interview_response(session: InterviewSession, message: str) -> InterviewResponse:
    return InterviewResponse(
        interview_id=str(session.id),
        status=session.interview.status,
        current_question_index=session.interview.current_question_index,
        total_topics=TOTAL_TOPICS,
        message=message,
    )


@router.post("/start", response_model=InterviewResponse)
def start_interview(
    user_id: UUID = Depends(get_current_user_id),
    service: InterviewService = Depends(get_interview_service),
):
    """Start a new interview, or resume the unfinished one (same id)."""
    try:
        session, message = service.start(user_id)
    except InterviewError as e:
        raise _http_error(e)
    return _interview_response(session, message)


@router.post("/reply", response_model=ReplyResponse)
def reply(
    body: ReplyRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: InterviewService = Depends(get_interview_service),
):
    """One player turn: an answer, a 'change <topic> to <value>' command, or the review confirmation."""
    try:
        result = service.process(user_id, body.text)
    except InterviewError as e:
        raise _http_error(e)
    return ReplyResponse(
        message=result.message,
        completed=result.completed,
        world_id=str(result.world_id) if result.world_id else None,
        progress=round(service.progress(user_id), 2),
    )


@router.get("/resume", response_model=InterviewResponse)
def resume_interview(
    user_id: UUID = Depends(get_current_user_id),
    service: InterviewService = Depends(get_interview_service),
):
    """Regenerate the prompt for wherever the interview stopped."""
    try:
        session, message = service.resume(user_id)
    except InterviewError as e:
        raise _http_error(e)
    return _interview_response(session, message)


@router.post("/edit", response_model=EditResponse)
def edit_answer(
    body: EditRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: InterviewService = Depends(get_interview_service),
):
    """Overwrite the answer for a topic (catalog name or an unambiguous part of one), in any phase."""
    interview_id = None
    if body.interview_id:
        try:
            interview_id = UUID(body.interview_id)
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="interview_id must be a UUID")
    try:
        session = service.edit(user_id, body.topic, body.value, interview_id=interview_id)
    except InterviewError as e:
        raise _http_error(e)
    name = find_topic(body.topic).name
    return EditResponse(interview_id=str(session.id), topic=name, value=session.answers[name])


@router.get("/progress", response_model=ProgressResponse)
def get_progress(
    user_id: UUID = Depends(get_current_user_id),
    service: InterviewService = Depends(get_interview_service),
):
    """Fraction of topics answered (0 when the user has no interview)."""
    session = service.active_session(user_id)
    return ProgressResponse(
        progress=round(service.progress(user_id), 2),
        answered=session.interview.current_question_index if session else 0,
        total_topics=TOTAL_TOPICS,
        status=session.interview.status if session else None,
    )


@router.get("/{interview_id}/configuration", response_model=WorldConfiguration)
def get_configuration(
    interview_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: InterviewService = Depends(get_interview_service),
):
    """Structured world configuration of a completed interview."""
    try:
        return service.complete(user_id, interview_id)
    except InterviewError as e:
        raise _http_error(e)
