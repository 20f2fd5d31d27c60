"""
Shared dependencies: current user id from the X-User-Id header, and the interview service
wired to one DB session per request.
"""
import logging
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from worldforge.database import get_db
from worldforge.generation import load_world_generator
from worldforge.llm import get_text_generator
from worldforge.repositories import SqlInterviewRepository, SqlWorldRepository
from worldforge.services.interview_service import InterviewService

logger = logging.getLogger(__name__)

_generator_cache: dict[str, object] = {}


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> UUID:
    """Already-authenticated user id from X-User-Id; 401 if missing, 400 if not a UUID."""
    if not (x_user_id or "").strip():
        logger.debug("Request without X-User-Id header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated. Send header: X-User-Id: <uuid>",
        )
    try:
        return UUID(x_user_id.strip())
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="X-User-Id must be a UUID")


def get_world_generator():
    """Configured procedural generator, imported once per process (None when not configured)."""
    if "generator" not in _generator_cache:
        _generator_cache["generator"] = load_world_generator()
    return _generator_cache["generator"]


def get_interview_service(db: Session = Depends(get_db)) -> InterviewService:
    return InterviewService(
        client=get_text_generator(),
        repo=SqlInterviewRepository(db),
        world_repo=SqlWorldRepository(db),
        generator=get_world_generator(),
    )
