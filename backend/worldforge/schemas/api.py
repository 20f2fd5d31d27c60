"""
Request/response bodies for the interview and topics APIs.
"""
from pydantic import BaseModel, field_validator

from worldforge.schemas.interview import InterviewStatus


class ReplyRequest(BaseModel):
    text: str


class EditRequest(BaseModel):
    topic: str
    value: str
    interview_id: str | None = None  # UUID

    @field_validator("topic")
    @classmethod
    def topic_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("topic must not be empty")
        return v.strip()


class InterviewResponse(BaseModel):
    interview_id: str
    status: InterviewStatus
    current_question_index: int
    total_topics: int
    message: str


class ReplyResponse(BaseModel):
    message: str
    completed: bool = False
    world_id: str | None = None
    progress: float


class EditResponse(BaseModel):
    interview_id: str
    topic: str
    value: str


class ProgressResponse(BaseModel):
    progress: float  # 0..1
    answered: int
    total_topics: int
    status: InterviewStatus | None = None


class TopicResponse(BaseModel):
    category: str
    name: str
    description: str


class TopicListResponse(BaseModel):
    items: list[TopicResponse]
