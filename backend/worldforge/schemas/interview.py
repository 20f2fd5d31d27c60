"""
Interview domain types shared by the repositories and the interview service.
Phase is computed once from the persisted status + index (see phase_of) and matched on by type.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel


class InterviewStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Interview(BaseModel):
    id: UUID
    user_id: UUID
    status: InterviewStatus = InterviewStatus.NOT_STARTED
    current_question_index: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class Answer(BaseModel):
    interview_id: UUID
    question_index: int
    answer_text: str
    created_at: datetime

    class Config:
        from_attributes = True


@dataclass(frozen=True)
class InProgress:
    index: int


@dataclass(frozen=True)
class Review:
    pass


@dataclass(frozen=True)
class Completed:
    pass


Phase = InProgress | Review | Completed


def phase_of(interview: Interview, total_topics: int) -> Phase:
    """Single place where status and index are turned into a phase."""
    if interview.status == InterviewStatus.COMPLETED:
        return Completed()
    if interview.current_question_index >= total_topics:
        return Review()
    return InProgress(index=max(0, interview.current_question_index))


@dataclass
class InterviewSession:
    """In-memory view of one interview rebuilt from the repository on every call."""
    interview: Interview
    phase: Phase
    answers: dict[str, str] = field(default_factory=dict)  # topic name -> answer text
    last_answer: str | None = None

    @property
    def id(self) -> UUID:
        return self.interview.id


@dataclass
class InterviewReply:
    """What one turn returns to the transport: the text to show and whether the interview finished."""
    message: str
    completed: bool = False
    world_id: UUID | None = None
