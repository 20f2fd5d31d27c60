"""
Repository interfaces for interviews, answers, configurations and worlds.
SqlInterviewRepository / SqlWorldRepository back them with SQLAlchemy; the in-memory versions serve
tests and local runs. Writes are last-write-wins; callers serialize access per user.
"""
from typing import Protocol
from uuid import UUID

from worldforge.schemas.interview import Answer, Interview, InterviewStatus
from worldforge.schemas.world import World, WorldConfiguration


class InterviewRepository(Protocol):
    def create_interview(self, user_id: UUID) -> Interview:
        """Return the user's non-completed interview if one exists, else insert a new one."""
        ...

    def get_interview(self, user_id: UUID) -> Interview | None:
        """Most recent interview for the user (any status), or None."""
        ...

    def update_interview_status(self, interview_id: UUID, status: InterviewStatus) -> None:
        ...

    def update_question_index(self, interview_id: UUID, index: int) -> None:
        ...

    def save_answer(self, interview_id: UUID, question_index: int, text: str) -> None:
        """Insert or overwrite the answer for (interview_id, question_index)."""
        ...

    def get_answers(self, interview_id: UUID) -> list[Answer]:
        """Answers ordered by question_index."""
        ...

    def save_configuration(self, config: WorldConfiguration) -> None:
        """Insert or update by config.id."""
        ...

    def get_configuration_by_user_id(self, user_id: UUID) -> WorldConfiguration | None:
        ...

    def get_configuration_by_world_id(self, world_id: UUID) -> WorldConfiguration | None:
        ...

    def is_world_name_taken(self, name: str, exclude_interview_id: UUID | None = None) -> bool:
        """Case-insensitive check across all configurations, optionally ignoring one interview's own."""
        ...


class WorldRepository(Protocol):
    def create_world(self, world: World) -> None:
        ...

    def update_world(self, world: World) -> None:
        ...

    def get_world(self, world_id: UUID) -> World | None:
        ...
