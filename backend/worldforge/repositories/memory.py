"""
In-memory repositories with the same semantics as the SQL ones (upserts, case-insensitive names).
Used by the test suite and handy for running the engine without a database.
"""
import threading
import uuid
from datetime import datetime, timezone
from uuid import UUID

from worldforge.exceptions import InterviewNotFoundError
from worldforge.schemas.interview import Answer, Interview, InterviewStatus
from worldforge.schemas.world import World, WorldConfiguration


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryInterviewRepository:
    def __init__(self):
        self._lock = threading.Lock()
        self._interviews: dict[UUID, Interview] = {}
        self._answers: dict[UUID, dict[int, Answer]] = {}
        self._configs: dict[UUID, WorldConfiguration] = {}

    def _require(self, interview_id: UUID) -> Interview:
        interview = self._interviews.get(interview_id)
        if interview is None:
            raise InterviewNotFoundError(f"Interview {interview_id} not found")
        return interview

    def create_interview(self, user_id: UUID) -> Interview:
        with self._lock:
            for interview in self._interviews.values():
                if interview.user_id == user_id and interview.status != InterviewStatus.COMPLETED:
                    return interview.model_copy()
            now = _now()
            interview = Interview(id=uuid.uuid4(), user_id=user_id, created_at=now, updated_at=now)
            self._interviews[interview.id] = interview
            self._answers[interview.id] = {}
            return interview.model_copy()

    def get_interview(self, user_id: UUID) -> Interview | None:
        with self._lock:
            mine = [i for i in self._interviews.values() if i.user_id == user_id]
            if not mine:
                return None
            active = [i for i in mine if i.status != InterviewStatus.COMPLETED]
            pick = max(active or mine, key=lambda i: i.created_at)
            return pick.model_copy()

    def update_interview_status(self, interview_id: UUID, status: InterviewStatus) -> None:
        with self._lock:
            interview = self._require(interview_id)
            interview.status = InterviewStatus(status)
            interview.updated_at = _now()

    def update_question_index(self, interview_id: UUID, index: int) -> None:
        with self._lock:
            interview = self._require(interview_id)
            interview.current_question_index = index
            interview.updated_at = _now()

    def save_answer(self, interview_id: UUID, question_index: int, text: str) -> None:
        with self._lock:
            self._require(interview_id)
            self._answers[interview_id][question_index] = Answer(
                interview_id=interview_id,
                question_index=question_index,
                answer_text=text,
                created_at=_now(),
            )

    def get_answers(self, interview_id: UUID) -> list[Answer]:
        with self._lock:
            answers = self._answers.get(interview_id, {})
            return [answers[i].model_copy() for i in sorted(answers)]

    def save_configuration(self, config: WorldConfiguration) -> None:
        with self._lock:
            self._configs[config.id] = config.model_copy(deep=True)

    def get_configuration_by_user_id(self, user_id: UUID) -> WorldConfiguration | None:
        with self._lock:
            mine = [c for c in self._configs.values() if c.created_by == user_id]
            if not mine:
                return None
            return max(mine, key=lambda c: c.created_at).model_copy(deep=True)

    def get_configuration_by_world_id(self, world_id: UUID) -> WorldConfiguration | None:
        with self._lock:
            for c in self._configs.values():
                if c.world_id == world_id:
                    return c.model_copy(deep=True)
            return None

    def is_world_name_taken(self, name: str, exclude_interview_id: UUID | None = None) -> bool:
        wanted = (name or "").strip().lower()
        with self._lock:
            return any(
                c.world_name.strip().lower() == wanted and c.interview_id != exclude_interview_id
                for c in self._configs.values()
            )


class InMemoryWorldRepository:
    def __init__(self):
        self.worlds: dict[UUID, World] = {}

    def create_world(self, world: World) -> None:
        self.worlds[world.id] = world.model_copy(deep=True)

    def update_world(self, world: World) -> None:
        if world.id not in self.worlds:
            raise LookupError(f"World {world.id} not found")
        self.worlds[world.id] = world.model_copy(deep=True)

    def get_world(self, world_id: UUID) -> World | None:
        world = self.worlds.get(world_id)
        return world.model_copy(deep=True) if world else None
