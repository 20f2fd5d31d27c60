"""
Interview service: the world-creation state machine.

    NotStarted -> InProgress(0..N-1) -> Review (index == N) -> Completed

Every call reloads the interview and its answers from the repository, so any process can serve
any turn and an interrupted session resumes where it stopped. Prompts for the next question are
generated before anything is written: a failed model call leaves the interview untouched.
Per-user calls must be serialized by the caller (repository rows are last-write-wins).
"""
import logging
import re
from uuid import UUID

from worldforge.exceptions import (
    InterviewNotFoundError,
    InterviewStateError,
    InvalidAnswerError,
    InvalidWorldNameError,
    UnknownTopicError,
    UpstreamError,
    WorldNameTakenError,
)
from worldforge.generation import WorldGenerator
from worldforge.llm.base import TextGenerator
from worldforge.repositories.base import InterviewRepository, WorldRepository
from worldforge.schemas.interview import (
    Completed,
    InProgress,
    InterviewReply,
    InterviewSession,
    InterviewStatus,
    Review,
    phase_of,
)
from worldforge.schemas.world import World, WorldConfiguration
from worldforge.services.extraction_service import ExtractionService
from worldforge.services.name_resolution import NameResolver
from worldforge.services.prompt_builder import build_interview_prompt, build_review_summary
from worldforge.services.topic_catalog import (
    ALL_TOPICS,
    TOTAL_TOPICS,
    WORLD_NAME_TOPIC,
    Topic,
    find_topic,
    topic_index,
    topic_names,
)
from worldforge.services.validation import ensure_valid_configuration
from worldforge.services.world_creation import WorldCreationTrigger

logger = logging.getLogger(__name__)

WELCOME = (
    "Welcome, creator. We shall begin crafting your world together. "
    "I will ask you questions, and you may respond using the \"reply\" command.\n\n"
)
ALREADY_COMPLETE = "The interview is already complete."
EMPTY_ANSWER = "I didn't catch an answer there. Tell me a little about {topic}."
REVIEW_USAGE = (
    "Please type 'reply yes' to create your world, "
    "or use 'reply change <topic> to <value>' to modify an answer."
)
CONFIRM_WORDS = frozenset({"yes", "confirm", "create", "looks good"})

_CHANGE_COMMAND = re.compile(r"^\s*change\s+(.+?)\s+to\s+(.+?)\s*$", re.IGNORECASE | re.DOTALL)


def parse_change_command(text: str) -> tuple[str, str] | None:
    """'change <topic> to <value>' -> (topic, value); split on the first ' to '."""
    m = _CHANGE_COMMAND.match(text or "")
    if not m:
        return None
    return m.group(1).strip(), m.group(2).strip()


class InterviewService:
    def __init__(
        self,
        client: TextGenerator,
        repo: InterviewRepository,
        world_repo: WorldRepository,
        generator: WorldGenerator | None = None,
    ):
        self._client = client
        self._repo = repo
        self._extractor = ExtractionService(client)
        self._names = NameResolver(client, repo)
        self._trigger = WorldCreationTrigger(world_repo, repo, generator)

    # ---- public operations -------------------------------------------------

    def start(self, user_id: UUID) -> tuple[InterviewSession, str]:
        """Begin an interview, or resume the user's unfinished one (same interview id)."""
        existing = self._repo.get_interview(user_id)
        if existing is not None and existing.status == InterviewStatus.IN_PROGRESS:
            logger.info("start: resuming interview %s for user %s", existing.id, user_id)
            return self.resume(user_id)

        interview = self._repo.create_interview(user_id)
        session = InterviewSession(interview=interview, phase=phase_of(interview, TOTAL_TOPICS))
        question = self._ask(build_interview_prompt(0, TOTAL_TOPICS, {}, ALL_TOPICS[0]))
        self._repo.update_interview_status(interview.id, InterviewStatus.IN_PROGRESS)
        session.interview.status = InterviewStatus.IN_PROGRESS
        logger.info("start: interview %s for user %s", interview.id, user_id)
        return session, WELCOME + question

    def process(self, user_id: UUID, text: str) -> InterviewReply:
        """Handle one player reply in whatever phase the interview is in."""
        session = self._require_session(user_id)
        if isinstance(session.phase, Completed):
            return InterviewReply(ALREADY_COMPLETE, completed=True)

        change = parse_change_command(text)
        if change is not None:
            return self._handle_change(session, *change)
        if isinstance(session.phase, Review):
            return self._handle_review(session, text)
        return self._handle_answer(session, text)

    def resume(self, user_id: UUID) -> tuple[InterviewSession, str]:
        """Reload the session and regenerate (not replay) the prompt for where it stopped."""
        session = self._require_session(user_id)
        if isinstance(session.phase, Completed):
            return session, ALREADY_COMPLETE
        if isinstance(session.phase, Review):
            return session, build_review_summary(session.answers)
        index = session.phase.index
        question = self._ask(build_interview_prompt(
            index, TOTAL_TOPICS, session.answers, ALL_TOPICS[index], session.last_answer
        ))
        return session, question

    def edit(self, user_id: UUID, topic_name: str, value: str, interview_id: UUID | None = None) -> InterviewSession:
        """Overwrite the answer for a catalog topic, in any phase."""
        session = self._require_session(user_id)
        if interview_id is not None and session.id != interview_id:
            raise InterviewNotFoundError("Interview not found or does not belong to this user")
        topic = find_topic(topic_name)
        if topic is None:
            raise UnknownTopicError(topic_name)
        value = self._validate_edit(session, topic, value)
        self._save_edit(session, topic, value)
        return session

    def complete(self, user_id: UUID, interview_id: UUID) -> WorldConfiguration:
        """Configuration of a completed interview."""
        interview = self._repo.get_interview(user_id)
        if interview is None or interview.id != interview_id:
            raise InterviewNotFoundError("Interview not found")
        if interview.status != InterviewStatus.COMPLETED:
            raise InterviewStateError("Interview is not complete")
        config = self._repo.get_configuration_by_user_id(user_id)
        if config is None or config.interview_id != interview_id:
            raise InterviewNotFoundError("No configuration stored for this interview")
        return config

    def progress(self, user_id: UUID) -> float:
        """Fraction of topics answered; 1.0 once completed, 0.0 without an interview."""
        interview = self._repo.get_interview(user_id)
        if interview is None:
            return 0.0
        if interview.status == InterviewStatus.COMPLETED:
            return 1.0
        return min(interview.current_question_index, TOTAL_TOPICS) / TOTAL_TOPICS

    def active_session(self, user_id: UUID) -> InterviewSession | None:
        return self._load_session(user_id)

    def regenerate_world(self, world_id: UUID) -> World:
        """Re-run procedural generation for a world created without it."""
        return self._trigger.regenerate(world_id)

    def ensure_world(self, user_id: UUID) -> World:
        """Create the world for a stored configuration that never got one (crash after completion)."""
        config = self._repo.get_configuration_by_user_id(user_id)
        if config is None:
            raise InterviewNotFoundError("No world configuration for this user")
        if config.world_id is not None:
            return self._trigger.regenerate(config.world_id)
        return self._trigger.create_world(config, user_id)

    # ---- turn handlers -----------------------------------------------------

    def _handle_answer(self, session: InterviewSession, text: str) -> InterviewReply:
        index = session.phase.index
        topic = ALL_TOPICS[index]
        answer = (text or "").strip()

        if topic.name == WORLD_NAME_TOPIC:
            check = self._names.resolve(answer, session.answers, session.id)
            if not check.accepted:
                logger.info("Interview %s: world name %r rejected", session.id, answer)
                return InterviewReply(check.message)
            answer = check.name
        elif not answer:
            return InterviewReply(EMPTY_ANSWER.format(topic=topic.name.lower()))

        session.answers[topic.name] = answer
        next_index = index + 1
        if next_index < TOTAL_TOPICS:
            reply = self._ask(build_interview_prompt(
                next_index, TOTAL_TOPICS, session.answers, ALL_TOPICS[next_index], answer
            ))
        else:
            reply = build_review_summary(session.answers)

        self._repo.save_answer(session.id, index, answer)
        self._repo.update_question_index(session.id, next_index)
        if session.interview.status == InterviewStatus.NOT_STARTED:
            self._repo.update_interview_status(session.id, InterviewStatus.IN_PROGRESS)
        logger.info("Interview %s: answered %s (%d/%d)", session.id, topic.name, next_index, TOTAL_TOPICS)
        return InterviewReply(reply)

    def _handle_change(self, session: InterviewSession, topic_text: str, value: str) -> InterviewReply:
        in_review = isinstance(session.phase, Review)
        topic = find_topic(topic_text)
        if topic is None:
            message = f"I don't know a topic called '{topic_text}'. Topics you can change: {', '.join(topic_names())}."
            return InterviewReply(self._with_context(session, message))
        try:
            value = self._validate_edit(session, topic, value)
        except (InvalidAnswerError, WorldNameTakenError) as e:
            return InterviewReply(self._with_context(session, str(e)))

        answers = dict(session.answers)
        answers[topic.name] = value
        if in_review:
            follow_up = build_review_summary(answers)
        else:
            index = session.phase.index
            follow_up = self._ask(build_interview_prompt(
                index, TOTAL_TOPICS, answers, ALL_TOPICS[index], session.last_answer
            ))
        self._save_edit(session, topic, value)
        return InterviewReply(f"Updated {topic.name} to '{value}'.\n\n{follow_up}")

    def _handle_review(self, session: InterviewSession, text: str) -> InterviewReply:
        if (text or "").strip().lower() in CONFIRM_WORDS:
            return self._finalize(session)
        return InterviewReply(f"{REVIEW_USAGE}\n\n{build_review_summary(session.answers)}")

    def _finalize(self, session: InterviewSession) -> InterviewReply:
        user_id = session.interview.user_id
        name = session.answers.get(WORLD_NAME_TOPIC, "")
        config = self._extractor.extract(session.answers, session.id, user_id, name)
        ensure_valid_configuration(config)

        # The name may have been claimed by someone else since it was answered
        check = self._names.resolve(name, session.answers, session.id)
        if not check.accepted:
            message = f"{check.message}\n\nUse 'reply change world name to <name>' to pick another."
            return InterviewReply(f"{message}\n\n{build_review_summary(session.answers)}")
        config.world_name = check.name

        self._repo.save_configuration(config)
        self._repo.update_interview_status(session.id, InterviewStatus.COMPLETED)
        logger.info("Interview %s completed; creating world %r", session.id, config.world_name)

        world = self._trigger.create_world(config, user_id)
        return InterviewReply(
            "Thank you! I have gathered all the information, and your world has been created. "
            f"Your world is being forged. You may now enter it using 'enter {world.name}'.",
            completed=True,
            world_id=world.id,
        )

    # ---- helpers -----------------------------------------------------------

    def _validate_edit(self, session: InterviewSession, topic: Topic, value: str) -> str:
        """Trimmed value to store for topic; raises instead of writing anything when it is rejected."""
        value = (value or "").strip()
        if topic.name == WORLD_NAME_TOPIC:
            check = self._names.resolve(value, session.answers, session.id)
            if not check.accepted:
                if check.taken:
                    raise WorldNameTakenError(check.message, check.suggestions)
                raise InvalidWorldNameError(check.message)
            return check.name
        if not value:
            raise InvalidAnswerError(EMPTY_ANSWER.format(topic=topic.name.lower()))
        return value

    def _save_edit(self, session: InterviewSession, topic: Topic, value: str) -> None:
        self._repo.save_answer(session.id, topic_index(topic.name), value)
        session.answers[topic.name] = value
        logger.info("Interview %s: edited %s", session.id, topic.name)

    def _with_context(self, session: InterviewSession, message: str) -> str:
        if isinstance(session.phase, Review):
            return f"{message}\n\n{build_review_summary(session.answers)}"
        if isinstance(session.phase, InProgress):
            return f"{message}\n\nWe were talking about: {ALL_TOPICS[session.phase.index].name}."
        return message

    def _ask(self, prompt: str) -> str:
        try:
            return self._client.generate(prompt).strip()
        except Exception as e:
            logger.exception("Question generation failed")
            raise UpstreamError(f"Failed to generate question: {e}") from e

    def _load_session(self, user_id: UUID) -> InterviewSession | None:
        interview = self._repo.get_interview(user_id)
        if interview is None:
            return None
        answers: dict[str, str] = {}
        by_index: dict[int, str] = {}
        for a in self._repo.get_answers(interview.id):
            if 0 <= a.question_index < TOTAL_TOPICS:
                answers[ALL_TOPICS[a.question_index].name] = a.answer_text
                by_index[a.question_index] = a.answer_text
        return InterviewSession(
            interview=interview,
            phase=phase_of(interview, TOTAL_TOPICS),
            answers=answers,
            last_answer=by_index.get(interview.current_question_index - 1),
        )

    def _require_session(self, user_id: UUID) -> InterviewSession:
        session = self._load_session(user_id)
        if session is None:
            raise InterviewNotFoundError("No active interview found")
        return session
