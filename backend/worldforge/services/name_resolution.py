"""
World name resolution: format check, global case-insensitive uniqueness, and alternative
suggestions when the name is taken. Rejections never change interview state; the player just
answers the same topic again.
"""
import logging
import re
from dataclasses import dataclass, field
from uuid import UUID

from worldforge.llm.base import TextGenerator
from worldforge.repositories.base import InterviewRepository
from worldforge.services.prompt_builder import build_name_suggestion_prompt

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100
SUGGESTION_COUNT = 3

_VALID_NAME = re.compile(r"[A-Za-z0-9 \-']+")
_LIST_MARKER = re.compile(r"^[\d\-\*\.\)•]+\s*")

EMPTY_NAME_MESSAGE = "Please provide a name for your world."
INVALID_NAME_MESSAGE = (
    "That world name is not valid. Please use only letters, numbers, spaces, hyphens, "
    f"and apostrophes (max {MAX_NAME_LENGTH} characters)."
)
TAKEN_NAME_MESSAGE = "That world name is already taken. Please choose another name."


@dataclass
class NameCheck:
    """Outcome of resolving a proposed world name. accepted=False carries the re-prompt text."""
    accepted: bool
    name: str
    message: str = ""
    taken: bool = False
    suggestions: list[str] = field(default_factory=list)


def format_error(name: str) -> str | None:
    """User-facing message if the (trimmed) name is malformed, else None."""
    if not name:
        return EMPTY_NAME_MESSAGE
    if len(name) > MAX_NAME_LENGTH or not _VALID_NAME.fullmatch(name):
        return INVALID_NAME_MESSAGE
    return None


def parse_suggestions(raw: str) -> list[str]:
    """One name per line; numbering, bullets and surrounding quotes/asterisks stripped."""
    names: list[str] = []
    for line in (raw or "").splitlines():
        line = _LIST_MARKER.sub("", line.strip()).strip().strip("\"*`").strip()
        if line and line not in names:
            names.append(line)
    return names


class NameResolver:
    def __init__(self, client: TextGenerator, repo: InterviewRepository):
        self._client = client
        self._repo = repo

    def resolve(self, proposed: str, answers: dict[str, str], interview_id: UUID | None = None) -> NameCheck:
        """Accept or reject a proposed name. The configuration saved by interview_id itself never counts as a clash."""
        name = (proposed or "").strip()
        error = format_error(name)
        if error:
            return NameCheck(accepted=False, name=name, message=error)
        if not self._repo.is_world_name_taken(name, exclude_interview_id=interview_id):
            return NameCheck(accepted=True, name=name)

        logger.info("World name %r already taken; requesting alternatives", name)
        suggestions = self.suggest_alternatives(answers)
        message = TAKEN_NAME_MESSAGE
        if suggestions:
            message += "\n\nHere are some alternative suggestions:\n" + "\n".join(suggestions)
        return NameCheck(accepted=False, name=name, message=message, taken=True, suggestions=suggestions)

    def suggest_alternatives(self, answers: dict[str, str]) -> list[str]:
        """Up to three well-formed, untaken names from the model; [] if the call fails."""
        try:
            raw = self._client.generate(build_name_suggestion_prompt(answers))
        except Exception as e:
            logger.warning("Name suggestion call failed: %s", e)
            return []
        usable = [
            s for s in parse_suggestions(raw)
            if format_error(s) is None and not self._repo.is_world_name_taken(s)
        ]
        return usable[:SUGGESTION_COUNT]
