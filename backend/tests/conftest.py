"""
Shared fixtures: a scripted text generator and in-memory repositories, so the interview engine
runs without a database or an API key. The SQL tests build their own in-memory SQLite engine.
"""
import json
import os
import uuid

import pytest

# Keep imports of worldforge.database from touching a real database or the Gemini API
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["GEMINI_API_KEY"] = ""

from worldforge.repositories import InMemoryInterviewRepository, InMemoryWorldRepository  # noqa: E402
from worldforge.services.extraction_service import EXTRACTION_PREFIX  # noqa: E402
from worldforge.services.interview_service import InterviewService  # noqa: E402
from worldforge.services.prompt_builder import NAME_SUGGESTION_PREFIX  # noqa: E402

VALID_EXTRACTION = {
    "theme": "high fantasy",
    "tone": "hopeful",
    "inspirations": ["Tolkien", "Earthsea"],
    "uniqueAspect": "The sky is an ocean",
    "conflicts": ["Elves against the storm-kings"],
    "techLevel": "Medieval",
    "magicLevel": "common",
    "advancedTech": "Clockwork gliders",
    "magicImpact": "Wind mages steer the harvest",
    "planetSize": "Earth-like",
    "climateRange": "Temperate with tropical islands",
    "landWaterRatio": "Mostly water",
    "geologicalAge": "young",
    "waterLevel": "high",
    "naturalSatellites": 2,
    "uniqueFeatures": ["Floating mountains"],
    "extremeEnvironments": ["The Howling Waste"],
    "sentientSpecies": ["Humans", "High Elves"],
    "politicalStructure": "Feudal kingdoms",
    "culturalValues": ["honor"],
    "economicSystem": "Coin and barter",
    "religions": ["The Tide Mother"],
    "taboos": "Breaking an oath",
}


class ScriptedGenerator:
    """TextGenerator double: canned replies per prompt kind, records prompts, can be told to fail."""

    def __init__(self, extraction: str | None = None, names: str = "Nova Prime\nEldmar\nQuill Haven"):
        self.extraction = extraction if extraction is not None else json.dumps(VALID_EXTRACTION)
        self.names = names
        self.fail = False
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise RuntimeError("503 Service Unavailable")
        if prompt.startswith(EXTRACTION_PREFIX):
            return self.extraction
        if prompt.startswith(NAME_SUGGESTION_PREFIX):
            return self.names
        return f"Question {len(self.prompts)}?"

    @property
    def question_prompts(self) -> list[str]:
        return [
            p for p in self.prompts
            if not p.startswith(EXTRACTION_PREFIX) and not p.startswith(NAME_SUGGESTION_PREFIX)
        ]


@pytest.fixture
def make_generator():
    return ScriptedGenerator


@pytest.fixture
def generator():
    return ScriptedGenerator()


@pytest.fixture
def interview_repo():
    return InMemoryInterviewRepository()


@pytest.fixture
def world_repo():
    return InMemoryWorldRepository()


@pytest.fixture
def service(generator, interview_repo, world_repo):
    return InterviewService(generator, interview_repo, world_repo)


@pytest.fixture
def user_id():
    return uuid.uuid4()
