"""
Mock text generator: deterministic replies when GEMINI_API_KEY is not set.
Recognizes the three prompt kinds (interview question, extraction, name suggestions) by their
opening lines so the whole interview runs end to end locally.
"""
import hashlib
import json
import logging
import re

from worldforge.services.extraction_service import EXTRACTION_PREFIX
from worldforge.services.prompt_builder import NAME_SUGGESTION_PREFIX

logger = logging.getLogger(__name__)

_QA = re.compile(r"^Q: (.+?)\nA: (.*?)$", re.MULTILINE)

_TECH_KEYWORDS = (
    ("futuristic", ("space", "star", "future", "cyber", "sci-fi", "laser", "android")),
    ("industrial", ("steam", "industrial", "factory", "railway")),
    ("modern", ("modern", "computer", "internet")),
    ("renaissance", ("renaissance", "printing", "gunpowder")),
    ("stone_age", ("stone", "primitive", "tribal")),
    ("medieval", ("medieval", "sword", "castle", "knight", "feudal")),
)
_MAGIC_LEVELS = ("dominant", "common", "rare", "none")

_NAME_PARTS = (
    ("Aer", "Bel", "Cor", "Dra", "Eld", "Fen", "Gal", "Hal", "Ith", "Kor", "Lum", "Myr"),
    ("a", "o", "i", "e", "u", "ae"),
    ("thia", "dor", "wyn", "mar", "heim", "ros", "vale", "gard", "nia", "reth"),
)


def _guess_tech_level(text: str) -> str:
    lower = text.lower()
    for level, words in _TECH_KEYWORDS:
        if any(w in lower for w in words):
            return level
    return "mixed"


def _guess_magic_level(text: str) -> str | None:
    lower = text.lower()
    if not lower.strip():
        return None
    if "no magic" in lower:
        return "none"
    for level in _MAGIC_LEVELS:
        if level in lower:
            return level
    return "rare"


def _split_list(text: str) -> list[str]:
    parts = re.split(r",|\band\b|;", text or "")
    return [p.strip().rstrip(".") for p in parts if p.strip().rstrip(".")]


def _mock_extraction(prompt: str) -> str:
    qa = {q.strip(): a.strip() for q, a in _QA.findall(prompt)}
    get = qa.get
    data = {
        "theme": get("Core Concept") or "fantasy",
        "tone": get("Tone"),
        "inspirations": _split_list(get("Inspirations", "")),
        "uniqueAspect": get("Unique Aspect"),
        "conflicts": _split_list(get("Major Conflicts", "")),
        "techLevel": _guess_tech_level(" ".join([get("Technology Level", ""), get("Core Concept", "")])),
        "magicLevel": _guess_magic_level(get("Magic Level", "")),
        "advancedTech": get("Advanced Technology"),
        "magicImpact": get("Magic Impact"),
        "planetSize": get("Planet Size") or "medium",
        "climateRange": get("Climate"),
        "landWaterRatio": get("Land and Water"),
        "geologicalAge": None,
        "waterLevel": None,
        "naturalSatellites": get("Moons"),
        "uniqueFeatures": _split_list(get("Unique Features", "")),
        "extremeEnvironments": _split_list(get("Extreme Environments", "")),
        "sentientSpecies": _split_list(get("Sentient Species", "")) or ["humans"],
        "politicalStructure": get("Political Structure"),
        "culturalValues": _split_list(get("Cultural Values", "")),
        "economicSystem": get("Economic System"),
        "religions": _split_list(get("Religions", "")),
        "taboos": _split_list(get("Taboos", "")),
    }
    return json.dumps(data)


def _mock_names(prompt: str) -> str:
    digest = hashlib.sha256(prompt.encode()).digest()
    names = []
    for i in range(3):
        _, b, c = digest[i * 3:i * 3 + 3]
        # distinct first syllable per name
        names.append(
            _NAME_PARTS[0][(digest[0] + i * 4) % len(_NAME_PARTS[0])]
            + _NAME_PARTS[1][b % len(_NAME_PARTS[1])]
            + _NAME_PARTS[2][c % len(_NAME_PARTS[2])]
        )
    return "\n".join(names)


def _mock_question(prompt: str) -> str:
    topic = re.search(r"^Next topic: (.+)$", prompt, re.MULTILINE)
    about = re.search(r"^About this topic: (.+)$", prompt, re.MULTILINE)
    name = topic.group(1).strip() if topic else "your world"
    detail = about.group(1).strip().rstrip(".") if about else "anything you have in mind"
    return f"[Mock] Tell me about {name.lower()}: {detail[0].lower() + detail[1:]}?"


class MockTextGenerator:
    """Placeholder replies so the interview runs without an API key."""

    def generate(self, prompt: str) -> str:
        if prompt.startswith(EXTRACTION_PREFIX):
            return _mock_extraction(prompt)
        if prompt.startswith(NAME_SUGGESTION_PREFIX):
            return _mock_names(prompt)
        return _mock_question(prompt)


def get_mock_text_generator() -> MockTextGenerator:
    return MockTextGenerator()
