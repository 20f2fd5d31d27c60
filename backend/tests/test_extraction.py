"""
Unit tests for extraction: prompt contents, tolerant JSON parsing, and the configuration it builds.
"""
import json
import uuid

import pytest

from worldforge.exceptions import ExtractionError, UpstreamError
from worldforge.services.extraction_service import (
    EXTRACTION_PREFIX,
    ExtractionService,
    build_extraction_prompt,
    normalize_enum_value,
    parse_extraction_response,
    strip_code_fences,
)


class _Fixed:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error

    def generate(self, prompt):
        if self.error:
            raise self.error
        return self.reply


def test_prompt_lists_answers_in_catalog_order():
    """Answers appear as Q/A pairs in catalog order regardless of dict order."""
    prompt = build_extraction_prompt({"Climate": "Frozen", "Core Concept": "Ice age survival"})
    assert prompt.startswith(EXTRACTION_PREFIX)
    assert prompt.index("Q: Core Concept\nA: Ice age survival") < prompt.index("Q: Climate\nA: Frozen")
    assert '"sentientSpecies"' in prompt


def test_strip_code_fences_json_block():
    raw = '```json\n{"theme": "noir"}\n```'
    assert strip_code_fences(raw) == '{"theme": "noir"}'


def test_strip_code_fences_surrounding_prose():
    raw = 'Here you go:\n{"theme": "noir"}\nHope that helps!'
    assert strip_code_fences(raw) == '{"theme": "noir"}'


def test_parse_accepts_fenced_json():
    parsed = parse_extraction_response('```\n{"theme": "noir", "sentientSpecies": "humans"}\n```')
    assert parsed.theme == "noir"
    assert parsed.sentient_species == ["humans"]


@pytest.mark.parametrize("raw", ["", "   ", "not json at all", "[1, 2, 3]", '{"theme": '])
def test_parse_rejects_garbage(raw):
    """Empty, non-JSON and non-object replies are hard errors."""
    with pytest.raises(ExtractionError):
        parse_extraction_response(raw)


def test_parse_rejects_wrong_types():
    with pytest.raises(ExtractionError):
        parse_extraction_response('{"inspirations": {"a": 1}}')


def test_parse_ignores_unknown_keys_and_nulls():
    parsed = parse_extraction_response('{"theme": null, "mood": "dark", "religions": null}')
    assert parsed.theme is None
    assert parsed.religions is None


@pytest.mark.parametrize(
    "value,expected",
    [("Stone Age", "stone_age"), ("stone-age", "stone_age"), (" Medieval ", "medieval"), (None, ""), ("", "")],
)
def test_normalize_enum_value(value, expected):
    assert normalize_enum_value(value) == expected


def test_extract_builds_configuration_with_derived_parameters():
    reply = json.dumps({
        "theme": " cyberpunk ",
        "techLevel": "Futuristic",
        "magicLevel": "None",
        "planetSize": "small",
        "climateRange": "desert",
        "sentientSpecies": ["Humans", " ", "Androids"],
        "naturalSatellites": "MANY",
    })
    interview_id, user_id = uuid.uuid4(), uuid.uuid4()
    config = ExtractionService(_Fixed(reply)).extract({"Core Concept": "Neon"}, interview_id, user_id, " Neonia ")

    assert config.interview_id == interview_id
    assert config.created_by == user_id
    assert config.world_name == "Neonia"
    assert config.theme == "cyberpunk"
    assert config.tech_level == "futuristic"
    assert config.magic_level == "none"
    assert config.sentient_species == ["Humans", "Androids"]
    assert config.natural_satellites == "many"
    assert config.biome_weights == {"desert": 0.6, "arid_scrubland": 0.4}
    assert config.resource_distribution["energy_crystals"] == 0.3
    assert config.species_start_attributes["Humans"]["adaptability"] == 0.8
    assert config.species_start_attributes["Androids"] == {"adaptability": 0.6, "intelligence": 0.6, "strength": 0.6}


def test_extract_wraps_client_failure():
    service = ExtractionService(_Fixed(error=RuntimeError("429 rate limit")))
    with pytest.raises(UpstreamError) as exc_info:
        service.extract({}, uuid.uuid4(), uuid.uuid4(), "Name")
    assert not isinstance(exc_info.value, ExtractionError)


def test_extract_unparseable_reply_is_extraction_error():
    service = ExtractionService(_Fixed("Sorry, no."))
    with pytest.raises(ExtractionError):
        service.extract({}, uuid.uuid4(), uuid.uuid4(), "Name")
