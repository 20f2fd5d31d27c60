"""
Unit tests for the text generation clients: retry classification, model resolution, the factory's
mock fallback, Gemini generate() with a patched SDK call, and the deterministic mock.
"""
import uuid

import pytest

from worldforge.config import normalize_gen_model
from worldforge.llm.gemini_impl import _is_retryable
from worldforge.llm.mock_impl import MockTextGenerator
from worldforge.services.extraction_service import ExtractionService, build_extraction_prompt, parse_extraction_response
from worldforge.services.name_resolution import format_error, parse_suggestions
from worldforge.services.prompt_builder import build_interview_prompt, build_name_suggestion_prompt
from worldforge.services.topic_catalog import ALL_TOPICS, TOTAL_TOPICS
from worldforge.services.validation import validate_configuration


def _response(text, prompt_tokens=10, output_tokens=20):
    usage = type("Usage", (), {"prompt_token_count": prompt_tokens, "candidates_token_count": output_tokens})()
    return type("Response", (), {"text": text, "usage_metadata": usage})()


@pytest.mark.parametrize(
    "message",
    ["429 RESOURCE_EXHAUSTED", "Rate limit exceeded", "503 UNAVAILABLE", "500 Internal error", "model overloaded"],
)
def test_is_retryable_transient(message):
    assert _is_retryable(RuntimeError(message))


@pytest.mark.parametrize("message", ["400 INVALID_ARGUMENT", "403 PERMISSION_DENIED", "API key not valid"])
def test_is_retryable_permanent(message):
    assert not _is_retryable(RuntimeError(message))


def test_normalize_gen_model():
    """Retired or empty model ids map to gemini-2.5-flash; supported ids are kept."""
    assert normalize_gen_model("gemini-1.5-flash-002") == "gemini-2.5-flash"
    assert normalize_gen_model("gemini-2.0-flash") == "gemini-2.5-flash"
    assert normalize_gen_model("   ") == "gemini-2.5-flash"
    assert normalize_gen_model("gemini-2.5-pro") == "gemini-2.5-pro"


def test_get_text_generator_falls_back_to_mock(monkeypatch):
    """Without an API key the factory returns the mock generator."""
    import worldforge.llm.gemini_impl as gemini_impl
    from worldforge.llm import get_text_generator

    monkeypatch.setattr(gemini_impl, "get_gemini_api_key", lambda: "")
    assert isinstance(get_text_generator(), MockTextGenerator)


def test_get_text_generator_returns_gemini_when_key_set(monkeypatch):
    pytest.importorskip("google.genai")
    import worldforge.llm.gemini_impl as gemini_impl
    from worldforge.llm import get_text_generator

    monkeypatch.setattr(gemini_impl, "get_gemini_api_key", lambda: "test-key-for-test")
    generator = get_text_generator()
    assert isinstance(generator, gemini_impl.GeminiTextGenerator)


def test_generate_returns_stripped_text(monkeypatch):
    pytest.importorskip("google.genai")
    from worldforge.llm.gemini_impl import GeminiTextGenerator

    generator = GeminiTextGenerator(model_name="gemini-2.5-flash", api_key="test-key")
    seen = {}

    def fake_generate_content(model, contents, config):
        seen["model"] = model
        seen["contents"] = contents
        return _response("  What shapes your world?  ")

    monkeypatch.setattr(generator._client.models, "generate_content", fake_generate_content)
    assert generator.generate("prompt") == "What shapes your world?"
    assert seen == {"model": "gemini-2.5-flash", "contents": "prompt"}


def test_generate_retries_transient_errors(monkeypatch):
    """A 503 is retried (tenacity) and the second attempt's text is returned."""
    pytest.importorskip("google.genai")
    from worldforge.llm.gemini_impl import GeminiTextGenerator

    generator = GeminiTextGenerator(model_name="gemini-2.5-flash", api_key="test-key")
    calls = []

    def flaky(model, contents, config):
        calls.append(model)
        if len(calls) == 1:
            raise RuntimeError("503 UNAVAILABLE")
        return _response("Second time lucky?")

    monkeypatch.setattr(generator._client.models, "generate_content", flaky)
    assert generator.generate("prompt") == "Second time lucky?"
    assert len(calls) == 2


def test_generate_does_not_retry_permanent_errors(monkeypatch):
    pytest.importorskip("google.genai")
    from worldforge.llm.gemini_impl import GeminiTextGenerator

    generator = GeminiTextGenerator(model_name="gemini-2.5-flash", api_key="test-key")
    calls = []

    def bad_request(model, contents, config):
        calls.append(model)
        raise RuntimeError("400 INVALID_ARGUMENT")

    monkeypatch.setattr(generator._client.models, "generate_content", bad_request)
    with pytest.raises(RuntimeError, match="400"):
        generator.generate("prompt")
    assert len(calls) == 1


def test_generate_empty_response_raises(monkeypatch):
    pytest.importorskip("google.genai")
    from worldforge.llm.gemini_impl import GeminiTextGenerator

    generator = GeminiTextGenerator(model_name="gemini-2.5-flash", api_key="test-key")
    monkeypatch.setattr(generator._client.models, "generate_content", lambda model, contents, config: _response(""))
    with pytest.raises(RuntimeError, match="empty"):
        generator.generate("prompt")


def test_mock_question_mentions_topic():
    prompt = build_interview_prompt(0, TOTAL_TOPICS, {}, ALL_TOPICS[0])
    reply = MockTextGenerator().generate(prompt)
    assert reply.startswith("[Mock]")
    assert "core concept" in reply


def test_mock_extraction_yields_valid_configuration():
    """Mock extraction output parses and passes validation, so local runs can finish an interview."""
    answers = {
        "Core Concept": "Medieval kingdoms under a dying sun",
        "Magic Level": "Magic is rare and feared",
        "Climate": "Frozen north, temperate south",
        "Sentient Species": "Humans, dwarves and river spirits",
    }
    raw = MockTextGenerator().generate(build_extraction_prompt(answers))
    parsed = parse_extraction_response(raw)
    assert parsed.tech_level == "medieval"
    assert parsed.magic_level == "rare"
    assert parsed.sentient_species == ["Humans", "dwarves", "river spirits"]

    config = ExtractionService(MockTextGenerator()).extract(answers, uuid.uuid4(), uuid.uuid4(), "Aethoria")
    assert validate_configuration(config) == []
    assert config.planet_size == "medium"


def test_mock_names_are_valid_and_deterministic():
    prompt = build_name_suggestion_prompt({"Core Concept": "Sky islands"})
    first = MockTextGenerator().generate(prompt)
    assert first == MockTextGenerator().generate(prompt)
    names = parse_suggestions(first)
    assert len(names) == 3
    assert all(format_error(n) is None for n in names)
