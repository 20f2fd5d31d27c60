"""
Text generation clients: Gemini when GEMINI_API_KEY is set, otherwise the deterministic mock.
"""
import logging

from worldforge.llm.base import TextGenerator

logger = logging.getLogger(__name__)


def get_text_generator() -> TextGenerator:
    """Return the Gemini client, or the mock when no API key is configured."""
    from worldforge.config import settings
    from worldforge.llm.gemini_impl import GeminiTextGenerator, get_gemini_api_key

    key = get_gemini_api_key()
    if not key:
        logger.warning("GEMINI_API_KEY not set; using mock text generator.")
        from worldforge.llm.mock_impl import get_mock_text_generator
        return get_mock_text_generator()
    logger.info("Using LLM: %s (Gemini)", settings.active_llm_model)
    return GeminiTextGenerator(api_key=key)


__all__ = ["TextGenerator", "get_text_generator"]
