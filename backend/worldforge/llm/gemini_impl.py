"""
Gemini (Google) text generation via google.genai.
Uses GEN_MODEL_NAME (e.g. gemini-2.5-flash) and GEMINI_API_KEY; tenacity retries on 429/5xx.
"""
import logging
import os
import time

from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from worldforge.config import normalize_gen_model, settings

logger = logging.getLogger(__name__)

INTERVIEW_SYSTEM = """You are the world-builder's guide: a patient, curious collaborator helping a player design a new world for a text-based multiplayer game.
Ask exactly one question at a time. Keep questions to 1-2 sentences. Build on what the player already said and never repeat a question they answered.
When asked for structured output (JSON or a list), output only that, with no commentary."""


def _is_retryable(exc: BaseException) -> bool:
    """Retry on 429 (rate limit) and 5xx."""
    msg = str(exc).lower()
    if "429" in msg or "rate limit" in msg or "resource exhausted" in msg:
        return True
    if "500" in msg or "502" in msg or "503" in msg or "overloaded" in msg or "unavailable" in msg:
        return True
    return False


def get_gemini_api_key() -> str:
    """Resolve Gemini API key from settings or env. Never log the key."""
    return (getattr(settings, "gemini_api_key", "") or os.environ.get("GEMINI_API_KEY") or "").strip()


def _safety_settings_none():
    """Worlds are fiction; conflict, war and religion must not be blocked."""
    from google.genai import types
    return [
        types.SafetySetting(category="HARM_CATEGORY_HARASSMENT", threshold="BLOCK_NONE"),
        types.SafetySetting(category="HARM_CATEGORY_HATE_SPEECH", threshold="BLOCK_NONE"),
        types.SafetySetting(category="HARM_CATEGORY_SEXUALLY_EXPLICIT", threshold="BLOCK_ONLY_HIGH"),
        types.SafetySetting(category="HARM_CATEGORY_DANGEROUS_CONTENT", threshold="BLOCK_NONE"),
    ]


class GeminiTextGenerator:
    """Google Gemini implementation of TextGenerator (generate_content, plain text out)."""

    def __init__(
        self,
        model_name: str | None = None,
        api_key: str | None = None,
        temperature: float | None = None,
    ) -> None:
        from google import genai
        key = api_key or get_gemini_api_key()
        self._client = genai.Client(api_key=key)
        self._model_name = normalize_gen_model(model_name or getattr(settings, "gen_model_name", ""))
        self._temperature = settings.llm_temperature if temperature is None else temperature

    def generate(self, prompt: str) -> str:
        from google.genai import types
        config = types.GenerateContentConfig(
            system_instruction=INTERVIEW_SYSTEM,
            safety_settings=_safety_settings_none(),
            max_output_tokens=settings.gemini_max_output_tokens,
            temperature=self._temperature,
        )

        @retry(
            retry=retry_if_exception(_is_retryable),
            stop=stop_after_attempt(3),
            wait=wait_exponential(multiplier=1, min=1, max=8),
            reraise=True,
        )
        def _create():
            return self._client.models.generate_content(
                model=self._model_name,
                contents=prompt,
                config=config,
            )

        t_start = time.perf_counter()
        try:
            response = _create()
        except Exception as e:
            logger.exception("Gemini generate failed: %s", e)
            raise
        text = (getattr(response, "text", None) or "").strip()
        um = getattr(response, "usage_metadata", None)
        if um:
            logger.info(
                "Gemini generate %.2fs: input_tokens=%s, output_tokens=%s",
                time.perf_counter() - t_start,
                getattr(um, "prompt_token_count", 0) or 0,
                getattr(um, "candidates_token_count", 0) or 0,
            )
        if not text:
            raise RuntimeError("Gemini returned an empty response")
        return text
