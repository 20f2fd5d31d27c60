"""
Application configuration from environment variables.
Loads .env from the backend directory so the Gemini key is found regardless of cwd.
"""
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Default model for generateContent. Older ids in a stale .env are mapped onto this one.
_DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"

_UNSUPPORTED_GEMINI_MODELS = frozenset({
    "gemini-1.5-flash", "gemini-1.5-flash-001", "gemini-1.5-flash-002",
    "gemini-1.5-pro", "gemini-1.5-pro-001", "gemini-1.5-pro-002",
    "gemini-2.0-flash", "gemini-2.0-flash-001", "gemini-2.0-flash-lite",
})


def normalize_gen_model(v: str | None) -> str:
    """Map empty or retired model ids to the default so generateContent does not 404."""
    s = (v or "").strip()
    if not s:
        return _DEFAULT_GEMINI_MODEL
    if s in _UNSUPPORTED_GEMINI_MODELS or s.startswith("gemini-1.5-") or s.startswith("gemini-2.0-flash"):
        return _DEFAULT_GEMINI_MODEL
    return s


# .env next to backend/ (parent of worldforge/)
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_ENV_FILE = _BACKEND_DIR / ".env"

if _ENV_FILE.exists():
    from dotenv import load_dotenv
    load_dotenv(_ENV_FILE, override=False)


class Settings(BaseSettings):
    """Load and validate config from env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # sqlite for local runs and tests, postgresql in production
    database_url: str = "sqlite:///./worldforge_dev.db"

    # Text generation: Gemini. Without GEMINI_API_KEY the deterministic mock generator is used.
    gen_model_name: str = _DEFAULT_GEMINI_MODEL
    gemini_api_key: str = ""
    gemini_max_output_tokens: int = 2048
    # Sampling temperature for every generate() call.
    llm_temperature: float = 0.7

    @field_validator("gen_model_name", mode="before")
    @classmethod
    def _resolve_gen_model(cls, v) -> str:
        return normalize_gen_model(v) if isinstance(v, str) else _DEFAULT_GEMINI_MODEL

    # Worlds created from an interview are spheres of this radius (meters).
    default_world_radius: float = 1000.0
    # Optional procedural generator, "package.module:attribute" (a factory or an instance).
    world_generator: str = ""

    # CORS: comma-separated origins
    cors_origins: str = "http://localhost:3000"

    @property
    def active_llm_model(self) -> str:
        """Model name for display and logs."""
        return normalize_gen_model(self.gen_model_name)


settings = Settings()
