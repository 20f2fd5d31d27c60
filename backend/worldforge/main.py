"""
FastAPI application entrypoint.
APIs: interview, topics. Run with: uvicorn worldforge.main:app --reload --port 8000 (from backend/)

API base path: routes are mounted at root (no /api/v1 prefix).
  - Interview: POST /interview/start, POST /interview/reply, GET /interview/resume,
    POST /interview/edit, GET /interview/progress, GET /interview/{id}/configuration
  - Topics: GET /topics

Callers identify the (already authenticated) player with the X-User-Id header.
Tenacity: Gemini retries (429/5xx) are handled inside worldforge.llm.gemini_impl.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from worldforge.config import settings
from worldforge.api.interview import router as interview_router
from worldforge.api.topics import router as topics_router

app = FastAPI(
    title="Worldforge Interview API",
    description="Conversational world-creation interview: answers -> validated world configuration -> world.",
    version="0.1.0",
)

_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins if _origins else ["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(interview_router)
app.include_router(topics_router)


@app.on_event("startup")
def startup():
    """Init DB tables, log text generation key status, and load the world generator if configured."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    _log = logging.getLogger("worldforge.main")
    key = (settings.gemini_api_key or "").strip()
    if key:
        _log.info("Gemini: API key loaded (len=%s). Model %s will be used.", len(key), settings.active_llm_model)
    else:
        _log.warning("Gemini: No API key. Set GEMINI_API_KEY in backend/.env for real generation (using mock).")
    from worldforge.database import init_db
    init_db()
    # Fail fast on a bad WORLD_GENERATOR path instead of on the first completed interview
    from worldforge.api.deps import get_world_generator
    if get_world_generator() is None:
        _log.info("No WORLD_GENERATOR configured; worlds are created without procedural generation.")


@app.get("/health")
def health():
    """Health check (JSON)."""
    return {"status": "ok", "message": "Worldforge Interview API"}
