"""
Study Notes AI - FastAPI Application Entry Point.

Feature-based modular architecture:
  Each feature in studynotes/features/ has its own router, service, and schemas.
  notes → summaries / quiz / chat, all built on generation (the AI backend).
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from studynotes.config import get_settings
from studynotes.core.exceptions import AppBaseError, app_error_to_http

# ── Feature Routers ──────────────────────────────────────
from studynotes.features.notes.router import router as notes_router
from studynotes.features.summaries.router import router as summaries_router
from studynotes.features.quiz.router import notes_router as note_quiz_router
from studynotes.features.quiz.router import router as quiz_router
from studynotes.features.chat.router import router as chat_router

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup & shutdown."""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    logger.info(f"🚀 {settings.APP_NAME} v{settings.APP_VERSION} starting...")
    logger.info(f"🤖 LLM Provider: {settings.LLM_PROVIDER} ({settings.LLM_MODEL})")
    logger.info(f"🔗 Supabase: {settings.SUPABASE_URL[:40]}...")
    yield
    logger.info("👋 Shutting down...")


async def app_error_handler(request: Request, exc: AppBaseError) -> JSONResponse:
    """Render every AppBaseError with the same JSON body."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.detail}")
    http_error = app_error_to_http(exc)
    return JSONResponse(status_code=http_error.status_code, content={"detail": http_error.detail})


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Upload study notes, get AI summaries, quizzes and answers",
        lifespan=lifespan,
    )

    # ── CORS ─────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppBaseError, app_error_handler)

    # ── Register Feature Routers ─────────────────────────
    app.include_router(notes_router, prefix="/api/notes", tags=["Notes"])
    app.include_router(summaries_router, prefix="/api/notes", tags=["Summaries"])
    app.include_router(note_quiz_router, prefix="/api/notes", tags=["Quiz"])
    app.include_router(chat_router, prefix="/api/notes", tags=["Chat"])
    app.include_router(quiz_router, prefix="/api/quizzes", tags=["Quiz"])

    # ── Health Check ─────────────────────────────────────
    @app.get("/health", tags=["System"])
    async def health_check():
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    return app


app = create_app()
