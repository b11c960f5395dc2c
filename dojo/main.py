"""
FastAPI application entry point.

Run with: uvicorn dojo.main:app --reload
"""

from contextlib import asynccontextmanager
import uuid

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from dojo import __version__
from dojo.api.exception_handlers import setup_exception_handlers
from dojo.api.routes import health, leaderboard, session
from dojo.core.config import settings
from dojo.core.logging import bind_context, clear_context, configure_logging, get_logger
from dojo.llm.client import get_teacher_llm_client
from dojo.persistence.database import init_database
from dojo.persistence.repositories.leaderboard_repo import LeaderboardRepository
from dojo.services.oracle import LLMTeacherOracle
from dojo.services.session_controller import SessionController

# Configure logging before anything else
configure_logging()
log = get_logger(__name__)


# =============================================================================
# Correlation ID Middleware
# =============================================================================


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a unique correlation ID to each request.

    - Generates a UUID4 request_id for each incoming request
    - Binds it to structlog context for all logs in that request
    - Adds X-Request-ID header to responses
    """

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        bind_context(request_id=request_id)

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_context()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Builds the teacher client (fails fast on a missing API key), prepares
    the database and loads the leaderboard into the session controller.
    """
    log.info(
        "application_starting",
        debug=settings.debug,
        database_path=str(settings.database_path),
        llm_provider=settings.llm_provider,
    )

    oracle = LLMTeacherOracle(get_teacher_llm_client())

    await init_database(settings.database_path)
    store = LeaderboardRepository(str(settings.database_path))
    app.state.session_controller = await SessionController.create(oracle, store)

    log.info("application_started")

    yield

    log.info("application_shutting_down")


app = FastAPI(
    title="Dojo",
    description="Scored, life-limited training sessions with an LLM drill instructor",
    version=__version__,
    lifespan=lifespan,
    debug=settings.debug,
)

if settings.debug:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.add_middleware(CorrelationIDMiddleware)

setup_exception_handlers(app)

app.include_router(health.router, tags=["system"])
app.include_router(session.router)
app.include_router(leaderboard.router)


@app.get("/")
async def root():
    """Root endpoint with basic info."""
    return {"name": "Dojo", "version": __version__, "status": "running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "dojo.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
