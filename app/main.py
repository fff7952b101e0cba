"""Rememory - memory, task and Brain Bucks tracker API."""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.errors import AuthenticationError, InsufficientFundsError, RememoryError
from app.services.brain_bucks import BrainBucksLedger
from app.services.session_events import SessionEventBus, log_session_event

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: Create tables
    from app.database import Base, engine, ensure_sqlite_directory

    # Import all models so they're registered with Base
    from app import models  # noqa: F401

    ensure_sqlite_directory(settings.database_url)
    Base.metadata.create_all(bind=engine)
    logger.info("%s started", settings.app_name)

    yield
    # Shutdown: cleanup if needed


def register_exception_handlers(app: FastAPI) -> None:
    """Render domain errors as JSON error responses."""

    @app.exception_handler(RememoryError)
    async def handle_rememory_error(request: Request, exc: RememoryError):
        body = {"detail": exc.message}
        headers = None
        if isinstance(exc, InsufficientFundsError):
            body.update({"balance": exc.balance, "required": exc.required})
        if isinstance(exc, AuthenticationError):
            headers = {"WWW-Authenticate": "Bearer"}

        response = JSONResponse(status_code=exc.status_code, content=body, headers=headers)
        if isinstance(exc, AuthenticationError) and exc.clear_refresh_cookie:
            from app.api.auth import clear_refresh_cookie
            clear_refresh_cookie(response)
        return response


def create_app() -> FastAPI:
    """Build the app and the process-wide ledger and session event bus it owns."""
    app = FastAPI(
        title=settings.app_name,
        description="Remember what matters, earn Brain Bucks, treat yourself",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.ledger = BrainBucksLedger()
    app.state.session_events = SessionEventBus()
    app.state.session_events.subscribe(log_session_event)

    # CORS for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "app": settings.app_name}

    # Import and include routers
    from app.api import auth, brain_bucks, memories, profile, rewards, tasks

    app.include_router(auth.router, prefix="/api")
    app.include_router(profile.router, prefix="/api")
    app.include_router(brain_bucks.router, prefix="/api")
    app.include_router(tasks.router, prefix="/api")
    app.include_router(memories.router, prefix="/api")
    app.include_router(rewards.router, prefix="/api")

    return app


app = create_app()
