"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from maos_ai import __version__
from maos_ai.api.ratelimit import limiter, rate_limit_exceeded_handler
from maos_ai.api.router import api_router
from maos_ai.config import get_settings
from maos_ai.domain.chat.messages import TECHNICAL_PROBLEM_MESSAGE
from maos_ai.infrastructure.factory import build_components, close_components
from maos_ai.observability.metrics import setup_metrics
from maos_ai.shared.concurrency import ClientDisconnected
from maos_ai.shared.exceptions import (
    BackendLogicError,
    MaosError,
    SynthesisUnavailable,
    TranscriptionError,
    ValidationError,
)
from maos_ai.shared.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown events."""
    setup_logging()
    logger.info("maos_ai_starting", version=__version__)

    # Provider clients are built once and shared by every request
    settings = get_settings()
    app.state.components = getattr(app.state, "components", None) or build_components(settings)

    yield

    logger.info("maos_ai_stopping")
    await close_components(getattr(app.state, "components", None))


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="MAOS AI Gateway",
        description="Chat and speech gateway for the MAOS business dashboard",
        version=__version__,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    # Rate limiting
    limiter.enabled = settings.rate_limit_enabled
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    if settings.is_production:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api")

    setup_metrics(app)

    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        _ = request
        return JSONResponse(
            status_code=422,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.details,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        _ = request
        return JSONResponse(
            status_code=422,
            content={
                "error": "validation_error",
                "message": "Request validation failed",
            },
        )

    @app.exception_handler(BackendLogicError)
    async def backend_logic_error_handler(
        request: Request, exc: BackendLogicError
    ) -> JSONResponse:
        _ = request
        # The cause was logged by the gateway; the user only sees a fixed text.
        return JSONResponse(
            status_code=502,
            content={
                "error": "backend_error",
                "message": TECHNICAL_PROBLEM_MESSAGE,
            },
        )

    @app.exception_handler(SynthesisUnavailable)
    async def synthesis_unavailable_handler(
        request: Request, exc: SynthesisUnavailable
    ) -> JSONResponse:
        _ = request
        logger.error("synthesis_unavailable", attempts=exc.details.get("attempts"))
        return JSONResponse(status_code=502, content={"error": "synthesis failed"})

    @app.exception_handler(TranscriptionError)
    async def transcription_error_handler(
        request: Request, exc: TranscriptionError
    ) -> JSONResponse:
        _ = request
        return JSONResponse(status_code=502, content={"error": exc.message})

    @app.exception_handler(ClientDisconnected)
    async def client_disconnected_handler(
        request: Request, exc: ClientDisconnected
    ) -> JSONResponse:
        logger.info("client_disconnected", path=request.url.path)
        return JSONResponse(status_code=499, content={"error": "client_disconnected"})

    @app.exception_handler(MaosError)
    async def maos_error_handler(request: Request, exc: MaosError) -> JSONResponse:
        _ = request
        logger.error("unhandled_error", error=exc.message, details=exc.details)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_error",
                "message": "Une erreur interne est survenue",
            },
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        _ = request
        logger.exception("unexpected_error", error=str(exc))
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_error",
                "message": "Une erreur inattendue est survenue",
            },
        )


# Create app instance
app = create_app()
