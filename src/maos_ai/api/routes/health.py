"""Health check endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from maos_ai import __version__
from maos_ai.api.deps import get_components
from maos_ai.api.ratelimit import RATE_LIMIT_HEALTH, limiter
from maos_ai.infrastructure.factory import GatewayComponents

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response. Reports configuration, never secrets."""

    status: str
    version: str
    providers: dict[str, bool]


@router.get("/health", response_model=HealthResponse)
@limiter.limit(RATE_LIMIT_HEALTH)
async def health_check(
    request: Request,
    components: Annotated[GatewayComponents, Depends(get_components)],
) -> HealthResponse:
    """Liveness plus which providers have credentials.

    Providers are not called: a health probe must not bill a paid API.
    """
    _ = request
    speech = components.speech_router
    return HealthResponse(
        status="healthy",
        version=__version__,
        providers={
            "orchestrator": bool(components.chat_gateway.orchestrator.base_url),
            "fallback_chat": components.chat_gateway.degraded.client.is_configured,
            "azure_speech": speech.script_provider.is_configured,
            "openai_tts": speech.general_provider.is_configured,
        },
    )
