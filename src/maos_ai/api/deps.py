"""FastAPI dependencies for API routes."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from maos_ai.config import get_settings
from maos_ai.domain.chat.gateway import ChatGateway
from maos_ai.domain.speech.router import SpeechRouter
from maos_ai.infrastructure.factory import GatewayComponents, build_components
from maos_ai.infrastructure.speech.transcription import WhisperTranscriber
from maos_ai.shared.context import SessionContext, set_session_context

# Cookie set by the dashboard login flow
SESSION_COOKIE = "maos_access_token"

security = HTTPBearer(auto_error=False)


async def bind_session(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> SessionContext:
    """Expose the caller's session token to the gateway for this request.

    The token is minted elsewhere; it is only forwarded, never verified here.
    """
    token = credentials.credentials if credentials else request.cookies.get(SESSION_COOKIE)
    ctx = SessionContext(access_token=token or None)
    set_session_context(ctx)
    return ctx


def get_components(request: Request) -> GatewayComponents:
    """Get the shared components (per FastAPI app)."""
    components = getattr(request.app.state, "components", None)
    if components is None:
        components = build_components(get_settings())
        request.app.state.components = components
    return components


def get_chat_gateway(
    components: Annotated[GatewayComponents, Depends(get_components)],
) -> ChatGateway:
    return components.chat_gateway


def get_speech_router(
    components: Annotated[GatewayComponents, Depends(get_components)],
) -> SpeechRouter:
    return components.speech_router


def get_transcriber(
    components: Annotated[GatewayComponents, Depends(get_components)],
) -> WhisperTranscriber:
    return components.transcriber


__all__ = [
    "bind_session",
    "get_chat_gateway",
    "get_components",
    "get_speech_router",
    "get_transcriber",
]
