"""Factories for provider clients and the components built on them.

Provider clients hold network connections (``httpx.AsyncClient``,
``AsyncOpenAI``). They are built once at startup, injected into the gateway
and the speech router, and closed at shutdown.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass

from maos_ai.config import Settings
from maos_ai.domain.chat.degraded import DegradedResponder
from maos_ai.domain.chat.gateway import ChatGateway
from maos_ai.domain.speech.router import SpeechRouter
from maos_ai.infrastructure.ai.client import FallbackChatClient
from maos_ai.infrastructure.orchestrator.client import OrchestratorClient
from maos_ai.infrastructure.speech.azure import AzureSpeechProvider
from maos_ai.infrastructure.speech.openai_tts import OpenAISpeechProvider
from maos_ai.infrastructure.speech.transcription import WhisperTranscriber
from maos_ai.shared.logging import get_logger

logger = get_logger(__name__)


@dataclass
class GatewayComponents:
    chat_gateway: ChatGateway
    speech_router: SpeechRouter
    transcriber: WhisperTranscriber

    def clients(self) -> list[object]:
        return [
            self.chat_gateway.orchestrator,
            self.chat_gateway.degraded.client,
            self.speech_router.script_provider,
            self.speech_router.general_provider,
            self.transcriber,
        ]


def build_components(settings: Settings) -> GatewayComponents:
    orchestrator = OrchestratorClient(settings)
    chat_client = FallbackChatClient(settings)
    azure = AzureSpeechProvider(settings)
    openai_tts = OpenAISpeechProvider(settings)

    logger.info(
        "gateway_components_built",
        orchestrator=settings.orchestrator_base_url,
        fallback_model=settings.openai_chat_model,
        fallback_configured=chat_client.is_configured,
        azure_speech_configured=azure.is_configured,
        openai_tts_configured=openai_tts.is_configured,
    )

    return GatewayComponents(
        chat_gateway=ChatGateway(
            orchestrator=orchestrator,
            degraded=DegradedResponder(chat_client),
            default_language=settings.default_language,
        ),
        speech_router=SpeechRouter(script_provider=azure, general_provider=openai_tts),
        transcriber=WhisperTranscriber(settings),
    )


async def close_components(components: GatewayComponents | None) -> None:
    if components is None:
        return

    for client in components.clients():
        close = getattr(client, "close", None)
        if close is None:
            continue
        result = close()
        if inspect.isawaitable(result):
            await result
