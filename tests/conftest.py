"""
Pytest configuration and fixtures for the MAOS AI gateway tests.

Outbound HTTP is served by ``httpx.MockTransport``; OpenAI SDK clients are
replaced with ``MagicMock``/``AsyncMock`` objects. No test touches the network.
"""
import os
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from openai import AsyncOpenAI

os.environ["RATE_LIMIT_ENABLED"] = "false"

from maos_ai.config import Settings  # noqa: E402
from maos_ai.domain.chat.degraded import DegradedResponder  # noqa: E402
from maos_ai.domain.chat.gateway import ChatGateway  # noqa: E402
from maos_ai.domain.speech.router import SpeechRouter  # noqa: E402
from maos_ai.infrastructure.ai.client import FallbackChatClient  # noqa: E402
from maos_ai.infrastructure.orchestrator.client import OrchestratorClient  # noqa: E402
from maos_ai.infrastructure.speech.base import SpeechProvider, SynthesizedAudio  # noqa: E402
from maos_ai.shared.context import (  # noqa: E402
    SessionContext,
    clear_session_context,
    set_session_context,
)
from maos_ai.shared.exceptions import ProviderError  # noqa: E402

ORCHESTRATOR_URL = "http://orchestrator.test"
SESSION_TOKEN = "session-token-123"


@pytest.fixture
def test_settings() -> Settings:
    """Settings with fake credentials for every provider."""
    return Settings(
        _env_file=None,
        app_env="development",
        orchestrator_base_url=ORCHESTRATOR_URL,
        openai_api_key="sk-test",
        azure_speech_key="azure-test-key",
        azure_speech_region="westeurope",
        rate_limit_enabled=False,
    )


@pytest.fixture(autouse=True)
def _clean_session() -> Generator[None, None, None]:
    clear_session_context()
    yield
    clear_session_context()


@pytest.fixture
def session_token() -> str:
    """Simulate an authenticated dashboard session."""
    set_session_context(SessionContext(access_token=SESSION_TOKEN))
    return SESSION_TOKEN


# ----- Orchestration backend -----


class OrchestratorStub:
    """Transport handler answering like the orchestration backend."""

    def __init__(
        self,
        status_code: int = 200,
        json: Any = None,
        exc: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        self.json = json if json is not None else {"success": True, "data": {"response": "OK"}}
        self.exc = exc
        self.requests: list[httpx.Request] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return httpx.Response(self.status_code, json=self.json)


@pytest.fixture
def orchestrator_stub() -> OrchestratorStub:
    return OrchestratorStub()


@pytest.fixture
def make_orchestrator(test_settings: Settings) -> Callable[[OrchestratorStub], OrchestratorClient]:
    def _make(stub: OrchestratorStub) -> OrchestratorClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(stub))
        return OrchestratorClient(test_settings, client=client)

    return _make


# ----- OpenAI -----


def make_completion(content: str | None) -> MagicMock:
    """Build a chat completion object like the OpenAI SDK returns."""
    return MagicMock(
        choices=[MagicMock(message=MagicMock(content=content))],
        usage=MagicMock(prompt_tokens=42, completion_tokens=12),
    )


@pytest.fixture
def make_fallback_client(
    test_settings: Settings,
) -> Callable[..., FallbackChatClient]:
    def _make(
        content: str | None = "Réponse générale.",
        side_effect: Exception | None = None,
        settings: Settings | None = None,
    ) -> FallbackChatClient:
        openai_client = MagicMock()
        openai_client.chat.completions.create = AsyncMock(
            return_value=make_completion(content),
            side_effect=side_effect,
        )
        openai_client.close = AsyncMock()
        return FallbackChatClient(settings or test_settings, client=openai_client)

    return _make


@pytest.fixture
def make_gateway(
    test_settings: Settings,
    make_orchestrator: Callable[[OrchestratorStub], OrchestratorClient],
) -> Callable[[OrchestratorStub, FallbackChatClient], ChatGateway]:
    def _make(stub: OrchestratorStub, fallback_client: FallbackChatClient) -> ChatGateway:
        return ChatGateway(
            orchestrator=make_orchestrator(stub),
            degraded=DegradedResponder(fallback_client),
            default_language=test_settings.default_language,
        )

    return _make


def openai_request() -> httpx.Request:
    return httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def openai_response(status_code: int) -> httpx.Response:
    return httpx.Response(status_code, request=openai_request())


def openai_over_transport(handler: Callable[[httpx.Request], httpx.Response]) -> AsyncOpenAI:
    """Real SDK client whose HTTP traffic is answered by ``handler``."""
    return AsyncOpenAI(
        api_key="sk-test",
        base_url="https://api.openai.test/v1",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        max_retries=0,
    )


# ----- Speech -----


class FakeSpeechProvider(SpeechProvider):
    """Speech provider recording the text it was asked to speak."""

    def __init__(
        self,
        name: str,
        max_input_chars: int,
        error: ProviderError | None = None,
        audio: bytes = b"ID3-fake-mp3",
    ) -> None:
        self._name = name
        self.max_input_chars = max_input_chars
        self.error = error
        self.audio = audio
        self.sent: list[str] = []

    @property
    def provider_name(self) -> str:
        return self._name

    @property
    def is_configured(self) -> bool:
        return True

    @property
    def call_count(self) -> int:
        return len(self.sent)

    async def synthesize(self, text: str) -> SynthesizedAudio:
        text = self.truncate(text)
        self.sent.append(text)
        if self.error is not None:
            raise self.error
        return SynthesizedAudio(audio=self.audio, provider=self._name)


@pytest.fixture
def speech_providers() -> tuple[FakeSpeechProvider, FakeSpeechProvider]:
    """(script-optimized, general-purpose) fakes with the real input limits."""
    return (
        FakeSpeechProvider("azure_speech", max_input_chars=5000),
        FakeSpeechProvider("openai_tts", max_input_chars=4000),
    )


@pytest.fixture
def speech_router(
    speech_providers: tuple[FakeSpeechProvider, FakeSpeechProvider],
) -> SpeechRouter:
    script, general = speech_providers
    return SpeechRouter(script_provider=script, general_provider=general)
