"""Azure Speech text-to-speech, used for Arabic/Amazigh-script text.

Azure's neural Moroccan Arabic voice pronounces Darija and Tifinagh text far
better than general-purpose voices. Input is SSML; malformed markup makes the
service reject the whole request, so the text is always escaped before it is
wrapped.
"""

import httpx

from maos_ai.config import Settings, get_settings
from maos_ai.infrastructure.speech.base import SpeechProvider, SynthesizedAudio
from maos_ai.shared.exceptions import (
    CredentialMissing,
    ProviderRejected,
    ProviderUnavailable,
)
from maos_ai.shared.logging import get_logger

logger = get_logger(__name__)

AZURE_MAX_INPUT_CHARS = 5000
AZURE_OUTPUT_FORMAT = "audio-16khz-128kbitrate-mono-mp3"
AZURE_SPEAKING_RATE = "0.95"


def escape_ssml(text: str) -> str:
    """Escape the three characters that break SSML markup."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def build_ssml(text: str, voice: str, locale: str) -> str:
    """Wrap already-truncated text in an SSML document."""
    return (
        f"<speak version='1.0' xmlns='http://www.w3.org/2001/10/synthesis' xml:lang='{locale}'>"
        f"<voice name='{voice}'>"
        f"<prosody rate='{AZURE_SPEAKING_RATE}' pitch='0%'>{escape_ssml(text)}</prosody>"
        "</voice></speak>"
    )


class AzureSpeechProvider(SpeechProvider):
    """Script-optimized provider (Azure Cognitive Services Speech)."""

    max_input_chars = AZURE_MAX_INPUT_CHARS

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.api_key = settings.azure_speech_key
        self.endpoint = settings.azure_speech_endpoint
        self.voice = settings.azure_speech_voice
        self.locale = settings.azure_speech_locale
        self.timeout = settings.speech_timeout_seconds
        self._client = client

    @property
    def provider_name(self) -> str:
        return "azure_speech"

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def synthesize(self, text: str) -> SynthesizedAudio:
        if not self.is_configured:
            raise CredentialMissing(self.provider_name)

        ssml = build_ssml(self.truncate(text), self.voice, self.locale)
        logger.info("azure_tts_request", chars=min(len(text), self.max_input_chars))

        try:
            response = await self._get_client().post(
                self.endpoint,
                content=ssml.encode("utf-8"),
                headers={
                    "Ocp-Apim-Subscription-Key": self.api_key,
                    "Content-Type": "application/ssml+xml",
                    "X-Microsoft-OutputFormat": AZURE_OUTPUT_FORMAT,
                },
            )
        except httpx.RequestError as e:
            raise ProviderUnavailable(self.provider_name, f"Azure TTS unreachable: {e}")

        if not response.is_success:
            logger.error("azure_tts_error", status=response.status_code, body=response.text[:200])
            raise ProviderRejected(self.provider_name, response.status_code, response.text)

        if not response.content:
            logger.error("azure_tts_empty_audio", status=response.status_code)
            raise ProviderRejected(self.provider_name, response.status_code, "empty audio body")

        return SynthesizedAudio(audio=response.content, provider=self.provider_name)
