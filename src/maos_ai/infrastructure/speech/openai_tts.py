"""OpenAI text-to-speech, the general-purpose voice for every other script."""

import openai
from openai import AsyncOpenAI

from maos_ai.config import Settings, get_settings
from maos_ai.infrastructure.speech.base import SpeechProvider, SynthesizedAudio
from maos_ai.shared.exceptions import (
    CredentialMissing,
    ProviderRejected,
    ProviderUnavailable,
)
from maos_ai.shared.logging import get_logger

logger = get_logger(__name__)

OPENAI_TTS_MAX_INPUT_CHARS = 4000


class OpenAISpeechProvider(SpeechProvider):
    """General-purpose provider (OpenAI ``audio.speech``)."""

    max_input_chars = OPENAI_TTS_MAX_INPUT_CHARS

    def __init__(
        self,
        settings: Settings | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.api_key = settings.openai_api_key
        self.model = settings.openai_tts_model
        self.voice = settings.openai_tts_voice
        self.speed = settings.openai_tts_speed
        self.client = client or AsyncOpenAI(
            api_key=settings.openai_api_key or "unset",
            timeout=settings.speech_timeout_seconds,
            max_retries=0,
        )

    @property
    def provider_name(self) -> str:
        return "openai_tts"

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def close(self) -> None:
        await self.client.close()

    async def synthesize(self, text: str) -> SynthesizedAudio:
        if not self.is_configured:
            raise CredentialMissing(self.provider_name)

        text = self.truncate(text)
        logger.info("openai_tts_request", chars=len(text), model=self.model)

        try:
            response = await self.client.audio.speech.create(
                model=self.model,
                voice=self.voice,
                input=text,
                speed=self.speed,
                response_format="mp3",
            )
        except openai.APIStatusError as e:
            logger.error("openai_tts_error", status=e.status_code, error=str(e))
            raise ProviderRejected(self.provider_name, e.status_code, str(e))
        except openai.APIConnectionError as e:
            raise ProviderUnavailable(self.provider_name, f"OpenAI TTS unreachable: {e}")
        except openai.APIError as e:
            raise ProviderUnavailable(self.provider_name, f"OpenAI TTS error: {e}")

        audio = response.content
        if not isinstance(audio, bytes) or not audio:
            logger.error("openai_tts_empty_audio")
            raise ProviderRejected(self.provider_name, 200, "empty audio body")

        return SynthesizedAudio(audio=audio, provider=self.provider_name)
