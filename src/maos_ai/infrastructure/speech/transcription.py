"""Speech-to-text with OpenAI Whisper.

No language is forced: Whisper detects Arabic, Darija, Amazigh, French and
English on its own.
"""

import openai
from openai import AsyncOpenAI

from maos_ai.config import Settings, get_settings
from maos_ai.shared.exceptions import TranscriptionError
from maos_ai.shared.logging import get_logger

logger = get_logger(__name__)


class WhisperTranscriber:
    def __init__(
        self,
        settings: Settings | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.api_key = settings.openai_api_key
        self.model = settings.openai_transcription_model
        self.client = client or AsyncOpenAI(
            api_key=settings.openai_api_key or "unset",
            timeout=settings.speech_timeout_seconds,
            max_retries=0,
        )

    async def transcribe(
        self,
        audio: bytes,
        filename: str = "audio.webm",
        content_type: str | None = None,
    ) -> str:
        """Transcribe recorded audio to text.

        Raises:
            TranscriptionError: Provider missing, unreachable or rejecting the audio
        """
        if not self.api_key:
            raise TranscriptionError("Transcription is not configured")

        logger.info("transcription_request", size=len(audio), content_type=content_type)
        try:
            result = await self.client.audio.transcriptions.create(
                model=self.model,
                file=(filename, audio, content_type or "audio/webm"),
                response_format="json",
            )
        except openai.APIStatusError as e:
            logger.error("transcription_error", status=e.status_code, error=str(e))
            raise TranscriptionError(
                f"Whisper API error: {e.status_code}", {"status_code": e.status_code}
            )
        except openai.APIConnectionError as e:
            logger.error("transcription_connection_error", error=str(e))
            raise TranscriptionError("Whisper API unreachable")
        except openai.APIError as e:
            logger.error("transcription_error", error=str(e))
            raise TranscriptionError("Whisper API error")
        except ValueError as e:
            logger.error("transcription_invalid_response", error=str(e))
            raise TranscriptionError("Whisper API returned an invalid response")

        text = getattr(result, "text", None)
        if not isinstance(text, str):
            logger.error("transcription_invalid_response", result_type=type(result).__name__)
            raise TranscriptionError("Whisper API returned an invalid response")
        return text

    async def close(self) -> None:
        await self.client.close()
