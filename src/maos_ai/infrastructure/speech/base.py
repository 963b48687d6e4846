"""Base classes for speech synthesis providers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

AUDIO_MIME_TYPE = "audio/mp3"


@dataclass(frozen=True)
class SynthesizedAudio:
    """Raw audio produced by a provider."""

    audio: bytes
    provider: str
    mime_type: str = AUDIO_MIME_TYPE


class SpeechProvider(ABC):
    """Base class for text-to-speech providers (e.g., Azure Speech, OpenAI TTS)."""

    # Each provider has its own input limit; truncation happens per provider.
    max_input_chars: int

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return provider name for logging/reference."""
        pass

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether a credential is available."""
        pass

    def truncate(self, text: str) -> str:
        return text[: self.max_input_chars]

    @abstractmethod
    async def synthesize(self, text: str) -> SynthesizedAudio:
        """Convert text to MP3 audio. Exactly one attempt.

        Args:
            text: Text to speak; truncated to ``max_input_chars`` before sending

        Returns:
            Synthesized audio

        Raises:
            CredentialMissing: No credential configured
            ProviderRejected: Provider answered with a non-2xx status
            ProviderUnavailable: Transport failure or timeout
        """
        pass
