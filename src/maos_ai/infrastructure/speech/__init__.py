"""Speech providers (synthesis and transcription)."""

from maos_ai.infrastructure.speech.azure import AzureSpeechProvider
from maos_ai.infrastructure.speech.base import SpeechProvider, SynthesizedAudio
from maos_ai.infrastructure.speech.openai_tts import OpenAISpeechProvider
from maos_ai.infrastructure.speech.transcription import WhisperTranscriber

__all__ = [
    "AzureSpeechProvider",
    "OpenAISpeechProvider",
    "SpeechProvider",
    "SynthesizedAudio",
    "WhisperTranscriber",
]
