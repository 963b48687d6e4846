"""Speech synthesis routing.

Arabic/Amazigh-script text goes to the script-optimized provider first and
falls back to the general-purpose provider; all other text goes straight to
the general-purpose provider. Providers are tried one at a time, never in
parallel, so a paid provider is never billed for a discarded answer.
"""

from __future__ import annotations

from maos_ai.domain.speech.script_classifier import is_predominantly_arabic
from maos_ai.infrastructure.speech.base import SpeechProvider, SynthesizedAudio
from maos_ai.observability.metrics import SPEECH_ATTEMPTS
from maos_ai.shared.exceptions import (
    CredentialMissing,
    ProviderError,
    ProviderRejected,
    SynthesisUnavailable,
)
from maos_ai.shared.fallback import FallbackStep, run_fallback_chain
from maos_ai.shared.logging import get_logger

logger = get_logger(__name__)


def _outcome(exc: ProviderError) -> str:
    if isinstance(exc, CredentialMissing):
        return "credential_missing"
    if isinstance(exc, ProviderRejected):
        return "rejected"
    return "unavailable"


class SpeechRouter:
    """Chooses and chains speech providers for a piece of text."""

    def __init__(
        self,
        script_provider: SpeechProvider,
        general_provider: SpeechProvider,
    ) -> None:
        self.script_provider = script_provider
        self.general_provider = general_provider

    def providers_for(self, text: str) -> list[SpeechProvider]:
        """Ordered providers for ``text``."""
        if is_predominantly_arabic(text):
            return [self.script_provider, self.general_provider]
        return [self.general_provider]

    async def synthesize(self, text: str) -> SynthesizedAudio:
        """Synthesize ``text`` with the first provider that succeeds.

        Each provider truncates the full text to its own limit.

        Raises:
            SynthesisUnavailable: Every provider in the ordered list failed
        """
        providers = self.providers_for(text)
        logger.info(
            "speech_synthesis_start",
            chars=len(text),
            providers=[p.provider_name for p in providers],
        )

        steps = [
            FallbackStep(name=provider.provider_name, invoke=self._attempt(provider, text))
            for provider in providers
        ]
        result = await run_fallback_chain(steps, SynthesisUnavailable, chain="speech")
        return result.value

    def _attempt(self, provider: SpeechProvider, text: str):
        async def invoke() -> SynthesizedAudio:
            try:
                audio = await provider.synthesize(text)
            except ProviderError as exc:
                SPEECH_ATTEMPTS.labels(provider=provider.provider_name, outcome=_outcome(exc)).inc()
                raise
            SPEECH_ATTEMPTS.labels(provider=provider.provider_name, outcome="success").inc()
            return audio

        return invoke
