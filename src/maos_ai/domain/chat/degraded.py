"""Degraded-mode responder.

Answers with a general-purpose language model that has no access to tenant
data. It sees only the last five messages and the tier/vertical hints.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from maos_ai.domain.chat.context_window import FALLBACK_HISTORY_LIMIT, build_context_window
from maos_ai.domain.chat.messages import FALLBACK_INTRODUCTION, is_bare_greeting
from maos_ai.domain.chat.types import LANGUAGES, ChatRequest, lookup_language
from maos_ai.domain.speech.script_classifier import is_predominantly_arabic
from maos_ai.infrastructure.ai.client import FallbackChatClient
from maos_ai.infrastructure.ai.prompts.degraded_assistant_v1 import DegradedAssistantPromptV1
from maos_ai.shared.logging import get_logger

logger = get_logger(__name__)

DEGRADED_AGENT_ID = "maos_degraded"


@dataclass
class ReplyDraft:
    """Un-normalized answer from one gateway path. Missing fields stay None."""

    message: str
    pdf: dict[str, Any] | None = None
    language: str | None = None
    language_name: str | None = None
    direction: str | None = None
    has_audio: bool | None = None
    agent: str | None = None
    tier: str | None = None
    vertical: str | None = None


class DegradedResponder:
    """Constrained-capability chat responder used when the backend is out of reach."""

    def __init__(
        self,
        client: FallbackChatClient,
        prompt: DegradedAssistantPromptV1 | None = None,
    ) -> None:
        self.client = client
        self.prompt = prompt or DegradedAssistantPromptV1()

    async def respond(self, request: ChatRequest) -> ReplyDraft:
        """Answer ``request`` without business data.

        Raises:
            FallbackProviderError: The language model failed
        """
        tier = request.context.tier
        vertical = request.context.vertical
        window = build_context_window(request.messages, FALLBACK_HISTORY_LIMIT)

        if window is None or is_bare_greeting(window.utterance):
            logger.info("degraded_greeting", tier=tier)
            return ReplyDraft(
                message=FALLBACK_INTRODUCTION,
                language="fr",
                agent=DEGRADED_AGENT_ID,
                tier=tier,
                vertical=vertical,
            )

        system_prompt = self.prompt.render_system(tier=tier, vertical=vertical)
        logger.info(
            "degraded_completion",
            tier=tier,
            vertical=vertical,
            history=len(window.history),
            prompt_version=self.prompt.version.version,
        )
        ai_response = await self.client.complete(system_prompt, window.history_dicts())

        draft = ReplyDraft(
            message=ai_response.content,
            agent=DEGRADED_AGENT_ID,
            tier=tier,
            vertical=vertical,
        )
        forced = lookup_language(request.forced_language)
        if forced is not None:
            draft.language = forced.code
            draft.language_name = forced.display_name
            draft.direction = forced.direction
        elif is_predominantly_arabic(ai_response.content):
            arabic = LANGUAGES["ar"]
            draft.language = arabic.code
            draft.language_name = arabic.display_name
            draft.direction = arabic.direction
        return draft
