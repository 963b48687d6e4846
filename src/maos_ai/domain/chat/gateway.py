"""Chat response gateway.

Control flow for one chat request:

    START -> RESOLVE_AUTH -> {PRIMARY_ATTEMPT | FALLBACK} -> NORMALIZE -> DONE

- No user message at all: static greeting, no outbound call.
- No session token: the primary step is skipped (CredentialMissing).
- Primary 5xx/transport/timeout (BackendUnavailable): degraded responder.
- Primary 4xx or ``success=false`` (BackendLogicError): raised to the caller,
  never downgraded.
- Degraded responder failure (FallbackProviderError): static
  "service unavailable" answer.

Each path is attempted at most once; nothing is retried.
"""

from __future__ import annotations

from maos_ai.domain.chat.context_window import PRIMARY_HISTORY_LIMIT, ContextWindow, build_context_window
from maos_ai.domain.chat.degraded import DegradedResponder, ReplyDraft
from maos_ai.domain.chat.messages import (
    EMPTY_REPLY_MESSAGE,
    GREETING_MESSAGE,
    SERVICE_UNAVAILABLE_MESSAGE,
)
from maos_ai.domain.chat.types import ChatRequest, ChatResponse, PdfDocument, lookup_language
from maos_ai.infrastructure.orchestrator.client import OrchestratorClient
from maos_ai.observability.metrics import CHAT_RESPONSES
from maos_ai.shared.context import get_session_token
from maos_ai.shared.exceptions import (
    BackendLogicError,
    CredentialMissing,
    FallbackProviderError,
    ProviderError,
)
from maos_ai.shared.fallback import FallbackStep, run_fallback_chain
from maos_ai.shared.logging import get_logger

logger = get_logger(__name__)

PRIMARY_PROVIDER = "orchestrator"
FALLBACK_PROVIDER = "degraded"
# Context key carrying the trimmed conversation to the orchestration backend;
# a caller-supplied value under this key is replaced.
HISTORY_KEY = "history"


def _exhausted(failures: list[ProviderError]) -> Exception:
    return FallbackProviderError(
        "exhausted", "; ".join(f"{f.provider}: {f.message}" for f in failures)
    )


class ChatGateway:
    """Turns a chat request into a normalized answer."""

    def __init__(
        self,
        orchestrator: OrchestratorClient,
        degraded: DegradedResponder,
        default_language: str = "fr",
    ) -> None:
        self.orchestrator = orchestrator
        self.degraded = degraded
        self.default_language = default_language

    def greeting(self) -> ChatResponse:
        """Static greeting for sessions without a user utterance."""
        return self._normalize(ReplyDraft(message=GREETING_MESSAGE))

    async def respond(self, request: ChatRequest) -> ChatResponse:
        """Answer a chat request.

        Raises:
            BackendLogicError: The orchestration backend refused the request
        """
        window = build_context_window(request.messages, PRIMARY_HISTORY_LIMIT)
        if window is None:
            logger.info("chat_no_user_utterance", messages=len(request.messages))
            CHAT_RESPONSES.labels(path="greeting").inc()
            return self.greeting()

        steps: list[FallbackStep[ReplyDraft]] = [
            FallbackStep(name=PRIMARY_PROVIDER, invoke=lambda: self._primary(request, window)),
            FallbackStep(name=FALLBACK_PROVIDER, invoke=lambda: self.degraded.respond(request)),
        ]

        try:
            result = await run_fallback_chain(steps, _exhausted, chain="chat")
        except BackendLogicError as exc:
            logger.error(
                "chat_backend_logic_error",
                cause=exc.cause,
                status_code=exc.status_code,
            )
            CHAT_RESPONSES.labels(path="backend_error").inc()
            raise
        except FallbackProviderError as exc:
            logger.error("chat_fallback_failed", reason=exc.reason, details=exc.details)
            CHAT_RESPONSES.labels(path="unavailable").inc()
            return self._normalize(ReplyDraft(message=SERVICE_UNAVAILABLE_MESSAGE))

        path = "primary" if result.provider == PRIMARY_PROVIDER else "fallback"
        CHAT_RESPONSES.labels(path=path).inc()
        return self._normalize(result.value)

    async def _primary(self, request: ChatRequest, window: ContextWindow) -> ReplyDraft:
        token = get_session_token()
        if not token:
            # Anonymous sessions are served by the degraded responder.
            raise CredentialMissing(PRIMARY_PROVIDER)

        context = request.context.to_dict()
        if HISTORY_KEY in context:
            # The backend reads the trimmed window from this key.
            logger.warning("chat_context_history_replaced")
        context[HISTORY_KEY] = window.history_dicts()
        reply = await self.orchestrator.chat(
            access_token=token,
            message=window.utterance,
            context=context,
            images=request.images,
            files=request.files,
            forced_lang=request.forced_language,
        )
        return ReplyDraft(
            message=reply.response,
            pdf=reply.pdf,
            language=reply.lang,
            language_name=reply.lang_name,
            direction=reply.direction,
            has_audio=reply.has_tts,
            agent=reply.agent,
            tier=reply.pack,
            vertical=reply.metier,
        )

    def _normalize(self, draft: ReplyDraft) -> ChatResponse:
        """Fill every default. No other step may invent defaults."""
        language = draft.language or self.default_language
        known = lookup_language(language)
        display_name = draft.language_name or (known.display_name if known else language)
        direction = draft.direction if draft.direction in ("ltr", "rtl") else "ltr"

        pdf = None
        if draft.pdf:
            data = draft.pdf.get("data")
            filename = draft.pdf.get("filename")
            if isinstance(data, str) and isinstance(filename, str):
                pdf = PdfDocument(data=data, filename=filename)

        return ChatResponse(
            message=draft.message.strip() or EMPTY_REPLY_MESSAGE,
            language=language,
            language_display_name=display_name,
            text_direction=direction,  # type: ignore[arg-type]
            # Open question: backend omitting hasTTS means audio is assumed available.
            has_audio_capability=draft.has_audio if draft.has_audio is not None else True,
            pdf=pdf,
            agent_id=draft.agent,
            tier_id=draft.tier,
            vertical_id=draft.vertical,
        )
