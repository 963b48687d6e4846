"""Chat domain module.

Modules:
- gateway: ChatGateway, primary/degraded orchestration and normalization
- degraded: DegradedResponder for the no-business-data path
- context_window: history trimming per path
- types: provider-agnostic chat types
"""

from maos_ai.domain.chat.context_window import ContextWindow, build_context_window
from maos_ai.domain.chat.degraded import DegradedResponder
from maos_ai.domain.chat.gateway import ChatGateway
from maos_ai.domain.chat.types import (
    CallerContext,
    ChatRequest,
    ChatResponse,
    ConversationMessage,
)

__all__ = [
    "CallerContext",
    "ChatGateway",
    "ChatRequest",
    "ChatResponse",
    "ContextWindow",
    "ConversationMessage",
    "DegradedResponder",
    "build_context_window",
]
