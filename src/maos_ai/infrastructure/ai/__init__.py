"""AI infrastructure for the degraded chat path."""

from maos_ai.infrastructure.ai.client import AIResponse, FallbackChatClient

__all__ = [
    "AIResponse",
    "FallbackChatClient",
]
