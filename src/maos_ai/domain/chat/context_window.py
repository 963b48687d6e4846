"""Conversation context windows.

The primary and degraded paths each build their own window, with their own
history limit, from the same conversation.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from maos_ai.domain.chat.types import ConversationMessage

PRIMARY_HISTORY_LIMIT = 10
FALLBACK_HISTORY_LIMIT = 5


@dataclass(frozen=True)
class ContextWindow:
    """Latest user utterance plus the trailing slice of the conversation."""

    utterance: str
    history: tuple[ConversationMessage, ...]

    def history_dicts(self) -> list[dict[str, str]]:
        return [msg.to_dict() for msg in self.history]


def build_context_window(
    messages: Sequence[ConversationMessage],
    limit: int,
) -> ContextWindow | None:
    """Build a window over ``messages``.

    Args:
        messages: Full conversation, oldest first (may be empty)
        limit: Number of trailing messages (any role) to keep

    Returns:
        The window, or None when the conversation has no user message.
        None is the "no user utterance" signal, not an error.
    """
    if limit <= 0:
        raise ValueError("limit must be positive")

    utterance = next(
        (msg.content for msg in reversed(messages) if msg.role == "user"),
        None,
    )
    if utterance is None:
        return None

    return ContextWindow(utterance=utterance, history=tuple(messages[-limit:]))
