"""API request/response schemas.

Wire names are camelCase, matching the dashboard client.
"""

from __future__ import annotations

import base64
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from maos_ai.domain.chat.types import (
    CallerContext,
    ChatRequest,
    ChatResponse,
    ConversationMessage,
)
from maos_ai.infrastructure.speech.base import SynthesizedAudio


class APIModel(BaseModel):
    """Base model using camelCase aliases on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ----- Chat -----


class MessageInput(APIModel):
    """A single message in the conversation."""

    role: Literal["user", "assistant", "system"]
    content: str


class ChatRequestBody(APIModel):
    """Request to send a chat message."""

    messages: list[MessageInput]
    context: dict[str, Any] | None = None
    images: list[str] = Field(default_factory=list)
    files: list[dict[str, Any]] = Field(default_factory=list)
    forced_language: str | None = Field(
        default=None,
        validation_alias=AliasChoices("forcedLanguage", "forcedLang", "forced_language"),
    )

    def to_domain(self) -> ChatRequest:
        return ChatRequest(
            messages=[ConversationMessage(role=m.role, content=m.content) for m in self.messages],
            context=CallerContext.from_dict(self.context),
            images=list(self.images),
            files=[dict(f) for f in self.files],
            forced_language=self.forced_language or None,
        )


class PdfBody(APIModel):
    data: str
    filename: str


class ChatResponseBody(APIModel):
    """Normalized chat answer."""

    message: str = Field(..., min_length=1)
    pdf: PdfBody | None = None
    language: str
    language_display_name: str
    text_direction: Literal["ltr", "rtl"] = "ltr"
    has_audio_capability: bool = True
    agent_id: str | None = None
    tier_id: str | None = None
    vertical_id: str | None = None

    @classmethod
    def from_domain(cls, response: ChatResponse) -> ChatResponseBody:
        return cls(
            message=response.message,
            pdf=PdfBody(data=response.pdf.data, filename=response.pdf.filename)
            if response.pdf
            else None,
            language=response.language,
            language_display_name=response.language_display_name,
            text_direction=response.text_direction,
            has_audio_capability=response.has_audio_capability,
            agent_id=response.agent_id,
            tier_id=response.tier_id,
            vertical_id=response.vertical_id,
        )


# ----- Speech -----


class TtsResponseBody(APIModel):
    audio_data_uri: str


class TranscriptionResponseBody(APIModel):
    text: str


def encode_data_uri(audio: SynthesizedAudio) -> str:
    """Encode audio as a self-describing ``data:`` URI."""
    payload = base64.b64encode(audio.audio).decode("ascii")
    return f"data:{audio.mime_type};base64,{payload}"
