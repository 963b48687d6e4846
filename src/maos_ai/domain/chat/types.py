"""Shared chat domain types.

Keep these types small and provider-agnostic: the orchestrator client, the
degraded responder and the API layer all exchange them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

Role = Literal["user", "assistant", "system"]
TextDirection = Literal["ltr", "rtl"]


@dataclass(frozen=True)
class ConversationMessage:
    """A message in the chat conversation, in chronological order."""

    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class CallerContext:
    """Context bag supplied by the dashboard.

    ``tier`` and ``vertical`` drive prompt calibration; everything else is
    forwarded to the orchestration backend untouched. A ``pack`` or ``metier``
    that is not a string stays in ``extra`` as sent.
    """

    tier: str | None = None
    vertical: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> CallerContext:
        data = dict(raw or {})
        tier = data.pop("pack") if isinstance(data.get("pack"), str) else None
        vertical = data.pop("metier") if isinstance(data.get("metier"), str) else None
        return cls(tier=tier, vertical=vertical, extra=data)

    def to_dict(self) -> dict[str, Any]:
        """Wire form, using the dashboard's original key names."""
        data = dict(self.extra)
        if self.tier is not None:
            data["pack"] = self.tier
        if self.vertical is not None:
            data["metier"] = self.vertical
        return data


@dataclass
class ChatRequest:
    """Inbound chat request."""

    messages: list[ConversationMessage]
    context: CallerContext = field(default_factory=CallerContext)
    images: list[str] = field(default_factory=list)
    files: list[dict[str, Any]] = field(default_factory=list)
    forced_language: str | None = None


@dataclass(frozen=True)
class PdfDocument:
    """Reference to a document generated by the report renderer."""

    data: str
    filename: str


@dataclass
class ChatResponse:
    """Normalized chat answer, identical in shape for every path."""

    message: str
    language: str
    language_display_name: str
    text_direction: TextDirection = "ltr"
    has_audio_capability: bool = True
    pdf: PdfDocument | None = None
    agent_id: str | None = None
    tier_id: str | None = None
    vertical_id: str | None = None


@dataclass(frozen=True)
class Language:
    code: str
    display_name: str
    direction: TextDirection


LANGUAGES: dict[str, Language] = {
    lang.code: lang
    for lang in (
        Language("fr", "Français", "ltr"),
        Language("en", "English", "ltr"),
        Language("ar", "العربية", "rtl"),
        Language("ar-MA", "الدارجة", "rtl"),
        Language("shi", "Tachelhit", "ltr"),
        Language("tzm", "Tamazight", "ltr"),
    )
}


def lookup_language(code: str | None) -> Language | None:
    """Find a known language by code, case-insensitively."""
    if not code:
        return None
    if code in LANGUAGES:
        return LANGUAGES[code]
    lowered = code.lower()
    for known in LANGUAGES.values():
        if known.code.lower() == lowered:
            return known
    return None
