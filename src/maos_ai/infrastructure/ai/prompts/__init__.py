"""Versioned AI prompts.

Prompts are versioned as code so the version used for an answer can be
logged and rolled back.
"""

from maos_ai.infrastructure.ai.prompts.degraded_assistant_v1 import (
    DegradedAssistantPromptV1,
)

__all__ = ["DegradedAssistantPromptV1"]
