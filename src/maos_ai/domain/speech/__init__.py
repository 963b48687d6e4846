"""Speech domain module: script classification and provider routing."""

from maos_ai.domain.speech.router import SpeechRouter
from maos_ai.domain.speech.script_classifier import is_predominantly_arabic

__all__ = ["SpeechRouter", "is_predominantly_arabic"]
