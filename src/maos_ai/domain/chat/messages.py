"""Fixed user-facing texts of the chat gateway."""

import re

GREETING_MESSAGE = (
    "Bonjour ! Je suis MAOS IA, votre assistant de pilotage. "
    "Posez-moi une question sur votre activité."
)

FALLBACK_INTRODUCTION = (
    "Bonjour ! Je suis MAOS IA. Je fonctionne actuellement en mode dégradé : "
    "je n'ai pas accès à vos données en temps réel, mais je peux vous aider "
    "à utiliser MAOS ERP et répondre à vos questions générales."
)

TECHNICAL_PROBLEM_MESSAGE = (
    "Je rencontre un problème technique, merci de réessayer dans quelques instants."
)

SERVICE_UNAVAILABLE_MESSAGE = (
    "Le service MAOS IA est temporairement indisponible. Merci de réessayer plus tard."
)

EMPTY_REPLY_MESSAGE = "Désolé, je n'ai pas pu générer de réponse."

_GREETING_PATTERN = re.compile(
    r"^\s*(bonjour|bonsoir|salut|coucou|hello|hi|hey|salam|salam alaykoum|"
    r"السلام عليكم|سلام|مرحبا|azul|ⴰⵣⵓⵍ)\s*[!.?،]*\s*$",
    re.IGNORECASE,
)


def is_bare_greeting(text: str) -> bool:
    """Return True if ``text`` is nothing but a greeting."""
    return bool(_GREETING_PATTERN.match(text))
