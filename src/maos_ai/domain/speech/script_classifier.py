"""Arabic/Amazigh script detection for speech provider selection."""

import re

# Arabic, Arabic Supplement, Arabic Extended-A, Tifinagh
ARABIC_SCRIPT_PATTERN = re.compile(r"[\u0600-\u06FF\u0750-\u077F\u08A0-\u08FF\u2D30-\u2D7F]")
WHITESPACE_PATTERN = re.compile(r"\s")

# Strictly greater: a single Arabic word in a Latin sentence must not flip it.
ARABIC_SHARE_THRESHOLD = 0.30


def is_predominantly_arabic(text: str) -> bool:
    """Return True if more than 30% of the non-whitespace characters are Arabic-script.

    Empty or all-whitespace text is never Arabic.
    """
    total = len(WHITESPACE_PATTERN.sub("", text))
    if total == 0:
        return False
    arabic = len(ARABIC_SCRIPT_PATTERN.findall(text))
    return arabic / total > ARABIC_SHARE_THRESHOLD
