import re

from speech_relay.config.constants import FILLER_WORDS

_FILLER_PATTERN = re.compile(
    r"(?<!\w)(?:" + "|".join(re.escape(word) for word in FILLER_WORDS) + r")(?!\w)[,.]?",
    re.IGNORECASE,
)
_SPACES = re.compile(r"\s{2,}")


def strip_filler_words(text: str) -> str:
    """Remove hesitation words ("um", "uh", ...) and collapse whitespace."""
    cleaned = _FILLER_PATTERN.sub("", text)
    return _SPACES.sub(" ", cleaned).strip(" ,")
