"""
Static relay configuration.

Language pairs, locale expansion, voice profiles and tuning values that do
not change between environments. Environment-dependent settings (credentials,
ports, feature toggles) belong in settings.py.
"""

# ==============================================================================
# LANGUAGES
# ==============================================================================

# Bidirectional pair mapping used to derive the target from the source.
# Every supported language has exactly one partner.
LANGUAGE_PAIRS: dict[str, str] = {
    "en": "vi",
    "vi": "en",
}

# Supported languages (derived from the pair mapping)
SUPPORTED_LANGUAGES: list[str] = sorted(LANGUAGE_PAIRS)

# Language code expansion map (short code -> full locale)
LANGUAGE_CODE_MAP: dict[str, str] = {
    "en": "en-US",
    "vi": "vi-VN",
}

# ==============================================================================
# VOICES
# ==============================================================================

# Base language -> (locale, voice name) for Text-to-Speech
VOICE_PROFILES: dict[str, tuple[str, str]] = {
    "en": ("en-US", "en-US-Wavenet-D"),
    "vi": ("vi-VN", "vi-VN-Wavenet-D"),
}

# Used for any language without an entry in VOICE_PROFILES
DEFAULT_VOICE_PROFILE: tuple[str, str] = ("en-US", "en-US-Wavenet-D")

# Text-to-Speech output encoding sent to the client
TTS_AUDIO_ENCODING: str = "MP3"

# TTS speaking rate (1.0 = normal speed)
TTS_SPEAKING_RATE: float = 1.0

# TTS pitch offset (0.0 = no change)
TTS_PITCH: float = 0.0

# ==============================================================================
# TEXT CLEANUP
# ==============================================================================

# Hesitation words removed before translation when STRIP_FILLER_WORDS is on
FILLER_WORDS: tuple[str, ...] = (
    "um",
    "uh",
    "uhm",
    "er",
    "ah",
    "hmm",
    "ừ",
    "ờ",
    "ừm",
)

# ==============================================================================
# STREAMING RECOGNITION
# ==============================================================================

# How long the audio generator waits on the chunk queue before re-checking
# whether the stream is still active (seconds)
AUDIO_QUEUE_READ_TIMEOUT_SEC: float = 0.1

# ==============================================================================
# EXECUTORS
# ==============================================================================

# Worker threads for per-call collaborator work (batch recognition,
# translation, language detection, synthesis). Open recognition streams run
# on their own threads and never occupy this pool.
COLLABORATOR_MAX_WORKERS: int = 8

# ==============================================================================
# GCP API TIMEOUTS
# ==============================================================================

# Speech-to-Text API timeout (seconds)
GCP_STT_TIMEOUT_SEC: float = 30.0

# Translation API timeout (seconds)
GCP_TRANSLATE_TIMEOUT_SEC: float = 5.0

# Text-to-Speech API timeout (seconds)
GCP_TTS_TIMEOUT_SEC: float = 10.0


def _validate_language_pairs() -> None:
    for source, target in LANGUAGE_PAIRS.items():
        if LANGUAGE_PAIRS.get(target) != source:
            raise ValueError(f"Language pair {source}->{target} is not bidirectional")
        if source not in LANGUAGE_CODE_MAP:
            raise ValueError(f"No locale configured for language {source}")


_validate_language_pairs()
