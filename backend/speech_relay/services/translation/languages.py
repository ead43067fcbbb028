"""
Language resolution and voice selection.

All lookups work on the base language code: "vi-VN", "vi_vn" and "vi"
resolve to the same pair partner, locale and voice.
"""

from typing import Optional

from speech_relay.config.settings import settings
from speech_relay.config.constants import (
    DEFAULT_VOICE_PROFILE,
    LANGUAGE_CODE_MAP,
    LANGUAGE_PAIRS,
    SUPPORTED_LANGUAGES,
    VOICE_PROFILES,
)
from speech_relay.services.results import VoiceProfile


def base_language(code: Optional[str]) -> Optional[str]:
    """Strip the region subtag: "vi-VN" -> "vi". Returns None for empty input."""
    if not code:
        return None
    base = code.strip().replace("_", "-").split("-")[0].lower()
    return base or None


def to_locale(code: str) -> str:
    """Expand a language code to its regional locale ("vi" -> "vi-VN")."""
    return LANGUAGE_CODE_MAP.get(base_language(code) or "", code)


def partner_language(code: Optional[str]) -> Optional[str]:
    """The other side of the language pair, or None if `code` is unsupported."""
    return LANGUAGE_PAIRS.get(base_language(code) or "")


def resolve_target_language(
    source_language: Optional[str],
    explicit_target: Optional[str] = None,
) -> str:
    """
    Resolve the translation target for a turn.

    An explicit target always wins. Otherwise the target is the pair partner
    of the source language; unknown or unsupported sources fall back to
    DEFAULT_TARGET_LANGUAGE.
    """
    explicit = base_language(explicit_target)
    if explicit:
        return explicit
    return partner_language(source_language) or settings.DEFAULT_TARGET_LANGUAGE


def recognition_languages(target_language: Optional[str] = None) -> tuple[str, tuple[str, ...]]:
    """
    Locales to recognize in, as (primary, alternatives).

    With an explicit target the speaker is assumed to talk in the target's
    pair partner. Without one, every supported language is offered so the
    Transcriber can report the one it detected.
    """
    if base_language(target_language):
        source = partner_language(target_language) or settings.DEFAULT_SOURCE_LANGUAGE
        return to_locale(source), ()

    primary = base_language(settings.DEFAULT_SOURCE_LANGUAGE) or SUPPORTED_LANGUAGES[0]
    alternatives = tuple(
        to_locale(language) for language in SUPPORTED_LANGUAGES if language != primary
    )
    return to_locale(primary), alternatives


def select_voice(language: Optional[str]) -> VoiceProfile:
    """Voice for a language; unmapped languages get the default voice."""
    language_code, name = VOICE_PROFILES.get(base_language(language) or "", DEFAULT_VOICE_PROFILE)
    return VoiceProfile(language_code=language_code, name=name)
