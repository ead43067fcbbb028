"""
Tests for language resolution, filler cleanup and the TTS cache.
"""
import pytest

from speech_relay.services.results import VoiceProfile
from speech_relay.services.translation import TTSCache
from speech_relay.services.translation.languages import (
    base_language,
    partner_language,
    recognition_languages,
    resolve_target_language,
    select_voice,
    to_locale,
)
from speech_relay.services.translation.text_cleanup import strip_filler_words


@pytest.mark.parametrize("code,expected", [
    ("vi-VN", "vi"),
    ("vi_vn", "vi"),
    ("EN", "en"),
    ("", None),
    (None, None),
])
def test_base_language(code, expected):
    assert base_language(code) == expected


def test_language_pairs_are_symmetric():
    assert partner_language("en-US") == "vi"
    assert partner_language("vi") == "en"
    assert partner_language("fr") is None


def test_to_locale():
    assert to_locale("vi") == "vi-VN"
    assert to_locale("en-GB") == "en-US"
    assert to_locale("fr-FR") == "fr-FR"


def test_resolve_target_language():
    assert resolve_target_language("en") == "vi"
    assert resolve_target_language("vi-VN") == "en"
    assert resolve_target_language("en", explicit_target="en-US") == "en"
    assert resolve_target_language(None) == "vi"
    assert resolve_target_language("fr") == "vi"


def test_recognition_languages():
    assert recognition_languages("en") == ("vi-VN", ())
    assert recognition_languages("vi") == ("en-US", ())
    assert recognition_languages(None) == ("en-US", ("vi-VN",))


def test_select_voice():
    assert select_voice("vi") == VoiceProfile("vi-VN", "vi-VN-Wavenet-D")
    assert select_voice("en-US") == VoiceProfile("en-US", "en-US-Wavenet-D")
    # Unmapped languages use the default voice
    assert select_voice("fr") == VoiceProfile("en-US", "en-US-Wavenet-D")


@pytest.mark.parametrize("text,expected", [
    ("Um, hello uh world.", "hello world."),
    ("ừm xin chào", "xin chào"),
    ("the drum is loud", "the drum is loud"),
    ("um", ""),
    # "à" is a sentence-final particle in Vietnamese, not a hesitation
    ("Anh đi rồi à?", "Anh đi rồi à?"),
])
def test_strip_filler_words(text, expected):
    assert strip_filler_words(text) == expected


# =============================================================================
# TTS cache
# =============================================================================

VOICE = VoiceProfile("vi-VN", "vi-VN-Wavenet-D")


def test_cache_hit_and_miss():
    cache = TTSCache(maxsize=2)

    assert cache.get("hello", VOICE) is None
    cache.put("hello", VOICE, b"mp3")
    assert cache.get("hello", VOICE) == b"mp3"

    stats = cache.get_stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["cache_size"] == 1


def test_cache_key_depends_on_voice():
    cache = TTSCache(maxsize=2)
    cache.put("hello", VOICE, b"vi")

    assert cache.get("hello", VoiceProfile("en-US", "en-US-Wavenet-D")) is None


def test_cache_evicts_least_recently_used():
    cache = TTSCache(maxsize=2)
    cache.put("a", VOICE, b"1")
    cache.put("b", VOICE, b"2")
    cache.get("a", VOICE)
    cache.put("c", VOICE, b"3")

    assert cache.get("b", VOICE) is None
    assert cache.get("a", VOICE) == b"1"
    assert cache.get("c", VOICE) == b"3"


def test_disabled_cache_stores_nothing():
    cache = TTSCache(maxsize=0)
    cache.put("hello", VOICE, b"mp3")

    assert cache.get("hello", VOICE) is None
    cache.clear()
    assert cache.get_stats()["cache_size"] == 0
