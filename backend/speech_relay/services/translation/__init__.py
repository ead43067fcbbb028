"""
Translation Module

This module contains all translation-related services:
- TranslationOrchestrator: translation + TTS for one final transcript
- TTSCache: LRU cache for TTS audio results
- languages: pair mapping, locale expansion and voice selection
- text_cleanup: optional filler-word removal

Usage:
    from speech_relay.services.translation import TranslationOrchestrator
    from speech_relay.services.translation.languages import resolve_target_language
"""

from speech_relay.services.translation.tts_cache import TTSCache
from speech_relay.services.translation.orchestrator import TranslationOrchestrator

__all__ = [
    "TTSCache",
    "TranslationOrchestrator",
]
