"""
TTS Cache

Caches synthesized audio per (text, voice) to avoid repeated Text-to-Speech
calls for common phrases ("hello", "thank you", ...) across sessions.
Only touched from the event loop, so no locking is needed.
"""
from collections import OrderedDict
from typing import Optional
import hashlib
import logging

from speech_relay.services.results import VoiceProfile

logger = logging.getLogger(__name__)


class TTSCache:
    """LRU cache for TTS audio results."""

    def __init__(self, maxsize: int = 100):
        """
        Initialize TTS cache.

        Args:
            maxsize: Maximum number of cached TTS results (default: 100).
                     0 disables caching.
        """
        self._cache: OrderedDict[str, bytes] = OrderedDict()
        self._maxsize = maxsize
        self._hits = 0
        self._misses = 0

    def get_cache_key(self, text: str, voice: VoiceProfile) -> str:
        key_str = f"{text}|{voice.language_code}|{voice.name}"
        return hashlib.md5(key_str.encode()).hexdigest()[:16]

    def get(self, text: str, voice: VoiceProfile) -> Optional[bytes]:
        """Retrieve cached audio, or None on a miss."""
        key = self.get_cache_key(text, voice)
        audio = self._cache.get(key)
        if audio is None:
            self._misses += 1
            return None

        self._cache.move_to_end(key)
        self._hits += 1
        logger.debug(f"TTS cache HIT for key {key} (text: '{text[:30]}', voice: {voice.name})")
        return audio

    def put(self, text: str, voice: VoiceProfile, audio_bytes: bytes):
        """Store audio, evicting the least recently used entry when full."""
        if self._maxsize <= 0 or not audio_bytes:
            return

        key = self.get_cache_key(text, voice)
        self._cache[key] = audio_bytes
        self._cache.move_to_end(key)

        while len(self._cache) > self._maxsize:
            oldest_key, _ = self._cache.popitem(last=False)
            logger.debug(f"TTS cache evicted oldest entry: {oldest_key}")

    def get_stats(self) -> dict:
        total = self._hits + self._misses
        hit_rate = (self._hits / total * 100) if total > 0 else 0

        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate_percent": round(hit_rate, 2),
            "cache_size": len(self._cache),
            "max_size": self._maxsize
        }

    def clear(self):
        self._cache.clear()
        logger.info("TTS cache cleared")
