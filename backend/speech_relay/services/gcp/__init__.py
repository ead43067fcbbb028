"""
GCP Services Package

Exports the Google Cloud implementations of the relay collaborators.
"""

from speech_relay.services.gcp.speech import GCPSpeechService
from speech_relay.services.gcp.translate import GCPTranslationService
from speech_relay.services.gcp.tts import GCPTextToSpeechService

__all__ = [
    "GCPSpeechService",
    "GCPTranslationService",
    "GCPTextToSpeechService",
]
