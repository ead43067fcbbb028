"""
GCP Text-to-Speech Service

Handles Google Cloud Text-to-Speech operations.
"""

from google.cloud import texttospeech

from speech_relay.config.constants import (
    GCP_TTS_TIMEOUT_SEC,
    TTS_AUDIO_ENCODING,
    TTS_PITCH,
    TTS_SPEAKING_RATE,
)
from speech_relay.services.gcp.credentials import ensure_credentials
from speech_relay.services.results import VoiceProfile


class GCPTextToSpeechService:
    """Handles Text-to-Speech operations."""

    def __init__(self):
        ensure_credentials()
        self._client = texttospeech.TextToSpeechClient()

    def synthesize(self, text: str, voice: VoiceProfile) -> bytes:
        """Synthesize text to speech audio (MP3)."""
        voice_params = texttospeech.VoiceSelectionParams(
            language_code=voice.language_code,
            name=voice.name,
        )

        audio_config = texttospeech.AudioConfig(
            audio_encoding=texttospeech.AudioEncoding[TTS_AUDIO_ENCODING],
            speaking_rate=TTS_SPEAKING_RATE,
            pitch=TTS_PITCH,
        )

        synthesis_input = texttospeech.SynthesisInput(text=text)

        response = self._client.synthesize_speech(
            input=synthesis_input,
            voice=voice_params,
            audio_config=audio_config,
            timeout=GCP_TTS_TIMEOUT_SEC,
        )

        return response.audio_content
