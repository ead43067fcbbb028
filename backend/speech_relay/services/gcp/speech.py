"""
GCP Speech Service

Handles Google Cloud Speech-to-Text operations.
"""

import logging
from typing import Iterator, Sequence

from google.cloud import speech

from speech_relay.config.settings import settings
from speech_relay.config.constants import GCP_STT_TIMEOUT_SEC
from speech_relay.services.gcp.credentials import ensure_credentials
from speech_relay.services.results import TranscriptResult

logger = logging.getLogger(__name__)


class GCPSpeechService:
    """Handles Speech-to-Text operations."""

    def __init__(self):
        ensure_credentials()
        self._client = speech.SpeechClient()

    def _recognition_config(
        self,
        language_code: str,
        alternative_language_codes: Sequence[str],
    ) -> speech.RecognitionConfig:
        return speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding[settings.AUDIO_ENCODING],
            sample_rate_hertz=settings.AUDIO_SAMPLE_RATE_HZ,
            language_code=language_code,
            alternative_language_codes=list(alternative_language_codes),
            enable_automatic_punctuation=True,
        )

    def transcribe(
        self,
        audio_data: bytes,
        language_code: str,
        alternative_language_codes: Sequence[str] = (),
    ) -> TranscriptResult:
        """Transcribe one complete audio payload."""
        config = self._recognition_config(language_code, alternative_language_codes)
        audio = speech.RecognitionAudio(content=audio_data)

        response = self._client.recognize(
            config=config,
            audio=audio,
            timeout=GCP_STT_TIMEOUT_SEC,
        )
        if not response.results:
            return TranscriptResult(text="", language=language_code)

        transcript = " ".join(
            result.alternatives[0].transcript.strip()
            for result in response.results
            if result.alternatives
        ).strip()
        detected = next(
            (result.language_code for result in response.results if result.language_code),
            language_code,
        )
        confidence = next(
            (result.alternatives[0].confidence for result in response.results if result.alternatives),
            None,
        )
        return TranscriptResult(text=transcript, language=detected, confidence=confidence)

    def streaming_transcribe(
        self,
        audio_chunks: Iterator[bytes],
        language_code: str,
        alternative_language_codes: Sequence[str] = (),
    ) -> Iterator[TranscriptResult]:
        """
        Transcribe audio stream using Google Cloud Speech-to-Text Streaming API.

        Args:
            audio_chunks: Iterator that yields bytes chunks.
            language_code: Language code for recognition.
            alternative_language_codes: Extra locales for auto-detection.

        Yields:
            TranscriptResult: interim and final transcriptions.
        """
        config = self._recognition_config(language_code, alternative_language_codes)
        streaming_config = speech.StreamingRecognitionConfig(
            config=config,
            interim_results=True
        )

        # Generator to yield StreamingRecognizeRequest
        def request_generator():
            for chunk in audio_chunks:
                yield speech.StreamingRecognizeRequest(audio_content=chunk)

        responses = self._client.streaming_recognize(
            config=streaming_config,
            requests=request_generator(),
        )

        for response in responses:
            if not response.results:
                continue

            result = response.results[0]
            if not result.alternatives:
                continue

            transcript = result.alternatives[0].transcript.strip()
            if not transcript:
                continue

            yield TranscriptResult(
                text=transcript,
                language=result.language_code or language_code,
                is_final=result.is_final,
                confidence=result.alternatives[0].confidence if result.is_final else None,
            )
