"""
Protocol definitions for the relay's external collaborators.

This module defines interfaces (Python Protocols) that allow:
- Swapping implementations (e.g., GCP -> another provider)
- Testing without real API credentials
- Clear contracts between the session and the speech services

All three collaborators are blocking, stateless per call and shared
process-wide. The relay calls them from the default executor.

Usage:
    from speech_relay.services.protocols import Transcriber, Translator, Synthesizer

    def relay_turn(stt: Transcriber, mt: Translator, tts: Synthesizer, audio: bytes):
        result = stt.transcribe(audio, "en-US")
        text = mt.translate(result.text, "vi")
        audio_out = tts.synthesize(text, VoiceProfile("vi-VN", "vi-VN-Wavenet-D"))
"""

from typing import Protocol, Iterator, Optional, Sequence, Callable

from speech_relay.services.results import TranscriptResult, VoiceProfile


# Callbacks a RecognitionStream invokes on the event loop
ResultCallback = Callable[[TranscriptResult], None]
ErrorCallback = Callable[[Exception], None]
FinishedCallback = Callable[[], None]


class Transcriber(Protocol):
    """
    Interface for speech-to-text services.

    Implementations must provide both batch and streaming recognition.
    """

    def transcribe(
        self,
        audio_data: bytes,
        language_code: str,
        alternative_language_codes: Sequence[str] = (),
    ) -> TranscriptResult:
        """
        Transcribe one complete audio payload (batch mode).

        Args:
            audio_data: Encoded audio bytes
            language_code: Primary locale (e.g., "en-US", "vi-VN")
            alternative_language_codes: Extra locales for auto-detection

        Returns:
            A final TranscriptResult; `language` carries the detected locale
            when the service reports one.
        """
        ...

    def streaming_transcribe(
        self,
        audio_chunks: Iterator[bytes],
        language_code: str,
        alternative_language_codes: Sequence[str] = (),
    ) -> Iterator[TranscriptResult]:
        """
        Stream transcribe audio, yielding results as they become available.

        Yields both interim and final results; `is_final` tells them apart.
        The iterator ends once `audio_chunks` is exhausted and the service
        has flushed its last result.
        """
        ...


class Translator(Protocol):
    """Interface for translation services."""

    def translate(
        self,
        text: str,
        target_language: str,
        source_language: Optional[str] = None,
    ) -> str:
        """
        Translate text into the target language.

        Args:
            text: Text to translate
            target_language: Base language code (e.g., "vi")
            source_language: Base language code, or None to let the
                             service detect it

        Returns:
            Translated text
        """
        ...

    def detect_language(self, text: str) -> str:
        """Return the language code the service detects for `text`."""
        ...


class Synthesizer(Protocol):
    """
    Interface for text-to-speech services.

    Implementations return encoded audio (MP3) for the given voice.
    """

    def synthesize(self, text: str, voice: VoiceProfile) -> bytes:
        """Synthesize speech from text."""
        ...


class RecognitionStream(Protocol):
    """Handle to one open streaming recognition."""

    @property
    def closed(self) -> bool:
        """True once the stream no longer accepts audio."""
        ...

    @property
    def finished(self) -> bool:
        """True once the recognition task has completed."""
        ...

    def write(self, chunk: bytes) -> None:
        """Queue one audio chunk. Raises StreamStateError once closed."""
        ...

    def end(self) -> None:
        """Signal end of input; pending final results are still delivered."""
        ...

    def close(self) -> None:
        """Terminate the stream; no further results are delivered."""
        ...

    async def wait(self) -> None:
        """Wait until the recognition has finished."""
        ...
