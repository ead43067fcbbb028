"""
Recognition Pipeline Adapter

Normalizes batch and streaming recognition behind one contract: callers
only ever see final TranscriptResults.
"""

import asyncio
import logging
import time
from typing import Optional, Sequence

from speech_relay.services.exceptions import TranscriptionFailure
from speech_relay.services.executors import get_collaborator_executor
from speech_relay.services.metrics import stage_latency
from speech_relay.services.protocols import (
    ErrorCallback,
    FinishedCallback,
    RecognitionStream,
    ResultCallback,
    Transcriber,
)
from speech_relay.services.recognition.stream import QueuedRecognitionStream
from speech_relay.services.results import TranscriptResult

logger = logging.getLogger(__name__)


class RecognitionPipeline:
    """Wraps a Transcriber for use from the event loop."""

    def __init__(self, transcriber: Transcriber):
        self._transcriber = transcriber

    async def recognize(
        self,
        audio_data: bytes,
        language_code: str,
        alternative_language_codes: Sequence[str] = (),
    ) -> TranscriptResult:
        """Run one batch recognition without blocking the event loop."""
        loop = asyncio.get_running_loop()
        alternatives = tuple(alternative_language_codes)
        start_time = time.perf_counter()

        try:
            result = await loop.run_in_executor(
                get_collaborator_executor(),
                lambda: self._transcriber.transcribe(
                    audio_data,
                    language_code=language_code,
                    alternative_language_codes=alternatives,
                ),
            )
        except Exception as e:
            logger.error(f"Batch recognition failed: {e}")
            raise TranscriptionFailure("Speech recognition failed.") from e
        finally:
            stage_latency.labels(stage="transcribe").observe(time.perf_counter() - start_time)

        logger.info(f"🗣️ Transcript ({result.language or language_code}): '{result.text[:50]}'")
        return TranscriptResult(
            text=result.text,
            language=result.language,
            is_final=True,
            confidence=result.confidence,
        )

    def open_stream(
        self,
        on_result: ResultCallback,
        on_error: ErrorCallback,
        language_code: str,
        alternative_language_codes: Sequence[str] = (),
        stream_id: str = "",
        on_finished: Optional[FinishedCallback] = None,
    ) -> RecognitionStream:
        """Open and start a streaming recognition."""
        stream = QueuedRecognitionStream(
            self._transcriber,
            on_result=on_result,
            on_error=on_error,
            language_code=language_code,
            alternative_language_codes=alternative_language_codes,
            stream_id=stream_id,
            on_finished=on_finished,
        )
        stream.start()
        return stream
