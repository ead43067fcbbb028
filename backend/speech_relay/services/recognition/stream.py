"""
Recognition Stream - one open streaming recognition.

Bridges the blocking streaming API of a Transcriber to the event loop:

    write(chunk) -> thread-safe queue -> audio generator -> streaming_transcribe
                                                              (stream thread)
    on_result(final) <- call_soon_threadsafe <- final results

Each stream consumes on its own thread for as long as it is open, so idle
streams never hold workers of the shared collaborator pool.

Interim results never leave this class. A stream that was ended normally
but produced no final transcript reports a TranscriptionFailure, so every
completed turn ends with either a result or an error. A stream the service
ends on its own stops accepting audio and calls `on_finished`.

Usage:
    stream = QueuedRecognitionStream(transcriber, on_result, on_error, "en-US")
    stream.start()
    stream.write(chunk)
    stream.end()          # flush; final results still arrive
    stream.close()        # terminate; nothing else is delivered
"""

import asyncio
import logging
import queue
import threading
from queue import Empty
from typing import Iterator, Optional, Sequence

from speech_relay.config.constants import AUDIO_QUEUE_READ_TIMEOUT_SEC
from speech_relay.services.exceptions import StreamStateError, TranscriptionFailure
from speech_relay.services.metrics import active_streams_gauge
from speech_relay.services.protocols import (
    ErrorCallback,
    FinishedCallback,
    ResultCallback,
    Transcriber,
)
from speech_relay.services.results import TranscriptResult

logger = logging.getLogger(__name__)


class QueuedRecognitionStream:
    """
    Feeds queued audio chunks into a Transcriber's streaming recognition.

    Thread-safe for write/end/close (uses thread-safe Queue); callbacks are
    always invoked on the event loop that started the stream.
    """

    def __init__(
        self,
        transcriber: Transcriber,
        on_result: ResultCallback,
        on_error: ErrorCallback,
        language_code: str,
        alternative_language_codes: Sequence[str] = (),
        stream_id: str = "",
        on_finished: Optional[FinishedCallback] = None,
    ):
        self._transcriber = transcriber
        self._on_result = on_result
        self._on_error = on_error
        self._on_finished = on_finished
        self.language_code = language_code
        self.alternative_language_codes = tuple(alternative_language_codes)
        self.stream_id = stream_id

        self._queue: queue.Queue = queue.Queue()
        self._active = True   # False once closed: results are discarded
        self._ended = False   # True once end-of-input was signalled
        self._final_count = 0
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def closed(self) -> bool:
        return self._ended or not self._active or self.finished

    @property
    def finished(self) -> bool:
        return self._task is not None and self._task.done()

    def start(self) -> None:
        """Start the recognition thread and the task that waits for it."""
        if self._task is not None:
            logger.warning(f"Stream {self.stream_id} already started")
            return

        self._loop = asyncio.get_running_loop()
        done = self._loop.create_future()
        self._thread = threading.Thread(
            target=self._thread_main,
            args=(done,),
            name=f"stt_stream_{self.stream_id}",
            daemon=True,
        )
        self._thread.start()
        self._task = asyncio.create_task(self._run(done))
        logger.info(f"🎙️ Opened recognition stream {self.stream_id} ({self.language_code})")

    def write(self, chunk: bytes) -> None:
        if self.closed:
            raise StreamStateError(f"Recognition stream {self.stream_id} is closed")
        self._queue.put_nowait(chunk)

    def end(self) -> None:
        """Signal end of input by pushing None to the queue."""
        if self.closed:
            return
        self._ended = True
        self._queue.put(None)
        logger.debug(f"Signaled end for stream {self.stream_id}")

    def close(self) -> None:
        """Terminate the stream. Idempotent."""
        if not self._active:
            return
        self._active = False
        self._queue.put(None)
        logger.info(f"🛑 Closed recognition stream {self.stream_id}")

    async def wait(self) -> None:
        """Wait for the recognition to finish."""
        if self._task is not None:
            await asyncio.wait([self._task])

    def _audio_generator(self) -> Iterator[bytes]:
        """Generator that yields chunks from the thread-safe queue."""
        while self._active:
            try:
                chunk = self._queue.get(timeout=AUDIO_QUEUE_READ_TIMEOUT_SEC)
            except Empty:
                continue
            if chunk is None:  # Sentinel value
                return
            yield chunk

    def _consume(self) -> None:
        """Blocking streaming recognition. Runs on the stream thread."""
        for result in self._transcriber.streaming_transcribe(
            self._audio_generator(),
            language_code=self.language_code,
            alternative_language_codes=self.alternative_language_codes,
        ):
            if not self._active:
                break
            if not result.is_final or not result.text.strip():
                continue

            self._final_count += 1
            self._loop.call_soon_threadsafe(self._deliver, result)

    def _thread_main(self, done: asyncio.Future) -> None:
        error: Optional[BaseException] = None
        try:
            self._consume()
        except Exception as e:
            error = e

        def _complete():
            if done.done():
                return
            if error is None:
                done.set_result(None)
            else:
                done.set_exception(error)

        try:
            self._loop.call_soon_threadsafe(_complete)
        except RuntimeError:
            logger.debug(f"Event loop closed before stream {self.stream_id} finished")

    def _deliver(self, result: TranscriptResult) -> None:
        if self._active:
            logger.info(f"📝 Final transcript on {self.stream_id}: '{result.text[:50]}'")
            self._on_result(result)

    async def _run(self, done: asyncio.Future) -> None:
        active_streams_gauge.inc()
        try:
            await done
        except Exception as e:
            if self._active:
                logger.error(f"Streaming recognition failed on {self.stream_id}: {e}")
                self._on_error(TranscriptionFailure("Speech recognition failed."))
        else:
            if self._active and self._final_count == 0:
                logger.warning(f"Stream {self.stream_id} ended without a final transcript")
                self._on_error(TranscriptionFailure())
            elif self._active and not self._ended:
                logger.info(f"Recognition stream {self.stream_id} was ended by the service")
            logger.info(f"Recognition stream {self.stream_id} finished ({self._final_count} final results)")
        finally:
            active_streams_gauge.dec()

        if self._active and self._on_finished is not None:
            self._on_finished()
