"""
Relay Session - per-connection state machine.

States:
    IDLE ──start(stream)──> STREAMING ──stop / stream error──> IDLE
    IDLE ──start(batch)───> BUFFERING ──stop (batch recognition)──> IDLE

Every `start` bumps the session generation. Streams, queued turns and
outbound events are tagged with the generation they belong to; anything
tagged with an older generation is dropped, so a restarted turn can never
receive results from the stream it replaced. `close` bumps the generation
one last time, which silences all in-flight work.

Turns are processed one at a time by a worker task reading a FIFO queue,
which keeps client-visible results in the order their transcripts were
finalized.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Set

from speech_relay.config.settings import settings
from speech_relay.schemas.websocket_events import AudioOutEvent, ErrorEvent
from speech_relay.services.exceptions import (
    RelayError,
    StreamStateError,
    SynthesisFailure,
    TranscriptionFailure,
)
from speech_relay.services.metrics import turns_processed
from speech_relay.services.protocols import RecognitionStream
from speech_relay.services.recognition import RecognitionPipeline
from speech_relay.services.results import SynthesizedAudio, TranscriptResult
from speech_relay.services.translation import TranslationOrchestrator
from speech_relay.services.translation.languages import recognition_languages

logger = logging.getLogger(__name__)

# Sends one JSON event to the client; returns False if it could not be sent
SendFunc = Callable[[dict], Awaitable[bool]]


class SessionState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    BUFFERING = "buffering"


@dataclass
class PendingTurn:
    """A finalized transcript (or a failure) waiting for the turn worker."""
    generation: int
    transcript: Optional[TranscriptResult] = None
    target_language: Optional[str] = None
    error: Optional[RelayError] = None
    done: Optional[asyncio.Future] = None


class RelaySession:
    """
    Owns one client connection's recognition state.

    Handles:
    - Opening/closing the (single) recognition stream
    - Buffering audio for batch recognition
    - Ordering and delivering turn results
    - Converting collaborator failures into `error` events
    """

    def __init__(
        self,
        session_id: str,
        send: SendFunc,
        recognition: RecognitionPipeline,
        orchestrator: TranslationOrchestrator,
        default_mode: Optional[str] = None,
        echo_delay_sec: Optional[float] = None,
    ):
        self.session_id = session_id
        self._send = send
        self._recognition = recognition
        self._orchestrator = orchestrator
        self.default_mode = default_mode or settings.DEFAULT_MODE
        self.echo_delay_sec = settings.ECHO_DELAY_SEC if echo_delay_sec is None else echo_delay_sec

        self.state = SessionState.IDLE
        self.target_language: Optional[str] = None
        self.sequence = 0

        self._stream: Optional[RecognitionStream] = None
        self._ending_streams: Set[RecognitionStream] = set()
        self._buffer: list[bytes] = []
        self._generation = 0
        self._closed = False

        self._turns: asyncio.Queue = asyncio.Queue()
        self._worker: Optional[asyncio.Task] = None
        self._batch_lock = asyncio.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def stream(self) -> Optional[RecognitionStream]:
        return self._stream

    @property
    def buffered_bytes(self) -> int:
        return sum(len(chunk) for chunk in self._buffer)

    # === Transitions ===

    async def start(self, target_language: Optional[str] = None, mode: Optional[str] = None):
        """Begin a new turn, discarding whatever the previous one left open."""
        if self._closed:
            logger.warning(f"[Session {self.session_id}] start after close ignored")
            return

        mode = mode or self.default_mode
        self._release_streams()
        self._buffer.clear()
        self._generation += 1
        self.target_language = target_language
        generation = self._generation

        if mode == "batch":
            self.state = SessionState.BUFFERING
            logger.info(f"[Session {self.session_id}] Buffering audio (target: {target_language or 'auto'})")
            return

        language_code, alternatives = recognition_languages(target_language)
        try:
            self._stream = self._recognition.open_stream(
                on_result=lambda result: self._on_final_transcript(generation, target_language, result),
                on_error=lambda error: self._on_stream_error(generation, error),
                on_finished=lambda: self._on_stream_finished(generation),
                language_code=language_code,
                alternative_language_codes=alternatives,
                stream_id=f"{self.session_id}#{generation}",
            )
        except Exception as e:
            logger.error(f"[Session {self.session_id}] Could not open recognition stream: {e}")
            self.state = SessionState.IDLE
            await self._emit_error(generation, TranscriptionFailure("Speech recognition failed."))
            return

        self.state = SessionState.STREAMING
        logger.info(f"[Session {self.session_id}] Streaming in {language_code} (target: {target_language or 'auto'})")

    async def audio(self, chunk: bytes):
        """Route one audio chunk into the open stream or the buffer."""
        if self._closed or not chunk:
            return

        if self.state is SessionState.STREAMING:
            try:
                if self._stream is None:
                    raise StreamStateError()
                self._stream.write(chunk)
            except StreamStateError as e:
                logger.warning(f"[Session {self.session_id}] {e.message} Dropping {len(chunk)} bytes")
        elif self.state is SessionState.BUFFERING:
            self._buffer.append(chunk)
        else:
            logger.warning(f"[Session {self.session_id}] Audio without an active turn, dropping {len(chunk)} bytes")

    async def stop(self):
        """End the current turn."""
        if self._closed:
            return

        if self.state is SessionState.STREAMING:
            stream, self._stream = self._stream, None
            self.state = SessionState.IDLE
            if stream is not None:
                stream.end()
                self._ending_streams = {s for s in self._ending_streams if not s.finished}
                self._ending_streams.add(stream)
        elif self.state is SessionState.BUFFERING:
            await self._finish_batch()
        else:
            logger.debug(f"[Session {self.session_id}] stop without an active turn")

    async def submit_batch(self, audio_data: bytes, target_language: Optional[str] = None):
        """One-shot request: buffer the whole payload and recognize it."""
        await self.start(target_language, mode="batch")
        await self.audio(audio_data)
        await self.stop()

    def close(self):
        """Release everything the session owns. Idempotent."""
        if self._closed:
            return

        self._closed = True
        self._generation += 1
        self._release_streams()
        self._buffer.clear()
        self.state = SessionState.IDLE

        if self._worker is not None and not self._worker.done():
            self._worker.cancel()

        while not self._turns.empty():
            turn = self._turns.get_nowait()
            self._turns.task_done()
            self._resolve(turn)

        logger.info(f"[Session {self.session_id}] Closed after {self.sequence} events")

    async def drain(self):
        """Wait for ended streams to finish and queued turns to complete."""
        for stream in list(self._ending_streams):
            await stream.wait()
        await self._turns.join()

    async def report_error(self, error: RelayError) -> bool:
        """Send an error that is not tied to a turn (e.g. a protocol error)."""
        if self._closed:
            return False
        self.sequence += 1
        return await self._send(ErrorEvent(message=error.message).model_dump())

    # === Internals ===

    def _release_streams(self):
        if self._stream is not None:
            self._stream.close()
            self._stream = None
        for stream in self._ending_streams:
            stream.close()
        self._ending_streams.clear()

    def _is_stale(self, generation: int) -> bool:
        return self._closed or generation != self._generation

    async def _finish_batch(self):
        audio_data = b"".join(self._buffer)
        self._buffer.clear()
        self.state = SessionState.IDLE
        generation = self._generation
        target_language = self.target_language

        async with self._batch_lock:
            if not audio_data:
                await self._run_turn(PendingTurn(generation, error=TranscriptionFailure()))
                return

            language_code, alternatives = recognition_languages(target_language)
            try:
                transcript = await self._recognition.recognize(audio_data, language_code, alternatives)
            except TranscriptionFailure as e:
                await self._run_turn(PendingTurn(generation, error=e))
                return

            await self._run_turn(PendingTurn(generation, transcript=transcript, target_language=target_language))

    async def _run_turn(self, turn: PendingTurn):
        """Queue a turn behind any pending stream results and wait for it."""
        turn.done = asyncio.get_running_loop().create_future()
        self._enqueue(turn)
        await turn.done

    def _on_final_transcript(self, generation: int, target_language: Optional[str], result: TranscriptResult):
        if self._is_stale(generation):
            logger.debug(f"[Session {self.session_id}] Dropping stale transcript '{result.text[:30]}'")
            return
        self._enqueue(PendingTurn(generation, transcript=result, target_language=target_language))

    def _on_stream_error(self, generation: int, error: Exception):
        if self._is_stale(generation):
            return
        if self._stream is not None:
            self._stream.close()
            self._stream = None
            self.state = SessionState.IDLE
        if not isinstance(error, RelayError):
            error = TranscriptionFailure("Speech recognition failed.")
        self._enqueue(PendingTurn(generation, error=error))

    def _on_stream_finished(self, generation: int):
        """The service ended the stream before the client sent `stop`."""
        if self._is_stale(generation) or self.state is not SessionState.STREAMING:
            return
        logger.info(f"[Session {self.session_id}] Recognition stream ended by the service, turn closed")
        self._stream = None
        self.state = SessionState.IDLE

    def _enqueue(self, turn: PendingTurn):
        if self._closed:
            self._resolve(turn)
            return
        self._turns.put_nowait(turn)
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._process_turns())

    @staticmethod
    def _resolve(turn: PendingTurn):
        if turn.done is not None and not turn.done.done():
            turn.done.set_result(None)

    async def _process_turns(self):
        while True:
            turn = await self._turns.get()
            try:
                await self._process_turn(turn)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.exception(f"[Session {self.session_id}] Unexpected error in turn: {e}")
                turns_processed.labels(status="error").inc()
                await self._emit_error(turn.generation, RelayError())
            finally:
                self._turns.task_done()
                self._resolve(turn)

    async def _process_turn(self, turn: PendingTurn):
        if self._is_stale(turn.generation):
            turns_processed.labels(status="stale").inc()
            return

        if turn.error is not None:
            turns_processed.labels(status="error").inc()
            await self._emit_error(turn.generation, turn.error)
            return

        try:
            result = await self._orchestrator.run_turn(turn.transcript, turn.target_language)
        except RelayError as e:
            turns_processed.labels(status="error").inc()
            await self._emit_error(turn.generation, e)
            return

        if result.echo_audio is not None:
            sent = await self._emit_audio(turn.generation, result.echo_audio)
            if sent and result.translated_audio is not None and self.echo_delay_sec > 0:
                await asyncio.sleep(self.echo_delay_sec)

        if result.translated_audio is None:
            turns_processed.labels(status="error").inc()
            await self._emit_error(turn.generation, SynthesisFailure())
            return

        await self._emit_audio(turn.generation, result.translated_audio)
        turns_processed.labels(status="degraded" if result.translation.degraded else "success").inc()

    async def _emit(self, generation: int, payload: dict) -> bool:
        if self._is_stale(generation):
            logger.debug(f"[Session {self.session_id}] Dropping stale '{payload.get('event')}' event")
            return False
        self.sequence += 1
        return await self._send(payload)

    async def _emit_audio(self, generation: int, audio: SynthesizedAudio) -> bool:
        event = AudioOutEvent.from_audio(audio.audio, kind=audio.kind, language=audio.language)
        return await self._emit(generation, event.model_dump())

    async def _emit_error(self, generation: int, error: RelayError) -> bool:
        logger.warning(f"[Session {self.session_id}] ⚠️ {error.message}")
        return await self._emit(generation, ErrorEvent(message=error.message).model_dump())
