"""
Translation Orchestrator - turns one final transcript into audio.

Flow:
    TranscriptResult -> (filler cleanup) -> source language -> target language
                     -> Translator -> Synthesizer (+ optional echo synthesis)

Degradation rules:
- Translation failure: the original text is synthesized instead.
- Synthesis failure: the affected audio is left out of the TurnResult;
  the session decides what to tell the client.
- Empty transcript: TranscriptionFailure, nothing else is attempted.

Usage:
    orchestrator = TranslationOrchestrator(translator, synthesizer)
    turn = await orchestrator.run_turn(TranscriptResult("hello", "en-US"))
    turn.translation.text          # "xin chào"
    turn.translated_audio.audio    # MP3 bytes
"""

import asyncio
import logging
import time
from typing import Optional

from speech_relay.config.settings import settings
from speech_relay.config.constants import TTS_AUDIO_ENCODING
from speech_relay.services.exceptions import (
    SynthesisFailure,
    TranscriptionFailure,
    TranslationFailure,
)
from speech_relay.services.executors import get_collaborator_executor
from speech_relay.services.metrics import stage_latency
from speech_relay.services.protocols import Translator, Synthesizer
from speech_relay.services.results import (
    SynthesizedAudio,
    TranscriptResult,
    TranslationResult,
    TurnResult,
)
from speech_relay.services.translation.languages import (
    base_language,
    resolve_target_language,
    select_voice,
)
from speech_relay.services.translation.text_cleanup import strip_filler_words
from speech_relay.services.translation.tts_cache import TTSCache

logger = logging.getLogger(__name__)


class TranslationOrchestrator:
    """
    Drives translation and speech synthesis for finalized transcripts.

    Stateless per turn apart from the shared TTS cache, so one instance
    serves every session.
    """

    def __init__(
        self,
        translator: Translator,
        synthesizer: Synthesizer,
        tts_cache: Optional[TTSCache] = None,
        echo_original: Optional[bool] = None,
        strip_fillers: Optional[bool] = None,
    ):
        self._translator = translator
        self._synthesizer = synthesizer
        self._tts_cache = tts_cache if tts_cache is not None else TTSCache(maxsize=settings.TTS_CACHE_SIZE)
        self.echo_original = settings.ECHO_ORIGINAL if echo_original is None else echo_original
        self.strip_fillers = settings.STRIP_FILLER_WORDS if strip_fillers is None else strip_fillers

    @property
    def tts_cache(self) -> TTSCache:
        return self._tts_cache

    async def run_turn(
        self,
        transcript: TranscriptResult,
        target_language: Optional[str] = None,
    ) -> TurnResult:
        """
        Translate and synthesize one final transcript.

        Args:
            transcript: Final transcript from the recognition adapter
            target_language: Explicit target, or None to derive it from the
                             source language's pair partner

        Raises:
            TranscriptionFailure: the transcript is empty
        """
        text = transcript.text.strip()
        if not text:
            raise TranscriptionFailure()

        if self.strip_fillers:
            text = strip_filler_words(text) or text

        source = base_language(transcript.language)
        if source is None:
            source = await self._detect_language(text)
        target = resolve_target_language(source, target_language)
        logger.info(f"Translating from {source or 'auto'} to {target}")

        echo_task = None
        if self.echo_original and source:
            echo_task = asyncio.create_task(self._synthesize_or_none(text, source, kind="echo"))

        try:
            try:
                translated = await self._translate(text, source, target)
            except TranslationFailure as e:
                logger.warning(f"{e.message} Falling back to original text: '{text[:50]}'")
                translated = TranslationResult(
                    text=text,
                    target_language=target,
                    source_language=source,
                    degraded=True,
                )

            translated_audio = await self._synthesize_or_none(translated.text, target, kind="translation")
            echo_audio = await echo_task if echo_task is not None else None
        except asyncio.CancelledError:
            if echo_task is not None:
                echo_task.cancel()
            raise

        return TurnResult(
            transcript=transcript,
            translation=translated,
            translated_audio=translated_audio,
            echo_audio=echo_audio,
        )

    async def _detect_language(self, text: str) -> Optional[str]:
        loop = asyncio.get_running_loop()
        try:
            detected = await loop.run_in_executor(get_collaborator_executor(), self._translator.detect_language, text)
        except Exception as e:
            logger.warning(f"Language detection failed: {e}")
            return None
        return base_language(detected)

    async def _translate(self, text: str, source: Optional[str], target: str) -> TranslationResult:
        loop = asyncio.get_running_loop()
        start_time = time.perf_counter()
        try:
            translated = await loop.run_in_executor(
                get_collaborator_executor(),
                lambda: self._translator.translate(text, target, source),
            )
        except Exception as e:
            raise TranslationFailure(f"Translation failed: {e}") from e
        finally:
            stage_latency.labels(stage="translate").observe(time.perf_counter() - start_time)

        if not translated or not translated.strip():
            raise TranslationFailure("Translator returned an empty result.")

        logger.info(f"✅ Translated ({target}): '{translated[:50]}'")
        return TranslationResult(text=translated, target_language=target, source_language=source)

    async def _synthesize(self, text: str, language: str, kind: str) -> SynthesizedAudio:
        voice = select_voice(language)
        audio = self._tts_cache.get(text, voice)

        if audio is None:
            loop = asyncio.get_running_loop()
            start_time = time.perf_counter()
            try:
                audio = await loop.run_in_executor(get_collaborator_executor(), self._synthesizer.synthesize, text, voice)
            except Exception as e:
                raise SynthesisFailure(f"Speech synthesis failed: {e}") from e
            finally:
                stage_latency.labels(stage="synthesize").observe(time.perf_counter() - start_time)

            if not audio:
                raise SynthesisFailure("Synthesizer returned no audio.")
            self._tts_cache.put(text, voice, audio)

        logger.debug(f"TTS {kind}: {len(audio)} bytes with voice {voice.name}")
        return SynthesizedAudio(
            audio=audio,
            encoding=TTS_AUDIO_ENCODING,
            language=voice.language_code,
            kind=kind,
        )

    async def _synthesize_or_none(self, text: str, language: str, kind: str) -> Optional[SynthesizedAudio]:
        try:
            return await self._synthesize(text, language, kind)
        except SynthesisFailure as e:
            logger.error(f"Dropping {kind} audio: {e.message}")
            return None
