"""
Tests for the TranslationOrchestrator
"""
import pytest

from conftest import FakeSynthesizer, FakeTranslator
from speech_relay.services.exceptions import TranscriptionFailure
from speech_relay.services.results import TranscriptResult
from speech_relay.services.translation import TranslationOrchestrator, TTSCache


def make_orchestrator(translator=None, synthesizer=None, **kwargs):
    kwargs.setdefault("tts_cache", TTSCache(maxsize=0))
    kwargs.setdefault("echo_original", False)
    kwargs.setdefault("strip_fillers", False)
    return TranslationOrchestrator(
        translator or FakeTranslator(),
        synthesizer or FakeSynthesizer(),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_english_is_translated_to_vietnamese():
    translator = FakeTranslator()
    orchestrator = make_orchestrator(translator)

    turn = await orchestrator.run_turn(TranscriptResult("hello", "en-US"))

    assert translator.calls == [("hello", "vi", "en")]
    assert turn.translation.text == "[vi] hello"
    assert not turn.translation.degraded
    assert turn.translated_audio.audio == b"vi-VN-Wavenet-D:[vi] hello"
    assert turn.translated_audio.encoding == "MP3"
    assert turn.translated_audio.language == "vi-VN"
    assert turn.echo_audio is None


@pytest.mark.asyncio
async def test_vietnamese_is_translated_to_english():
    orchestrator = make_orchestrator()

    turn = await orchestrator.run_turn(TranscriptResult("xin chào", "vi-VN"))

    assert turn.translation.target_language == "en"
    assert turn.translated_audio.language == "en-US"


@pytest.mark.asyncio
async def test_explicit_target_wins():
    translator = FakeTranslator()
    orchestrator = make_orchestrator(translator)

    turn = await orchestrator.run_turn(TranscriptResult("hello", "en-US"), target_language="en")

    assert translator.calls == [("hello", "en", "en")]
    assert turn.translated_audio.language == "en-US"


@pytest.mark.asyncio
async def test_translation_failure_falls_back_to_original_text():
    synthesizer = FakeSynthesizer()
    orchestrator = make_orchestrator(FakeTranslator(fail=True), synthesizer)

    turn = await orchestrator.run_turn(TranscriptResult("hello", "en-US"))

    assert turn.translation.degraded
    assert turn.translation.text == "hello"
    assert synthesizer.calls[0][0] == "hello"
    assert turn.translated_audio is not None


@pytest.mark.asyncio
async def test_synthesis_failure_leaves_audio_out():
    orchestrator = make_orchestrator(synthesizer=FakeSynthesizer(fail=True))

    turn = await orchestrator.run_turn(TranscriptResult("hello", "en-US"))

    assert turn.translation.text == "[vi] hello"
    assert turn.translated_audio is None


@pytest.mark.asyncio
async def test_empty_transcript_raises_without_calling_collaborators():
    translator = FakeTranslator()
    synthesizer = FakeSynthesizer()
    orchestrator = make_orchestrator(translator, synthesizer)

    with pytest.raises(TranscriptionFailure):
        await orchestrator.run_turn(TranscriptResult("   ", "en-US"))

    assert translator.calls == []
    assert synthesizer.calls == []


@pytest.mark.asyncio
async def test_unknown_source_uses_detection():
    translator = FakeTranslator(detected="vi")
    orchestrator = make_orchestrator(translator)

    turn = await orchestrator.run_turn(TranscriptResult("xin chào", None))

    assert translator.detect_calls == ["xin chào"]
    assert translator.calls == [("xin chào", "en", "vi")]
    assert turn.translation.target_language == "en"


@pytest.mark.asyncio
async def test_failed_detection_uses_default_target():
    translator = FakeTranslator(detected=None)
    orchestrator = make_orchestrator(translator)

    turn = await orchestrator.run_turn(TranscriptResult("bonjour", None))

    assert translator.calls == [("bonjour", "vi", None)]
    assert turn.translation.target_language == "vi"


@pytest.mark.asyncio
async def test_unsupported_source_uses_default_target():
    orchestrator = make_orchestrator()

    turn = await orchestrator.run_turn(TranscriptResult("bonjour", "fr-FR"))

    assert turn.translation.target_language == "vi"


@pytest.mark.asyncio
async def test_echo_synthesizes_original_in_source_voice():
    orchestrator = make_orchestrator(echo_original=True)

    turn = await orchestrator.run_turn(TranscriptResult("hello", "en-US"))

    assert turn.echo_audio.kind == "echo"
    assert turn.echo_audio.audio == b"en-US-Wavenet-D:hello"
    assert turn.translated_audio.kind == "translation"


@pytest.mark.asyncio
async def test_filler_words_are_removed_before_translation():
    translator = FakeTranslator()
    orchestrator = make_orchestrator(translator, strip_fillers=True)

    await orchestrator.run_turn(TranscriptResult("Um, hello uh world.", "en-US"))

    assert translator.calls[0][0] == "hello world."


@pytest.mark.asyncio
async def test_only_fillers_keeps_original_text():
    translator = FakeTranslator()
    orchestrator = make_orchestrator(translator, strip_fillers=True)

    await orchestrator.run_turn(TranscriptResult("um", "en-US"))

    assert translator.calls[0][0] == "um"


@pytest.mark.asyncio
async def test_repeated_phrase_hits_tts_cache():
    synthesizer = FakeSynthesizer()
    orchestrator = make_orchestrator(synthesizer=synthesizer, tts_cache=TTSCache(maxsize=10))

    await orchestrator.run_turn(TranscriptResult("hello", "en-US"))
    turn = await orchestrator.run_turn(TranscriptResult("hello", "en-US"))

    assert len(synthesizer.calls) == 1
    assert turn.translated_audio.audio == b"vi-VN-Wavenet-D:[vi] hello"
    assert orchestrator.tts_cache.get_stats()["hits"] == 1
