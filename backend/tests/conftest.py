import base64
import sys
import threading
import time
import pytest
from pathlib import Path

# Add project root (2 levels up from tests/) to sys.path so tests can import 'speech_relay'
root = Path(__file__).resolve().parents[1]
if str(root) not in sys.path:
    sys.path.insert(0, str(root))


from speech_relay.services.providers import RelayServices
from speech_relay.services.recognition import RecognitionPipeline
from speech_relay.services.results import TranscriptResult, VoiceProfile
from speech_relay.services.session import RelaySession
from speech_relay.services.translation import TranslationOrchestrator, TTSCache


# =============================================================================
# Collaborator fakes
# =============================================================================

class FakeTranscriber:
    """
    Batch: returns `batch_text` (or the decoded audio when None).
    Streaming: emits one interim result and one final result per stream whose
    text is the received chunks joined with spaces, or one final per chunk
    when `final_per_chunk` is set. With `end_after_first_chunk` the stream
    finishes right after the first final, before end of input.
    """

    def __init__(
        self,
        batch_text=None,
        language="en-US",
        fail_batch=False,
        fail_stream=False,
        empty_stream=False,
        final_per_chunk=False,
        end_after_first_chunk=False,
    ):
        self.batch_text = batch_text
        self.language = language
        self.fail_batch = fail_batch
        self.fail_stream = fail_stream
        self.empty_stream = empty_stream
        self.final_per_chunk = final_per_chunk
        self.end_after_first_chunk = end_after_first_chunk
        self.batch_calls = []
        self.stream_calls = []

    def transcribe(self, audio_data, language_code, alternative_language_codes=()):
        self.batch_calls.append((audio_data, language_code, tuple(alternative_language_codes)))
        if self.fail_batch:
            raise RuntimeError("recognizer unavailable")
        text = self.batch_text if self.batch_text is not None else audio_data.decode()
        return TranscriptResult(text=text, language=self.language or language_code)

    def streaming_transcribe(self, audio_chunks, language_code, alternative_language_codes=()):
        self.stream_calls.append((language_code, tuple(alternative_language_codes)))
        language = self.language or language_code
        received = []
        for chunk in audio_chunks:
            received.append(chunk.decode())
            if self.final_per_chunk or self.end_after_first_chunk:
                yield TranscriptResult(text=chunk.decode(), language=language, is_final=True)
            if self.end_after_first_chunk:
                # The service closes the utterance on its own
                return

        if self.fail_stream:
            raise RuntimeError("stream broken")
        if self.final_per_chunk or self.empty_stream or not received:
            return

        text = " ".join(received)
        yield TranscriptResult(text=text[:1], language=language, is_final=False)
        yield TranscriptResult(text=text, language=language, is_final=True)


class FakeTranslator:
    """Prefixes the text with the target language: "[vi] hello"."""

    def __init__(self, fail=False, detected="en", delays=None, gate=None):
        self.fail = fail
        self.detected = detected
        self.delays = delays or {}
        self.gate = gate
        self.calls = []
        self.detect_calls = []

    def translate(self, text, target_language, source_language=None):
        self.calls.append((text, target_language, source_language))
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if text in self.delays:
            time.sleep(self.delays[text])
        if self.fail:
            raise RuntimeError("translator unavailable")
        return f"[{target_language}] {text}"

    def detect_language(self, text):
        self.detect_calls.append(text)
        if self.detected is None:
            raise RuntimeError("detection unavailable")
        return self.detected


class FakeSynthesizer:
    """Returns b"<voice name>:<text>" so tests can see what was spoken."""

    def __init__(self, fail=False, fail_texts=()):
        self.fail = fail
        self.fail_texts = set(fail_texts)
        self.calls = []

    def synthesize(self, text, voice: VoiceProfile):
        self.calls.append((text, voice))
        if self.fail or text in self.fail_texts:
            raise RuntimeError("tts unavailable")
        return f"{voice.name}:{text}".encode()


class EventRecorder:
    """Stands in for ClientConnection.send_json."""

    def __init__(self):
        self.events = []

    async def __call__(self, payload):
        self.events.append(payload)
        return True

    @property
    def audio_events(self):
        return [e for e in self.events if e["event"] == "audio"]

    @property
    def error_events(self):
        return [e for e in self.events if e["event"] == "error"]

    def decoded_audio(self):
        return [base64.b64decode(e["data"]) for e in self.audio_events]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def transcriber():
    return FakeTranscriber()


@pytest.fixture
def translator():
    return FakeTranslator()


@pytest.fixture
def synthesizer():
    return FakeSynthesizer()


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def fake_services(transcriber, translator, synthesizer):
    return RelayServices(
        transcriber=transcriber,
        translator=translator,
        synthesizer=synthesizer,
    )


@pytest.fixture
def make_session(transcriber, translator, synthesizer, recorder):
    """Factory for sessions wired to the fakes; echo is off unless requested."""
    def _make(echo_original=False, strip_fillers=False, default_mode="stream"):
        orchestrator = TranslationOrchestrator(
            translator,
            synthesizer,
            tts_cache=TTSCache(maxsize=0),
            echo_original=echo_original,
            strip_fillers=strip_fillers,
        )
        return RelaySession(
            session_id="test",
            send=recorder,
            recognition=RecognitionPipeline(transcriber),
            orchestrator=orchestrator,
            default_mode=default_mode,
            echo_delay_sec=0,
        )
    return _make


@pytest.fixture
def gate():
    """A threading.Event used to hold a fake collaborator inside its call."""
    event = threading.Event()
    yield event
    event.set()
