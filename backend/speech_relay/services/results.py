"""
Result containers passed between the relay's pipeline stages.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TranscriptResult:
    """A recognition result from the Transcriber."""
    text: str
    language: Optional[str] = None
    is_final: bool = True
    confidence: Optional[float] = None


@dataclass(frozen=True)
class TranslationResult:
    """Translated text for one turn."""
    text: str
    target_language: str
    source_language: Optional[str] = None
    # True when the translator failed and the original text was kept
    degraded: bool = False


@dataclass(frozen=True)
class VoiceProfile:
    """Text-to-Speech voice selection (locale + voice name)."""
    language_code: str
    name: str


@dataclass(frozen=True)
class SynthesizedAudio:
    """Synthesized speech ready to be sent to the client."""
    audio: bytes
    encoding: str
    language: str
    kind: str = "translation"  # "translation" or "echo"


@dataclass
class TurnResult:
    """Container for the output of one translation turn."""
    transcript: TranscriptResult
    translation: TranslationResult
    translated_audio: Optional[SynthesizedAudio] = None
    echo_audio: Optional[SynthesizedAudio] = None
