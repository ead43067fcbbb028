"""
Collaborator wiring.

The relay's Transcriber, Translator and Synthesizer are process-wide,
read-only handles. They are built once at startup, stored on
`app.state.services` and injected into every session, so tests can
substitute fakes without touching module globals.
"""

import functools
import logging
from dataclasses import dataclass

from speech_relay.services.protocols import Transcriber, Translator, Synthesizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelayServices:
    """The three collaborators shared by all sessions."""
    transcriber: Transcriber
    translator: Translator
    synthesizer: Synthesizer


@functools.lru_cache(maxsize=1)
def build_gcp_services() -> RelayServices:
    """Create the Google Cloud backed collaborators."""
    from speech_relay.services.gcp import (
        GCPSpeechService,
        GCPTranslationService,
        GCPTextToSpeechService,
    )

    services = RelayServices(
        transcriber=GCPSpeechService(),
        translator=GCPTranslationService(),
        synthesizer=GCPTextToSpeechService(),
    )
    logger.info("✅ Google Cloud speech, translation and TTS clients ready")
    return services
