"""
Schemas Package

Pydantic models for WebSocket events.
"""

from speech_relay.schemas.websocket_events import (
    ClientEvent,
    StartEvent,
    AudioChunkEvent,
    StopEvent,
    BatchAudioEvent,
    AudioOutEvent,
    ErrorEvent,
    parse_client_event,
)

__all__ = [
    "ClientEvent",
    "StartEvent",
    "AudioChunkEvent",
    "StopEvent",
    "BatchAudioEvent",
    "AudioOutEvent",
    "ErrorEvent",
    "parse_client_event",
]
