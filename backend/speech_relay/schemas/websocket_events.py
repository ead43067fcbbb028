"""
WebSocket Event Schemas

Pydantic models for type-safe WebSocket event handling.
"""

import base64
import binascii
import json
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from speech_relay.services.exceptions import ProtocolError


def decode_audio(data: Union[str, bytes]) -> bytes:
    """Decode base64 audio from a JSON event."""
    if isinstance(data, bytes):
        return data
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError("audio data is not valid base64") from e


# =============================================================================
# Inbound (client -> relay)
# =============================================================================

class ClientEvent(BaseModel):
    """Base model for all inbound events."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    event: str


class StartEvent(ClientEvent):
    """Begin a turn: open a recognition stream or start buffering."""
    event: Literal["start"] = "start"
    target_language: Optional[str] = Field(None, alias="targetLanguage")
    mode: Optional[Literal["stream", "batch"]] = None


class AudioChunkEvent(ClientEvent):
    """One audio chunk for the current turn."""
    event: Literal["audio"] = "audio"
    data: bytes

    @field_validator("data", mode="before")
    @classmethod
    def _decode(cls, value):
        return decode_audio(value)


class StopEvent(ClientEvent):
    """End the current turn."""
    event: Literal["stop"] = "stop"


class BatchAudioEvent(ClientEvent):
    """One-shot request: complete audio plus target language."""
    event: Literal["audio"] = "audio"
    audio_data: bytes = Field(alias="audioData")
    target_language: Optional[str] = Field(None, alias="targetLang")

    @field_validator("audio_data", mode="before")
    @classmethod
    def _decode(cls, value):
        return decode_audio(value)


InboundEvent = Union[StartEvent, AudioChunkEvent, StopEvent, BatchAudioEvent]


def parse_client_event(raw: str) -> InboundEvent:
    """
    Parse one text frame into an inbound event.

    Raises:
        ProtocolError: malformed JSON, unknown event or invalid fields
    """
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        raise ProtocolError("Invalid message format.") from e

    if not isinstance(payload, dict):
        raise ProtocolError("Invalid message format.")

    event = payload.get("event")
    if event == "start":
        model = StartEvent
    elif event == "stop":
        model = StopEvent
    elif event == "audio":
        model = BatchAudioEvent if "audioData" in payload else AudioChunkEvent
    else:
        raise ProtocolError(f"Unsupported event: {event}")

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ProtocolError(f"Invalid '{event}' event.") from e


# =============================================================================
# Outbound (relay -> client)
# =============================================================================

class AudioOutEvent(BaseModel):
    """Synthesized audio (base64 MP3)."""
    event: Literal["audio"] = "audio"
    data: str
    kind: Literal["translation", "echo"] = "translation"
    language: Optional[str] = None

    @classmethod
    def from_audio(cls, audio: bytes, kind: str = "translation", language: Optional[str] = None) -> "AudioOutEvent":
        return cls(data=base64.b64encode(audio).decode("ascii"), kind=kind, language=language)


class ErrorEvent(BaseModel):
    """Any failure reported to the client."""
    event: Literal["error"] = "error"
    message: str
