"""
Relay Exceptions

Failure taxonomy for the translation relay. Every exception carries a
client-facing message that the session reports as an `error` event.
"""


class RelayError(Exception):
    """Base exception for relay errors"""

    default_message = "Server error."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class TranscriptionFailure(RelayError):
    """Raised when the transcriber fails or returns an empty transcript"""

    default_message = "Audio could not be transcribed."


class TranslationFailure(RelayError):
    """Raised when the translator fails (the turn falls back to the original text)"""

    default_message = "Translation failed."


class SynthesisFailure(RelayError):
    """Raised when speech synthesis fails"""

    default_message = "Speech synthesis failed."


class ProtocolError(RelayError):
    """Raised when an inbound message is malformed or unsupported"""

    default_message = "Invalid message format."


class StreamStateError(RelayError):
    """Raised when audio is written to a closed or absent recognition stream"""

    default_message = "No open recognition stream."
