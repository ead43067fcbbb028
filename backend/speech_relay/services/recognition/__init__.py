"""
Recognition Module

- RecognitionPipeline: batch recognition and stream factory
- QueuedRecognitionStream: one open streaming recognition
"""

from speech_relay.services.recognition.pipeline import RecognitionPipeline
from speech_relay.services.recognition.stream import QueuedRecognitionStream

__all__ = [
    "RecognitionPipeline",
    "QueuedRecognitionStream",
]
