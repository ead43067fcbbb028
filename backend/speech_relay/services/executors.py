"""
Thread pool for blocking collaborator calls.

Batch recognition, translation, language detection and synthesis share one
bounded pool that is separate from the event loop's default executor.
Streaming recognitions do not use it: each open stream owns a thread for
its whole life (see recognition/stream.py).
"""
from concurrent.futures import ThreadPoolExecutor

from speech_relay.config.constants import COLLABORATOR_MAX_WORKERS

# Thread pool for blocking Transcriber/Translator/Synthesizer calls
_collaborator_executor = ThreadPoolExecutor(
    max_workers=COLLABORATOR_MAX_WORKERS,
    thread_name_prefix="relay_collaborator",
)


def get_collaborator_executor() -> ThreadPoolExecutor:
    return _collaborator_executor
