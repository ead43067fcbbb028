"""Relay Services.

This package contains the service modules that implement the
translation relay.

Service Categories:
- Session: per-connection state machine
- Recognition: batch/streaming recognition adapter
- Translation: translation + TTS orchestration, language tables, TTS cache
- Connection: WebSocket gateway and connection bookkeeping

External integrations:
- gcp: Google Cloud Speech, Translation, TTS
- providers: wiring of the collaborators shared by all sessions
"""
