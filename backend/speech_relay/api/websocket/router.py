"""
WebSocket Router - Relay Endpoint

This is the thin routing layer that delegates to ConnectionGateway
for all WebSocket session management.
"""
from fastapi import APIRouter, WebSocket

from speech_relay.services.connection import ConnectionGateway, connection_manager

router = APIRouter()


@router.websocket("/ws")
@router.websocket("/")
async def ws_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for the translation relay.

    Message Types (JSON, `event` field):
        - start: {targetLanguage?, mode?} open a recognition stream / start buffering
        - audio: {data} one base64 chunk of the current turn
        - stop: end the current turn
        - audio: {audioData, targetLang?} one-shot batch request

    Binary Messages:
        - Raw audio chunk for the current turn

    Replies:
        - {event: "audio", data: <base64 mp3>, kind, language}
        - {event: "error", message}
    """
    gateway = ConnectionGateway(
        websocket=websocket,
        recognition=websocket.app.state.recognition,
        orchestrator=websocket.app.state.orchestrator,
        manager=connection_manager,
    )
    await gateway.run()
