"""
Connection Gateway

Accepts one client WebSocket, feeds its messages to a RelaySession in
arrival order and tears the session down when the socket goes away.
"""
import logging

from fastapi import WebSocket, WebSocketDisconnect

from speech_relay.schemas.websocket_events import (
    AudioChunkEvent,
    BatchAudioEvent,
    InboundEvent,
    StartEvent,
    StopEvent,
    parse_client_event,
)
from speech_relay.services.exceptions import ProtocolError, RelayError
from speech_relay.services.recognition import RecognitionPipeline
from speech_relay.services.session import RelaySession
from speech_relay.services.translation import TranslationOrchestrator
from .manager import ConnectionManager

logger = logging.getLogger(__name__)


class ConnectionGateway:
    """
    Runs the lifecycle of one relay connection.

    Handles:
    - Connection registration
    - Message loop processing (JSON events and binary audio)
    - Protocol errors reported back without closing the socket
    - Session cleanup on disconnect
    """

    def __init__(
        self,
        websocket: WebSocket,
        recognition: RecognitionPipeline,
        orchestrator: TranslationOrchestrator,
        manager: ConnectionManager,
    ):
        self.websocket = websocket
        self.recognition = recognition
        self.orchestrator = orchestrator
        self.manager = manager

    async def run(self):
        """Main entry point for handling a WebSocket connection."""
        await self.websocket.accept()
        conn = await self.manager.connect(self.websocket)
        session = RelaySession(
            session_id=conn.connection_id,
            send=conn.send_json,
            recognition=self.recognition,
            orchestrator=self.orchestrator,
        )
        conn.session = session

        try:
            await self._message_loop(session)
        finally:
            session.close()
            await self.manager.disconnect(conn.connection_id)

    async def _message_loop(self, session: RelaySession):
        try:
            while True:
                message = await self.websocket.receive()

                if message["type"] == "websocket.disconnect":
                    break
                if message.get("text") is not None:
                    await self._handle_text_message(session, message["text"])
                elif message.get("bytes") is not None:
                    await session.audio(message["bytes"])
                else:
                    logger.warning(f"[Gateway] Unexpected message structure from {session.session_id}")

        except WebSocketDisconnect:
            pass

        except Exception as e:
            logger.exception(f"[Gateway] Error during message loop for {session.session_id}: {e}")

        logger.info(f"[Gateway] Client {session.session_id} left")

    async def _handle_text_message(self, session: RelaySession, text_data: str):
        """Handle JSON control and audio events."""
        try:
            event = parse_client_event(text_data)
        except ProtocolError as e:
            logger.warning(f"[Gateway] {e.message} ({session.session_id})")
            await session.report_error(e)
            return

        try:
            await self.dispatch(session, event)
        except RelayError as e:
            await session.report_error(e)

    @staticmethod
    async def dispatch(session: RelaySession, event: InboundEvent):
        if isinstance(event, StartEvent):
            await session.start(event.target_language, event.mode)
        elif isinstance(event, BatchAudioEvent):
            await session.submit_batch(event.audio_data, event.target_language)
        elif isinstance(event, AudioChunkEvent):
            await session.audio(event.data)
        elif isinstance(event, StopEvent):
            await session.stop()
        else:
            raise ProtocolError(f"Unsupported event: {event.event}")
