"""
Connection Models

Data classes representing relay WebSocket connections.
"""
from datetime import datetime, UTC
from typing import Dict, Any, Optional, TYPE_CHECKING
import logging
import uuid

from fastapi import WebSocket

if TYPE_CHECKING:
    from speech_relay.services.session import RelaySession

logger = logging.getLogger(__name__)


class ClientConnection:
    """Represents a single client WebSocket connection."""

    def __init__(self, websocket: WebSocket, connection_id: Optional[str] = None):
        self.websocket = websocket
        self.connection_id = connection_id or uuid.uuid4().hex[:12]
        self.connected_at = datetime.now(UTC)
        self.session: Optional["RelaySession"] = None
        self.is_open = True

    async def send_json(self, data: Dict[str, Any]) -> bool:
        """Send JSON message to this connection."""
        if not self.is_open:
            logger.debug(f"Not sending '{data.get('event')}' to closed connection {self.connection_id}")
            return False
        try:
            await self.websocket.send_json(data)
            return True
        except Exception as e:
            logger.error(f"Error sending JSON to {self.connection_id}: {e}")
            self.is_open = False
            return False
