"""
Connection Manager

Tracks every live relay connection:
- Connection/disconnection bookkeeping
- Session lookup for shutdown and health reporting
"""
import asyncio
from typing import Dict, Optional
import logging

from fastapi import WebSocket

from speech_relay.services.metrics import active_sessions_gauge
from .models import ClientConnection

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Manages all relay WebSocket connections."""

    def __init__(self):
        # connection_id -> ClientConnection
        self._connections: Dict[str, ClientConnection] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> ClientConnection:
        """Register a new (already accepted) WebSocket connection."""
        conn = ClientConnection(websocket)
        async with self._lock:
            self._connections[conn.connection_id] = conn
            active_sessions_gauge.set(len(self._connections))

        logger.info(f"Client {conn.connection_id} connected")
        return conn

    async def disconnect(self, connection_id: str) -> Optional[ClientConnection]:
        """Forget a connection. The caller has already closed its session."""
        async with self._lock:
            conn = self._connections.pop(connection_id, None)
            active_sessions_gauge.set(len(self._connections))

        if conn:
            conn.is_open = False
            logger.info(f"Client {connection_id} disconnected")
        return conn

    def close_all_sessions(self):
        """Close every live session (for shutdown)."""
        for conn in list(self._connections.values()):
            if conn.session is not None:
                conn.session.close()

    def get_connection(self, connection_id: str) -> Optional[ClientConnection]:
        return self._connections.get(connection_id)

    def get_active_session_count(self) -> int:
        """Get number of active sessions."""
        return len(self._connections)
