"""
Connection Management Module

Exports the gateway, the connection manager and the process-wide manager
instance.
"""
from .models import ClientConnection
from .manager import ConnectionManager
from .gateway import ConnectionGateway

# Singleton instance
connection_manager = ConnectionManager()

__all__ = [
    "ClientConnection",
    "ConnectionManager",
    "ConnectionGateway",
    "connection_manager",
]
