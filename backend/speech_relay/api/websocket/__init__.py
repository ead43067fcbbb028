"""
WebSocket API module.

Provides the WebSocket router for the translation relay.
"""
from .router import router

__all__ = ["router"]
