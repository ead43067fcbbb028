"""
Session management module.

Provides the RelaySession state machine for one client connection.
"""
from .session import RelaySession, SessionState, PendingTurn

__all__ = ["RelaySession", "SessionState", "PendingTurn"]
