"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The socket-level machinery of the echo server:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  • Creates, binds and listens on the TCP socket                     │
    │  • Runs the accept() loop                                           │
    │  • Hands each client to the session, one at a time                  │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  • Wraps a client socket: receive(), send(), close()                │
    │  • Closed exactly once, never used after close                      │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                         ECHO SESSION                                 │
    │  • read → decode → route → respond, until EOF/exit/error            │
    └─────────────────────────────────────────────────────────────────────┘
=============================================================================
"""

from .connection import Connection, ConnectionState
from .session import EchoSession, SessionState, SessionOutcome
from .socket_server import SocketServer

__all__ = [
    "Connection",
    "ConnectionState",
    "EchoSession",
    "SessionState",
    "SessionOutcome",
    "SocketServer",
]
