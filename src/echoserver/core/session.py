"""
=============================================================================
ECHO SESSION
=============================================================================

The session handler owns one accepted connection from the moment it is
handed over until it is closed, and runs the echo protocol on it.

=============================================================================
SESSION STATE MACHINE
=============================================================================

    ┌──────────────────┐   recv() → bytes   ┌──────────┐
    │ AWAITING_MESSAGE │ ─────────────────► │ DECODING │
    └──────────────────┘                    └────┬─────┘
             ▲                                   │ route()
             │  ECHO sent                        ▼
             └──────────────────────────── ┌────────────┐
                                           │ RESPONDING │
                                           └─────┬──────┘
                                                 │
    Any state ─────────────────────────────► CLOSED
      recv() → b""          (PEER_CLOSED, no response)
      recv() fails          (IO_ERROR, no response)
      ECHO send fails       (IO_ERROR)
      TERMINATE             (TERMINATED, "Goodbye.\n" then close,
                             even if the goodbye could not be sent)

The loop never retries a failed read or write. Whatever ends the session,
the connection is closed by the `with conn:` block before run() returns.
=============================================================================
"""

import logging
from enum import Enum

from ..errors import SessionIoError
from ..protocol import Decision, decode, route, build_response
from .connection import Connection


logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Where the session currently is in its read/respond loop."""

    AWAITING_MESSAGE = "awaiting_message"
    DECODING = "decoding"
    RESPONDING = "responding"
    CLOSED = "closed"


class SessionOutcome(Enum):
    """Why a session ended."""

    PEER_CLOSED = "peer_closed"    # Zero-byte read
    TERMINATED = "terminated"      # Client sent the sentinel
    IO_ERROR = "io_error"          # recv()/send() failed


class EchoSession:
    """
    Runs the echo protocol on one connection.

    Create one per accepted connection. The only mutable data is the
    session state, so sessions never share anything with each other.

    Usage:
        session = EchoSession()
        outcome = session.run(conn)   # Blocks until the client is done
    """

    def __init__(self):
        self.state = SessionState.CLOSED

    def run(self, conn: Connection) -> SessionOutcome:
        """
        Serve one client until it disconnects, says goodbye, or fails.

        Args:
            conn: The accepted connection. It is closed when this returns.

        Returns:
            How the session ended.
        """
        with conn:
            logger.info(f"Client connected: {conn.peer}")
            try:
                return self._loop(conn)
            finally:
                self.state = SessionState.CLOSED

    def _loop(self, conn: Connection) -> SessionOutcome:
        while True:
            # ─────────────────────────────────────────────────────────────
            # AWAITING_MESSAGE: one blocking read
            # ─────────────────────────────────────────────────────────────
            self.state = SessionState.AWAITING_MESSAGE
            try:
                data = conn.receive()
            except SessionIoError as e:
                logger.error(f"[{conn.id}] {e}")
                return SessionOutcome.IO_ERROR

            if not data:
                logger.info(f"Client disconnected: {conn.peer}")
                return SessionOutcome.PEER_CLOSED

            # ─────────────────────────────────────────────────────────────
            # DECODING
            # ─────────────────────────────────────────────────────────────
            self.state = SessionState.DECODING
            message = decode(data)
            logger.info(f"Client says: {message.text.rstrip()}")

            decision = route(message)

            # ─────────────────────────────────────────────────────────────
            # RESPONDING
            # ─────────────────────────────────────────────────────────────
            self.state = SessionState.RESPONDING
            sent = conn.send(build_response(message, decision))

            if decision is Decision.TERMINATE:
                logger.info(f"Client {conn.peer} requested exit")
                return SessionOutcome.TERMINATED

            if not sent:
                return SessionOutcome.IO_ERROR
