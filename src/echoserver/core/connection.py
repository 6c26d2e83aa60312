"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

This module wraps one accepted client socket (the "connection handle")
with the small API the echo session needs: read once, send everything,
close exactly once.

=============================================================================
OWNERSHIP
=============================================================================

    SocketServer.accept()
          │
          │  creates
          ▼
    ┌────────────────┐   handed to    ┌────────────────┐
    │   Connection   │ ─────────────► │  EchoSession   │
    └────────────────┘                └───────┬────────┘
                                              │
                          with conn: ... ◄────┘  closes on EVERY exit path
                                                 (EOF, sentinel, I/O error,
                                                  unexpected exception)

A Connection is owned by exactly one session. Once closed it is dead:
receive() and send() on a closed connection raise SessionIoError instead
of touching a file descriptor the OS may already have reused.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    NEW ──► READING ──► OPEN ──► WRITING ──► OPEN ──► ...
     │         │                    │
     └─────────┴────────────────────┴──────► CLOSING ──► CLOSED

=============================================================================
NO READ TIMEOUTS
=============================================================================

The socket is put in plain blocking mode. A peer that connects and then
says nothing holds the session until it disconnects. One client at a
time, no timeouts: that is the whole concurrency model of this server.
=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
import uuid

from ..errors import SessionIoError


logger = logging.getLogger(__name__)

# Upper bound on time spent discarding peer data during close()
DRAIN_TIMEOUT = 0.5


class ConnectionState(Enum):
    """Connection lifecycle states (used for logging and close guards)."""

    NEW = "new"            # Just accepted
    READING = "reading"    # Blocked in recv()
    OPEN = "open"          # Idle between reads and writes
    WRITING = "writing"    # In sendall()
    CLOSING = "closing"    # Shutdown sequence running
    CLOSED = "closed"      # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The connected client socket.
        address: Client's (ip, port) tuple.
        buffer_size: Maximum bytes taken by one receive().
        id: Short identifier used to correlate log lines.
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
        messages_received: Number of non-empty reads so far.
    """

    socket: socket.socket
    address: tuple[str, int]
    buffer_size: int = 1024

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    messages_received: int = 0

    def __post_init__(self):
        # Fully blocking, regardless of what the listening socket used
        self.socket.setblocking(True)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0]

    @property
    def client_port(self) -> int:
        """Get the client port."""
        return self.address[1]

    @property
    def peer(self) -> str:
        """The peer as "ip:port"."""
        return f"{self.client_ip}:{self.client_port}"

    @property
    def is_closed(self) -> bool:
        return self.state in (ConnectionState.CLOSING, ConnectionState.CLOSED)

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def receive(self) -> bytes:
        """
        Perform ONE blocking read of up to buffer_size bytes.

        Returns:
            The bytes read, or b"" if the peer closed the connection.

        Raises:
            SessionIoError: If the read failed or the connection is closed.
        """
        self._ensure_open("receive")
        self.state = ConnectionState.READING

        try:
            data = self.socket.recv(self.buffer_size)
        except OSError as e:
            raise SessionIoError(f"Receive failed: {e}") from e
        finally:
            if not self.is_closed:
                self.state = ConnectionState.OPEN

        if data:
            self.messages_received += 1
        return data

    # =========================================================================
    # WRITING
    # =========================================================================

    def send(self, data: bytes) -> bool:
        """
        Send all of data to the client.

        sendall() keeps writing until every byte is out, so a response is
        never cut short by a full kernel buffer.

        Returns:
            True if send succeeded, False if the connection was lost.

        Raises:
            SessionIoError: If the connection is already closed.
        """
        self._ensure_open("send")
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            # BrokenPipeError / ConnectionResetError land here too. Python
            # ignores SIGPIPE, so a vanished peer is just a failed write.
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False
        finally:
            self.state = ConnectionState.OPEN

    def _ensure_open(self, operation: str):
        if self.is_closed:
            raise SessionIoError(f"Cannot {operation} on closed connection {self.id}")

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection. Safe to call more than once.

        1. shutdown(SHUT_WR): send FIN so the peer's next read sees EOF
        2. Drain anything the peer still had in flight (DRAIN_TIMEOUT total)
        3. close(): release the file descriptor
        """
        if self.is_closed:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        # One deadline for the whole drain, not one per recv()
        deadline = time.monotonic() + DRAIN_TIMEOUT
        try:
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self.socket.settimeout(remaining)
                if not self.socket.recv(1024):
                    break
        except OSError:
            pass  # Includes socket.timeout

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(
            f"[{self.id}] Connection closed after {self.messages_received} messages "
            f"({self.age:.2f}s)"
        )

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
