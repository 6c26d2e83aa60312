"""
=============================================================================
LOW-LEVEL TCP SOCKET SERVER
=============================================================================

This module implements the listener: it owns the listening socket and
runs the accept loop. Each accepted client is handed to the session
handler, and the listener waits for that session to finish before it
accepts the next one.

SOCKET LIFECYCLE (Server Side):
────────────────────────────────

    1. socket()    Create an IPv4 TCP socket
    2. setsockopt  SO_REUSEADDR, so a restarted server can rebind at once
    3. bind()      Reserve 0.0.0.0:PORT
    4. listen(10)  Kernel queues up to 10 waiting clients
    5. accept()    BLOCKS until a client arrives, returns a NEW socket
    6. close()     Release the listening socket at shutdown

                    ┌───────────────────────┐
                    │   Listening Socket    │ ◄── Created once at startup
                    └───────────┬───────────┘
                                │ accept()
                                ▼
                         ┌─────────────┐
                         │ Connection  │ ── session runs to completion
                         └─────────────┘
                                │
                                ▼
                         back to accept()   (one client at a time)

Clients that connect while a session is running wait in the kernel's
backlog queue until the current session ends.

=============================================================================
FAILURES
=============================================================================

    bind()/listen() fails    → BindError. Fatal, not retried.
    accept() fails           → logged, loop continues.
    session raises           → logged with traceback, loop continues.

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from ..errors import BindError
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Low-level TCP listener.

    Usage:
        def handle_connection(conn: Connection):
            ...

        server = SocketServer(config)
        server.bind()                     # Raises BindError on failure
        server.start(handle_connection)   # Blocks until shutdown
    """

    def __init__(self, config: ServerConfig):
        """
        Initialize the socket server.

        Args:
            config: Server configuration containing host, port, backlog, etc.

        Note: This does NOT create the socket. That happens in bind().
        """
        self.config = config

        self._socket: Optional[socket.socket] = None
        self._running = False
        self._shutdown_event = threading.Event()
        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        """Check if the accept loop is running."""
        return self._running

    @property
    def is_bound(self) -> bool:
        return self._socket is not None

    @property
    def address(self) -> Tuple[str, int]:
        """The bound address (IP, port), or the configured one before bind()."""
        if self._socket is not None:
            host, port = self._socket.getsockname()[:2]
            return (host, port)
        return (self.config.host, self.config.port)

    # =========================================================================
    # BIND
    # =========================================================================

    def bind(self) -> socket.socket:
        """
        Create, bind and listen on the server socket.

        Returns:
            The listening socket.

        Raises:
            BindError: If any step fails (address in use, permission
                       denied, bad address). The half-built socket is
                       closed before raising.
        """
        if self._socket is not None:
            return self._socket

        host, port = self.config.host, self.config.port

        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as e:
            logger.error(f"Socket creation failed: {e}")
            raise BindError(host, port, e) from e

        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((host, port))
            sock.listen(self.config.backlog)
        except (OSError, OverflowError) as e:
            sock.close()
            logger.error(f"Failed to bind to {host}:{port}: {e}")
            raise BindError(host, port, e) from e

        # Accept wakes up periodically so shutdown() is noticed. Accepted
        # sockets are switched back to blocking by Connection.
        sock.settimeout(self.config.accept_timeout)

        self._socket = sock
        logger.info(f"Server listening on port {self.address[1]}")
        return sock

    # =========================================================================
    # SIGNALS
    # =========================================================================

    def _setup_signals(self):
        """
        Turn SIGTERM/SIGINT into a graceful stop of the accept loop.

        Signals can only be installed from the main thread. When the
        server runs in a background thread (tests, embedding) the caller
        stops it with shutdown() instead.
        """
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        """Restore original signal handlers."""
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    # =========================================================================
    # ACCEPT LOOP
    # =========================================================================

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Accept connections until shutdown() is called.

        Binds first if bind() has not been called yet. The listening
        socket is closed when this returns, on every path.

        Args:
            connection_handler: Called with each new connection. Runs
                                synchronously; the next accept() waits
                                for it to return.
        """
        self.bind()

        self._running = True
        self._shutdown_event.clear()
        self._setup_signals()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """
        Main loop for accepting connections.

        ┌─────────────────────────────────────────────────────────────────┐
        │   while self._running:                                           │
        │       accept()              ← timeout: re-check _running         │
        │       Connection(...)       ← wrap client socket                 │
        │       with conn:                                                 │
        │           connection_handler(conn)   ← blocks for whole session │
        └─────────────────────────────────────────────────────────────────┘
        """
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if not self._running:
                    break
                logger.error(f"Accept failed: {e}")
                continue

            client_ip, client_port = client_address[0], client_address[1]
            logger.debug(f"Accepted connection from {client_ip}:{client_port}")

            conn = Connection(
                socket=client_socket,
                address=(client_ip, client_port),
                buffer_size=self.config.buffer_size,
            )

            # The handler owns the connection, the with-block guarantees it
            # is closed even if the handler blows up.
            with conn:
                try:
                    connection_handler(conn)
                except Exception as e:
                    logger.exception(f"[{conn.id}] Session crashed: {e}")

    def shutdown(self):
        """
        Stop the accept loop. Safe to call from a signal handler or
        another thread, and safe to call more than once.

        A session that is already running is not interrupted; the loop
        exits after it returns.
        """
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False

    def close(self):
        """Close the listening socket (if any)."""
        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

    def _cleanup(self):
        """Clean up resources on shutdown."""
        self._running = False
        self._restore_signals()
        self.close()
        self._shutdown_event.set()
        logger.info("Socket server stopped")

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the accept loop to exit and the socket to be closed.

        Returns:
            True if shutdown completed, False if timeout.
        """
        return self._shutdown_event.wait(timeout)
