"""
=============================================================================
ECHO SERVER
=============================================================================

The top-level server object. It wires together:

    ServerConfig ──► EchoServer ──┬──► SocketServer   (listen + accept)
                                  └──► EchoSession    (per-client protocol)

    Request flow:

    1. Accept TCP connection on listening socket
    2. Read one chunk of bytes from the client
    3. Route: sentinel or ordinary message
    4. Send "Echo: ..." or "Goodbye.\n"
    5. Repeat until the client leaves, then accept the next one
=============================================================================
"""

import logging
from typing import Optional

from .config import ServerConfig
from .core import SocketServer, Connection, EchoSession


logger = logging.getLogger(__name__)


class EchoServer:
    """
    Blocking, single-client-at-a-time TCP echo server.

    Usage:
        server = EchoServer(ServerConfig(port=9000))
        server.run()        # Blocks until SIGINT/SIGTERM or shutdown()
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Initialize the echo server.

        Args:
            config: Server configuration. Uses defaults if not provided.

        Raises:
            ConfigError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self):
        return self._socket_server.address

    def run(self):
        """
        Start the server (blocking).

        Raises:
            BindError: If the listening socket cannot be set up.
        """
        self._setup_logging()

        # Bind before anything else so a setup failure surfaces right away
        self._socket_server.bind()
        self._running = True

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._running = False
            self._socket_server.close()
            logger.info("Server stopped")

    def shutdown(self):
        """Ask the accept loop to stop after the current session."""
        self._socket_server.shutdown()

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_for_shutdown(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("echoserver").setLevel(level)

    def _handle_connection(self, conn: Connection):
        """Serve one client to completion (called by SocketServer)."""
        # Fresh session per client: nothing mutable is shared between sessions
        outcome = EchoSession().run(conn)
        logger.debug(f"[{conn.id}] Session ended: {outcome.value}")
