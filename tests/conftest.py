"""
pytest configuration and fixtures.
"""

import socket
import threading
import time
from typing import Generator, Callable, List

import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from echoserver import EchoServer, ServerConfig


class FakeSocket:
    """
    Scripted stand-in for a connected client socket.

    recv() returns (or raises) the scripted items in order, then b"".
    Every call is recorded in `events` so tests can check ordering.
    """

    def __init__(self, chunks=None, send_error: Exception = None):
        self.chunks = list(chunks or [])
        self.send_error = send_error
        self.sent: List[bytes] = []
        self.events: List[str] = []
        self.closed = False

    def setblocking(self, flag):
        self.events.append(f"setblocking:{flag}")

    def settimeout(self, value):
        self.events.append(f"settimeout:{value}")

    def recv(self, size):
        self.events.append("recv")
        if not self.chunks:
            return b""
        item = self.chunks.pop(0)
        if isinstance(item, Exception):
            raise item
        return item[:size]

    def sendall(self, data):
        self.events.append("sendall")
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(data)

    def shutdown(self, how):
        self.events.append("shutdown")

    def close(self):
        self.events.append("close")
        self.closed = True

    def session_recv_calls(self) -> int:
        """recv() calls made before the close sequence started."""
        if "shutdown" in self.events:
            return self.events[: self.events.index("shutdown")].count("recv")
        return self.events.count("recv")


@pytest.fixture
def fake_socket_factory() -> Callable[..., FakeSocket]:
    return FakeSocket


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def config(free_port: int) -> ServerConfig:
    """Test server configuration on a free local port."""
    return ServerConfig(
        host="127.0.0.1",
        port=free_port,
        accept_timeout=0.1,
        log_level="DEBUG",
    )


class TestServer:
    """Test server helper that runs in a background thread."""

    def __init__(self, server: EchoServer, port: int):
        self.server = server
        self.port = port
        self._thread: threading.Thread = None

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        # Wait for the listening socket to be up
        for _ in range(50):  # 5 seconds max
            if self.server.is_running:
                return
            time.sleep(0.1)

        raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """Run an echo server for the duration of a test."""
    test_srv = TestServer(EchoServer(config), config.port)
    test_srv.start()

    yield test_srv

    test_srv.stop()


@pytest.fixture
def connect(test_server: TestServer) -> Generator[Callable[[], socket.socket], None, None]:
    """Factory for client sockets connected to the test server."""
    sockets = []

    def _connect() -> socket.socket:
        sock = socket.create_connection(("127.0.0.1", test_server.port), timeout=5.0)
        sockets.append(sock)
        return sock

    yield _connect

    for sock in sockets:
        sock.close()

