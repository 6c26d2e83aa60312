"""
=============================================================================
ECHOSERVER - A Blocking TCP Echo Service
=============================================================================

A server that accepts TCP connections one at a time, reads newline
terminated text, and answers each message with "Echo: <message>". The
line "exit" ends the session with "Goodbye.\n". A companion client lets
an operator type lines and see the replies.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    echoserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # Server CLI (python -m echoserver <port>)
    ├── client.py            # Client + client CLI
    ├── cli.py               # Shared argparse helpers
    ├── server.py            # EchoServer: config + listener + session
    ├── config.py            # ServerConfig dataclass
    ├── errors.py            # Exception hierarchy
    ├── core/                # Socket-level components
    │   ├── socket_server.py # Listener: bind + accept loop
    │   ├── connection.py    # Connection wrapper
    │   └── session.py       # Per-connection echo loop
    └── protocol/            # Wire protocol, no I/O
        ├── message.py       # Message, decode()
        ├── router.py        # ECHO / TERMINATE decision
        └── response.py      # Response bytes

=============================================================================
QUICK START
=============================================================================

    from echoserver import EchoServer, ServerConfig

    server = EchoServer(ServerConfig(port=9000))
    server.run()

=============================================================================
"""

__version__ = "1.0.0"

from .server import EchoServer
from .config import ServerConfig
from .client import EchoClient

__all__ = ["EchoServer", "ServerConfig", "EchoClient", "__version__"]
