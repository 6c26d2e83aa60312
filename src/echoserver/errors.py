"""
=============================================================================
ERROR TAXONOMY
=============================================================================

Every failure in the echo service falls into one of two families:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        EchoServerError                               │
    ├──────────────────────────────────┬──────────────────────────────────┤
    │  SetupError (fatal)              │  SessionIoError (per-session)    │
    │  ──────────────────              │  ────────────────────────────    │
    │  ConfigError  bad settings       │  recv()/send() failed while a    │
    │  BindError    socket/bind/listen │  client was connected.           │
    │  ConnectError client connect     │                                  │
    │                                  │  The session is aborted, the     │
    │  Reported on stderr, process     │  connection closed, and the      │
    │  exits with status 1.            │  server goes back to accept().   │
    └──────────────────────────────────┴──────────────────────────────────┘

Two conditions are deliberately NOT exceptions:

- A failed accept() is logged by the listener and the loop keeps going.
- A zero-byte read means the peer closed the connection. That is the
  normal end of a session, not an error.
=============================================================================
"""


class EchoServerError(Exception):
    """Base class for all echo service errors."""


class SetupError(EchoServerError):
    """A fatal startup failure. Nothing is retried."""


class ConfigError(SetupError, ValueError):
    """Configuration values failed validation."""


class BindError(SetupError):
    """Creating, binding or listening on the server socket failed."""

    def __init__(self, host: str, port: int, reason: Exception):
        self.host = host
        self.port = port
        self.reason = reason
        super().__init__(f"Bind failed on {host}:{port}: {reason}")


class ConnectError(SetupError):
    """The client could not reach the server."""

    def __init__(self, host: str, port: int, reason: Exception):
        self.host = host
        self.port = port
        self.reason = reason
        super().__init__(f"Connect failed to {host}:{port}: {reason}")


class SessionIoError(EchoServerError):
    """A receive or send failed in the middle of a session."""
