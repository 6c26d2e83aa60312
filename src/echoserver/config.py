"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the echo server.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m echoserver 9000 --log-level DEBUG               │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── ECHO_BUFFER_SIZE=2048 python -m echoserver 9000           │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Validation happens once, at startup. A bad value is a setup failure and
the process exits before any socket is created.
=============================================================================
"""

import os
from dataclasses import dataclass

from .errors import ConfigError


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Configuration for the echo server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog

    PROTOCOL SETTINGS
    - buffer_size (one read = one message candidate)

    LIFECYCLE
    - accept_timeout (how often the accept loop checks for shutdown)

    LOGGING
    - log_level
    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """
    The IPv4 address to bind to. The wildcard "0.0.0.0" accepts
    connections on every interface.
    """

    port: int = 9000
    """The TCP port to listen on (1-65535)."""

    backlog: int = 10
    """
    Depth of the kernel's accept queue. While one client is being served,
    up to this many others wait here.
    """

    # ─────────────────────────────────────────────────────────────────────
    # PROTOCOL SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    buffer_size: int = 1024
    """
    Maximum bytes taken by a single recv(). Each read is handled as one
    message; nothing is buffered across reads.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LIFECYCLE
    # ─────────────────────────────────────────────────────────────────────

    accept_timeout: float = 1.0
    """
    Poll interval of the accept loop. It only affects how quickly a
    shutdown request is noticed, never the client sessions.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        ECHO_HOST         Bind address (default: 0.0.0.0)
        ECHO_PORT         Listening port (default: 9000)
        ECHO_BACKLOG      Accept queue depth (default: 10)
        ECHO_BUFFER_SIZE  Bytes per read (default: 1024)
        ECHO_LOG_LEVEL    Logging level (default: INFO)

        =====================================================================
        """
        try:
            return cls(
                host=os.getenv("ECHO_HOST", "0.0.0.0"),
                port=int(os.getenv("ECHO_PORT", "9000")),
                backlog=int(os.getenv("ECHO_BACKLOG", "10")),
                buffer_size=int(os.getenv("ECHO_BUFFER_SIZE", "1024")),
                log_level=os.getenv("ECHO_LOG_LEVEL", "INFO"),
            )
        except ValueError as e:
            raise ConfigError(f"Invalid environment configuration: {e}") from e

    def validate(self) -> None:
        """Fail fast on values the server cannot run with."""
        if not 0 < self.port < 65536:
            raise ConfigError(f"Invalid port: {self.port}. Must be 1-65535.")

        if self.backlog < 1:
            raise ConfigError("backlog must be >= 1")

        if self.buffer_size < 1:
            raise ConfigError("buffer_size must be >= 1")

        if self.accept_timeout <= 0:
            raise ConfigError("accept_timeout must be > 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(
                f"Invalid log level: {self.log_level}. "
                f"Must be one of {', '.join(LOG_LEVELS)}."
            )
