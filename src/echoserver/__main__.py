"""
=============================================================================
ECHO SERVER CLI ENTRY POINT
=============================================================================

    # Listen on port 9000 (all interfaces)
    python -m echoserver 9000

    # Verbose logging
    python -m echoserver 9000 --log-level DEBUG

Exit status:
    0   server stopped by SIGINT/SIGTERM
    1   bad arguments, bad configuration, or socket/bind/listen failure
=============================================================================
"""

import sys

from . import __version__
from .cli import UsageArgumentParser, port_number, EXIT_OK, EXIT_SETUP_FAILURE
from .config import ServerConfig, LOG_LEVELS
from .errors import SetupError
from .server import EchoServer


def build_parser() -> UsageArgumentParser:
    parser = UsageArgumentParser(
        prog="echo-server",
        description="Blocking TCP echo server (one client at a time)",
    )

    parser.add_argument(
        "port",
        type=port_number,
        help="Port to listen on (1-65535)",
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: INFO, or $ECHO_LOG_LEVEL)",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"PyEcho {__version__}",
    )

    return parser


def main(argv=None) -> int:
    """
    Main CLI entry point.

    Environment variables supply defaults (see ServerConfig.from_env);
    the port argument and --log-level override them.
    """
    args = build_parser().parse_args(argv)

    try:
        config = ServerConfig.from_env()
        config.port = args.port
        if args.log_level:
            config.log_level = args.log_level

        server = EchoServer(config)
        server.run()
    except SetupError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_SETUP_FAILURE

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
