"""
Shared command-line plumbing for the server and client programs.

Both programs treat bad arguments as a setup failure: usage and an error
message go to stderr and the process exits with status 1.
"""

import argparse
import re
import socket
import sys


EXIT_OK = 0
EXIT_SETUP_FAILURE = 1

# Same shape strtol() accepts: leading whitespace, optional plus sign
_PORT = re.compile(r"\s*\+?[0-9]+")


class UsageArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors (argparse uses 2)."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_SETUP_FAILURE, f"{self.prog}: error: {message}\n")


def port_number(value: str) -> int:
    """argparse type: a decimal port number in 1..65535."""
    if not _PORT.fullmatch(value):
        raise argparse.ArgumentTypeError(f"Invalid port: {value}")

    port = int(value)
    if not 0 < port < 65536:
        raise argparse.ArgumentTypeError(f"Invalid port: {value}")
    return port


def ipv4_address(value: str) -> str:
    """argparse type: a dotted-decimal IPv4 address."""
    try:
        socket.inet_pton(socket.AF_INET, value)
    except (OSError, ValueError):
        raise argparse.ArgumentTypeError(f"Invalid server IP address: {value}")
    return value
