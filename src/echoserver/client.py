"""
=============================================================================
ECHO CLIENT
=============================================================================

The interactive counterpart to the server.

    python -m echoserver.client 127.0.0.1 9000

    Connecting to 127.0.0.1:9000 ...
    Connected. Type a message and press Enter.
    Type 'exit' to close the client.
    > hello
    Server: Echo: hello
    > exit
    Server: Goodbye.
    Client disconnected.

=============================================================================
ONE LINE, ONE REPLY
=============================================================================

    Client                                  Server
      │  "hello\n"  ─────────────────────────► │
      │ ◄───────────────────  "Echo: hello\n"  │
      │  "exit\n"   ─────────────────────────► │
      │ ◄───────────────────────  "Goodbye.\n" │
      │ ◄──────────────────────────────── FIN  │

The client sends a line and then blocks for exactly one read before it
sends the next one. A zero-byte read means the server closed the
connection.
=============================================================================
"""

import socket
import sys
from typing import Optional, TextIO

from .cli import UsageArgumentParser, ipv4_address, port_number, EXIT_OK, EXIT_SETUP_FAILURE
from .errors import ConnectError, SessionIoError
from .protocol import NEWLINE, SENTINEL


EXIT_COMMAND = SENTINEL.decode().rstrip("\n")


class EchoClient:
    """
    A single connection to an echo server.

    Usage:
        with EchoClient("127.0.0.1", 9000) as client:
            reply = client.send_line("hello")   # b"Echo: hello\\n"
    """

    def __init__(self, host: str, port: int, buffer_size: int = 1024,
                 timeout: Optional[float] = None):
        self.host = host
        self.port = port
        self.buffer_size = buffer_size
        self.timeout = timeout
        self._socket: Optional[socket.socket] = None

    @property
    def is_connected(self) -> bool:
        return self._socket is not None

    def connect(self) -> "EchoClient":
        """
        Open the connection.

        Raises:
            ConnectError: If the socket cannot be created or the server
                          cannot be reached.
        """
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as e:
            raise ConnectError(self.host, self.port, e) from e

        try:
            sock.settimeout(self.timeout)
            sock.connect((self.host, self.port))
        except OSError as e:
            sock.close()
            raise ConnectError(self.host, self.port, e) from e

        self._socket = sock
        return self

    def send_line(self, line) -> bytes:
        """
        Send one line and wait for exactly one reply.

        Args:
            line: str or bytes. A trailing newline is added if missing.

        Returns:
            The reply bytes, or b"" if the server closed the connection.

        Raises:
            SessionIoError: If sending or receiving fails.
        """
        if self._socket is None:
            raise SessionIoError("Client is not connected")

        data = line.encode("utf-8") if isinstance(line, str) else bytes(line)
        if not data.endswith(NEWLINE):
            data += NEWLINE

        try:
            self._socket.sendall(data)
        except OSError as e:
            raise SessionIoError(f"Send failed: {e}") from e

        try:
            return self._socket.recv(self.buffer_size)
        except OSError as e:
            raise SessionIoError(f"Receive failed: {e}") from e

    def close(self):
        if self._socket is not None:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

    def __enter__(self):
        if not self.is_connected:
            self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def run_console(client: EchoClient, stdin: TextIO = None, stdout: TextIO = None,
                stderr: TextIO = None) -> int:
    """
    Read lines from the console and show the server's replies.

    Typing "exit" sends the sentinel, prints the server's goodbye and
    ends the loop. End of console input ends it too.

    Returns:
        The process exit status (always EXIT_OK; setup failures happen
        before this loop starts).
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    while True:
        stdout.write("> ")
        stdout.flush()

        line = stdin.readline()
        if not line:
            break  # Console EOF

        line = line.rstrip("\r\n")

        try:
            reply = client.send_line(line)
        except SessionIoError as e:
            print(e, file=stderr)
            break

        if not reply:
            print("Server closed the connection.", file=stdout)
            break

        stdout.write("Server: " + reply.decode("utf-8", errors="replace"))
        if not reply.endswith(NEWLINE):
            stdout.write("\n")

        if line == EXIT_COMMAND:
            break

    return EXIT_OK


def build_parser() -> UsageArgumentParser:
    parser = UsageArgumentParser(
        prog="echo-client",
        description="Interactive client for the TCP echo server",
    )
    parser.add_argument("server_ip", type=ipv4_address, help="Server IPv4 address")
    parser.add_argument("port", type=port_number, help="Server port (1-65535)")
    return parser


def main(argv=None) -> int:
    """Client CLI entry point."""
    args = build_parser().parse_args(argv)

    client = EchoClient(args.server_ip, args.port)

    print(f"Connecting to {args.server_ip}:{args.port} ...")
    try:
        client.connect()
    except ConnectError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_SETUP_FAILURE

    print("Connected. Type a message and press Enter.")
    print(f"Type '{EXIT_COMMAND}' to close the client.")

    try:
        status = run_console(client)
    finally:
        client.close()

    print("Client disconnected.")
    return status


if __name__ == "__main__":
    sys.exit(main())
