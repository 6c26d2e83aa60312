"""
=============================================================================
MESSAGES
=============================================================================

TCP is a byte stream, not a message protocol. This service keeps framing
as simple as it gets: ONE recv() call produces ONE message.

    Client sends:   "hello\n"
    recv(1024)  →   b"hello\n"             → Message(b"hello\n")

    Client sends:   1500 bytes, no newline
    recv(1024)  →   first 1024 bytes       → Message #1
    recv(1024)  →   remaining 476 bytes    → Message #2

There is no reassembly. A line split across two reads becomes two
messages and gets two echoes. The bytes are carried through untouched so
the echo is byte-for-byte identical to what arrived.
=============================================================================
"""

from dataclasses import dataclass


NEWLINE = b"\n"


@dataclass(frozen=True)
class Message:
    """
    The bytes produced by a single read.

    Attributes:
        data: Raw bytes exactly as received, trailing newline included.
    """

    data: bytes

    @property
    def text(self) -> str:
        """Text view of the message, for logs and display only."""
        return self.data.decode("utf-8", errors="replace")

    @property
    def is_line(self) -> bool:
        """True if the read ended on a newline terminator."""
        return self.data.endswith(NEWLINE)

    def __len__(self) -> int:
        return len(self.data)


def decode(data: bytes) -> Message:
    """Wrap received bytes as a Message. No parsing is performed."""
    return Message(bytes(data))
