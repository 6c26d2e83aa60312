"""
=============================================================================
MESSAGE ROUTING
=============================================================================

Every message takes one of two paths:

    ┌──────────────────┐
    │     Message      │
    └────────┬─────────┘
             │
             ▼
    data == b"exit\n" ? ──── yes ───► TERMINATE  ("Goodbye.\n", then close)
             │
             no
             │
             ▼
           ECHO  ("Echo: " + data)

The sentinel comparison is byte-exact and case-sensitive. The newline is
part of the sentinel: b"exit" without it, b"EXIT\n" or b"exit\r\n" are
ordinary messages and get echoed.
=============================================================================
"""

from enum import Enum

from .message import Message


SENTINEL = b"exit\n"


class Decision(Enum):
    """What the session does with a message."""

    ECHO = "echo"
    TERMINATE = "terminate"


def route(message: Message) -> Decision:
    """Select TERMINATE for the sentinel, ECHO for everything else."""
    if message.data == SENTINEL:
        return Decision.TERMINATE
    return Decision.ECHO
