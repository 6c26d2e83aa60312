"""
Response bytes for each routing decision.
"""

from .message import Message
from .router import Decision


ECHO_PREFIX = b"Echo: "
GOODBYE = b"Goodbye.\n"


def build_response(message: Message, decision: Decision) -> bytes:
    """
    Build the bytes to send back for a message.

    ECHO keeps the original bytes, newline included, so the peer receives
    exactly one line per message.

    Args:
        message: The message being answered.
        decision: Result of route(message).

    Returns:
        Response bytes ready for sendall().
    """
    if decision is Decision.TERMINATE:
        return GOODBYE
    return ECHO_PREFIX + message.data
