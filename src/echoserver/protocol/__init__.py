"""
=============================================================================
ECHO PROTOCOL
=============================================================================

The wire protocol, free of any socket code:

    message.py   Message, decode()       bytes → Message
    router.py    Decision, route()       Message → ECHO | TERMINATE
    response.py  build_response()        (Message, Decision) → bytes

    Client → Server    any text line ending in "\n"
    Server → Client    "Echo: " + line        (ECHO)
                       "Goodbye.\n"           (TERMINATE, then close)
=============================================================================
"""

from .message import Message, decode, NEWLINE
from .router import Decision, route, SENTINEL
from .response import build_response, ECHO_PREFIX, GOODBYE

__all__ = [
    "Message",
    "decode",
    "NEWLINE",
    "Decision",
    "route",
    "SENTINEL",
    "build_response",
    "ECHO_PREFIX",
    "GOODBYE",
]
