"""Port interfaces (Hexagonal Architecture)."""

from macobot.ports.inbound import IncomingMessage
from macobot.ports.outbound import ChatPort

__all__ = [
    "IncomingMessage",
    "ChatPort",
]
