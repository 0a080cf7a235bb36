"""Outbound ports — interfaces for chat backend adapters."""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class ChatPort(Protocol):
    """Interface for posting into a chat channel.

    ``post`` must be safe to call concurrently from several tasks. Failures
    are logged by the adapter and reported as False, never raised.
    """

    async def post(self, text: str, channel_id: str, thread_id: Optional[str] = None) -> bool: ...

    async def get_username(self, user_id: str) -> Optional[str]: ...
