"""Inbound port — platform-agnostic message representation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class IncomingMessage:
    """Mattermost/Discord-agnostic chat message.

    ``is_posted`` is False for events that carry a message but are not a new
    post (edits and the like); the dispatcher ignores those.
    """

    sender_id: str
    channel_id: str
    message_id: str
    text: str
    is_posted: bool = True
    root_id: str = ""  # thread root when the message is itself a reply

    @property
    def thread_id(self) -> str:
        """Id to thread replies under."""
        return self.root_id or self.message_id
