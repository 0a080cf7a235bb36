"""Mattermost API v4 wire models (only the fields the bot reads)."""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from macobot.ports.inbound import IncomingMessage

EVENT_POSTED = "posted"
EVENT_POST_EDITED = "post_edited"


class _Model(BaseModel):
    model_config = ConfigDict(extra="ignore")


class User(_Model):
    id: str
    username: str = ""


class Team(_Model):
    id: str
    name: str = ""


class Channel(_Model):
    id: str
    name: str = ""
    team_id: str = ""


class Post(_Model):
    id: str
    channel_id: str
    user_id: str
    message: str = ""
    root_id: str = ""


class WebSocketEvent(_Model):
    event: str = ""
    data: Dict[str, Any] = Field(default_factory=dict)
    broadcast: Dict[str, Any] = Field(default_factory=dict)
    seq: int = 0


def to_incoming(frame: Union[str, bytes, Dict[str, Any]]) -> Optional[IncomingMessage]:
    """Convert a websocket frame to IncomingMessage.

    Returns None for events that do not carry a post and for malformed
    frames or payloads.
    """
    try:
        if isinstance(frame, (str, bytes)):
            event = WebSocketEvent.model_validate_json(frame)
        else:
            event = WebSocketEvent.model_validate(frame)
    except ValidationError:
        return None

    if event.event not in (EVENT_POSTED, EVENT_POST_EDITED):
        return None

    payload = event.data.get("post")
    if not isinstance(payload, str):
        return None
    try:
        post = Post.model_validate_json(payload)
    except ValidationError:
        return None

    return IncomingMessage(
        sender_id=post.user_id,
        channel_id=post.channel_id,
        message_id=post.id,
        text=post.message,
        is_posted=event.event == EVENT_POSTED,
        root_id=post.root_id,
    )
