"""Mattermost backend."""

from macobot.adapters.mattermost.client import MattermostClient, MattermostError
from macobot.adapters.mattermost.listener import listen
from macobot.adapters.mattermost.models import to_incoming

__all__ = ["MattermostClient", "MattermostError", "listen", "to_incoming"]
