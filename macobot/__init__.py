"""Macobot — chat-driven command runner package."""

from macobot.config import __version__, BotConfig
from macobot.domain import BotSession, ParsedCommand, RunOutcome, parse_command, format_issue_links
from macobot.domain.dispatcher import Dispatcher
from macobot.executor import CommandFailed, CommandRunner, relay_stream
from macobot.ports import ChatPort, IncomingMessage

__all__ = [
    "__version__",
    "BotConfig",
    "BotSession",
    "ParsedCommand",
    "RunOutcome",
    "parse_command",
    "format_issue_links",
    "Dispatcher",
    "CommandFailed",
    "CommandRunner",
    "relay_stream",
    "ChatPort",
    "IncomingMessage",
]
