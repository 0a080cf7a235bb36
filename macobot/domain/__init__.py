"""Domain layer — pure Python, no chat framework dependencies."""

from macobot.domain.models import BotSession, ParsedCommand, RelayResult, RunOutcome
from macobot.domain.command_parser import UPTIME_COMMAND, parse_command
from macobot.domain.issue_links import find_issue_ids, format_issue_links

__all__ = [
    "BotSession",
    "ParsedCommand",
    "RelayResult",
    "RunOutcome",
    "UPTIME_COMMAND",
    "parse_command",
    "find_issue_ids",
    "format_issue_links",
]
