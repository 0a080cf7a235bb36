"""Domain data models — pure Python dataclasses."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class ParsedCommand:
    """Command recognized in a message: ``=deploy staging`` -> ("deploy", "staging")."""

    name: str
    remainder: Optional[str] = None

    def argv(self, mode: str = "split") -> List[str]:
        """Argument vector handed to the executable, command name first.

        ``split`` breaks the remainder on whitespace, ``raw`` passes it as a
        single argument.
        """
        if not self.remainder:
            return [self.name]
        if mode == "raw":
            return [self.name, self.remainder]
        return [self.name, *self.remainder.split()]


@dataclass
class RelayResult:
    """How one output stream relay ended."""

    stream: str
    lines: int = 0
    completed: bool = True  # False when a read error stopped the relay early


@dataclass
class RunOutcome:
    """Terminal result of a single command execution."""

    command: str
    success: bool
    error: Optional[BaseException] = None
    relays: List[RelayResult] = field(default_factory=list)


@dataclass(frozen=True)
class BotSession:
    """Connection-lifetime state shared by the dispatcher and the runner.

    Built once the backend has resolved the bot identity and the command
    channel; ``started`` is fixed at construction.
    """

    bot_user_id: str
    bot_username: str
    channel_id: str
    command_path: str
    issue_link: str = ""
    sigil: str = "="
    args_mode: str = "split"
    server_url: str = ""
    team: str = ""
    channel_name: str = ""
    started: datetime = field(default_factory=datetime.now)

    def started_display(self) -> str:
        """Start moment as ``Mon Jan  2 15:04:05 2006``."""
        s = self.started
        return f"{s:%a %b} {s.day:2d} {s:%H:%M:%S %Y}"
