"""Dispatcher — routes incoming chat messages to annotation, built-ins and runs.

No chat framework import; testable with a mock ChatPort.
"""

import asyncio
import sys
from typing import Optional, Set

from macobot.config import BotConfig
from macobot.domain.command_parser import UPTIME_COMMAND, parse_command
from macobot.domain.issue_links import format_issue_links
from macobot.domain.models import BotSession, ParsedCommand, RunOutcome
from macobot.executor import CommandRunner
from macobot.ports.inbound import IncomingMessage
from macobot.ports.outbound import ChatPort


def _log(msg: str):
    print(msg, file=sys.stderr)


def success_notice(command: str) -> str:
    return f"---\n:white_check_mark: cmd {command} executed"


def failure_notice(command: str, error: BaseException) -> str:
    return f"---\n:red_circle: cmd {command} ERROR: {error}"


class Dispatcher:
    """Handles one incoming message at a time.

    Command runs are started as background tasks so a long command does not
    hold up the next message; ``wait_idle`` joins them.
    """

    def __init__(self, session: BotSession, chat: ChatPort, runner: Optional[CommandRunner] = None):
        self.session = session
        self._chat = chat
        self._runner = runner or CommandRunner(session, chat)
        self._active_runs: Set[asyncio.Task] = set()

    @classmethod
    def from_config(
        cls,
        config: BotConfig,
        chat: ChatPort,
        bot_user_id: str,
        bot_username: str,
        channel_id: str,
        **session_extra,
    ) -> "Dispatcher":
        """Build the session, runner and dispatcher once the backend is connected."""
        session = BotSession(
            bot_user_id=bot_user_id,
            bot_username=bot_username,
            channel_id=channel_id,
            command_path=config.runner.command,
            issue_link=config.issue_link,
            sigil=config.sigil,
            args_mode=config.runner.args_mode,
            **session_extra,
        )
        return cls(session, chat, CommandRunner(session, chat, config.runner))

    @property
    def active_runs(self) -> int:
        return len(self._active_runs)

    async def handle(self, msg: Optional[IncomingMessage]) -> Optional[asyncio.Task]:
        """Process one message; returns the run task when a command was started."""
        if msg is None or not msg.is_posted:
            return None

        # ignore my own posts
        if msg.sender_id == self.session.bot_user_id:
            return None

        if self.session.issue_link:
            await self._annotate(msg)

        if msg.channel_id != self.session.channel_id:
            return None

        command = parse_command(msg.text, self.session.sigil)
        if command is None:
            return None

        _log(f"GOT> {msg.text}")
        if command.name == UPTIME_COMMAND:
            await self._chat.post(
                f"I'm up since {self.session.started_display()}",
                self.session.channel_id,
                msg.thread_id,
            )
            return None

        username = await self._chat.get_username(msg.sender_id) or msg.sender_id
        await self._chat.post(
            f"Running command **{command.name}** requested by @{username}",
            self.session.channel_id,
            msg.thread_id,
        )
        task = asyncio.create_task(self.run_command(command, msg.thread_id))
        self._active_runs.add(task)
        task.add_done_callback(self._active_runs.discard)
        return task

    async def run_command(self, command: ParsedCommand, thread_id: Optional[str]) -> RunOutcome:
        """Execute ``command`` and post its terminal status notice."""
        outcome = await self._runner.execute(command, thread_id)
        if outcome.success:
            text = success_notice(command.name)
        else:
            text = failure_notice(command.name, outcome.error)
        await self._chat.post(text, self.session.channel_id, thread_id)
        return outcome

    async def wait_idle(self):
        """Wait until every started command has posted its terminal notice."""
        while self._active_runs:
            await asyncio.gather(*list(self._active_runs), return_exceptions=True)

    async def _annotate(self, msg: IncomingMessage):
        reply = format_issue_links(msg.text, self.session.issue_link)
        if reply:
            await self._chat.post(reply, msg.channel_id, msg.thread_id)
