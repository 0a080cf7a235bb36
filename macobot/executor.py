"""Command executor — runs the configured executable and relays its output."""

import asyncio
import signal
import sys
from typing import Optional

from macobot.config import RunnerConfig
from macobot.domain.models import BotSession, ParsedCommand, RelayResult, RunOutcome
from macobot.ports.outbound import ChatPort

START_DELIMITER = "---"


def _log(msg: str):
    print(msg, file=sys.stderr)


class CommandFailed(Exception):
    """Process finished with a non-zero status or was killed by a signal."""

    def __init__(self, returncode: int):
        self.returncode = returncode
        if returncode < 0:
            try:
                reason = f"signal: {signal.Signals(-returncode).name}"
            except ValueError:
                reason = f"signal: {-returncode}"
        else:
            reason = f"exit status {returncode}"
        super().__init__(reason)


async def _read_line(stream: asyncio.StreamReader) -> bytes:
    """Read one line of any length; at end of stream return what is left."""
    chunks = []
    while True:
        try:
            chunks.append(await stream.readuntil(b"\n"))
            break
        except asyncio.IncompleteReadError as e:
            chunks.append(e.partial)
            break
        except asyncio.LimitOverrunError as e:
            # line longer than the reader buffer; take what is buffered
            chunks.append(await stream.read(e.consumed))
    return b"".join(chunks)


async def relay_stream(
    stream: asyncio.StreamReader,
    chat: ChatPort,
    channel_id: str,
    name: str,
    prefix: str = "",
    emphasis: str = "",
) -> RelayResult:
    """Post every line of ``stream`` to ``channel_id`` until end of stream.

    A read error ends the relay without posting anything about it; the
    returned result has ``completed=False``.
    """
    result = RelayResult(stream=name)
    while True:
        try:
            raw = await _read_line(stream)
        except Exception as e:
            _log(f"[relay] {name} stopped after {result.lines} line(s): {e}")
            result.completed = False
            return result
        if not raw:
            return result
        line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
        text = f"{emphasis}{prefix}{line}"
        if not text.strip():
            continue
        await chat.post(text, channel_id)
        result.lines += 1


class CommandRunner:
    """Runs one command per ``execute`` call, no retries, no timeout."""

    def __init__(
        self,
        session: BotSession,
        chat: ChatPort,
        config: Optional[RunnerConfig] = None,
    ):
        self._session = session
        self._chat = chat
        self._config = config or RunnerConfig()

    async def execute(self, command: ParsedCommand, thread_id: Optional[str] = None) -> RunOutcome:
        """Run ``command`` and wait for the process and both relays.

        Posts the start delimiter and the output lines; the terminal status
        notice is left to the caller.
        """
        channel_id = self._session.channel_id
        await self._chat.post(START_DELIMITER, channel_id, thread_id)

        argv = command.argv(self._session.args_mode)
        try:
            proc = await asyncio.create_subprocess_exec(
                self._session.command_path,
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as e:  # ValueError: NUL byte in an argument
            _log(f"CMD:ERROR {e}")
            return RunOutcome(command=command.name, success=False, error=e)

        cfg = self._config
        relays = [
            asyncio.create_task(relay_stream(
                proc.stdout, self._chat, channel_id, "stdout",
                prefix=cfg.stdout_prefix, emphasis=cfg.stdout_emphasis,
            )),
            asyncio.create_task(relay_stream(
                proc.stderr, self._chat, channel_id, "stderr",
                prefix=cfg.stderr_prefix, emphasis=cfg.stderr_emphasis,
            )),
        ]
        returncode, *results = await asyncio.gather(proc.wait(), *relays)

        if returncode != 0:
            error = CommandFailed(returncode)
            _log(f"CMD:ERROR {error}")
            return RunOutcome(command=command.name, success=False, error=error, relays=results)

        _log("CMD:SUCCESS")
        return RunOutcome(command=command.name, success=True, relays=results)
