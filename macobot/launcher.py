"""Launcher — connects the configured chat backend and runs until interrupted."""

import asyncio
import signal
import sys

import aiohttp

from macobot.adapters.mattermost import MattermostClient, MattermostError, listen
from macobot.config import BotConfig
from macobot.domain.dispatcher import Dispatcher


def _log(msg: str):
    print(msg, file=sys.stderr)


class SetupError(RuntimeError):
    """Backend could not be brought up; the process should exit."""


async def connect_mattermost(config: BotConfig, client: MattermostClient) -> Dispatcher:
    """Ping the server, log in, resolve team and channel, build the dispatcher."""
    mm = config.mattermost
    try:
        version = await client.ping()
        _log(f"Server detected and is running version {version}")

        user = await client.login()
        _log(f"Logged in as {user.username}")

        team = await client.get_team_by_name(mm.team)
        channel = await client.get_channel_by_name(team.id, mm.channel)
    except (aiohttp.ClientError, MattermostError, ValueError) as e:
        raise SetupError(f"Mattermost setup failed: {e}") from e

    return Dispatcher.from_config(
        config,
        client,
        bot_user_id=user.id,
        bot_username=user.username,
        channel_id=channel.id,
        server_url=mm.url,
        team=team.name,
        channel_name=channel.name,
    )


def _install_stop_handlers(stop: asyncio.Event):
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            pass  # Windows


async def run_mattermost(config: BotConfig):
    async with MattermostClient(config.mattermost) as client:
        dispatcher = await connect_mattermost(config, client)
        session = dispatcher.session
        await client.post(f"_{session.bot_username} **connected**_", session.channel_id)

        stop = asyncio.Event()
        _install_stop_handlers(stop)
        listener = asyncio.create_task(listen(client, dispatcher))
        stopper = asyncio.create_task(stop.wait())
        await asyncio.wait({listener, stopper}, return_when=asyncio.FIRST_COMPLETED)

        stopper.cancel()
        if dispatcher.active_runs:
            _log(f"{dispatcher.active_runs} command(s) still running at shutdown")
        await client.post(f"_{session.bot_username} **disconnected**_", session.channel_id)
        if not listener.done():
            listener.cancel()
            try:
                await listener
            except asyncio.CancelledError:
                pass
        elif listener.exception() is not None:
            _log(f"[mattermost] listener failed: {listener.exception()}")
    _log("Shutdown")


async def run_discord(config: BotConfig):
    from macobot.adapters.discord import DiscordBotAdapter

    bot = DiscordBotAdapter(config)
    try:
        await bot.start(config.discord.token)
    finally:
        if not bot.is_closed():
            await bot.close()
    _log("Shutdown")


async def launch(config: BotConfig) -> int:
    """Run the bot for ``config.backend``; returns a process exit status."""
    if config.backend == "discord":
        if not config.discord.is_configured:
            _log("Discord backend needs DISCORD_TOKEN and DISCORD_CHANNEL_ID.")
            return 2
        await run_discord(config)
        return 0

    if not config.mattermost.is_configured:
        _log("Mattermost backend needs --addr, --login, --password, --team and --channel.")
        return 2
    try:
        await run_mattermost(config)
    except SetupError as e:
        _log(str(e))
        return 1
    return 0
