"""Discord adapter — bridges discord.Client to the Dispatcher.

Converts Discord messages to IncomingMessage and exposes channel sends as a
ChatPort. Threading is a message reply.
"""

import sys
from typing import Optional

import discord

from macobot.config import BotConfig
from macobot.domain.dispatcher import Dispatcher
from macobot.ports.inbound import IncomingMessage

MESSAGE_LIMIT = 2000


def _log(msg: str):
    print(msg, file=sys.stderr)


class DiscordChatAdapter:
    """ChatPort implementation using discord.Client."""

    def __init__(self, client: discord.Client):
        self._client = client

    async def post(self, text: str, channel_id: str, thread_id: Optional[str] = None) -> bool:
        channel = self._client.get_channel(int(channel_id))
        if channel is None:
            _log(f"[discord] unknown channel {channel_id}")
            return False

        reference = None
        if thread_id:
            reference = discord.MessageReference(
                message_id=int(thread_id),
                channel_id=int(channel_id),
                fail_if_not_exists=False,
            )
        try:
            # Split long messages
            while text:
                await channel.send(text[:MESSAGE_LIMIT], reference=reference)
                text = text[MESSAGE_LIMIT:]
            return True
        except discord.HTTPException as e:
            _log(f"[discord] failed to send a message to channel {channel_id}: {e}")
            return False

    async def get_username(self, user_id: str) -> Optional[str]:
        user = self._client.get_user(int(user_id))
        if user is None:
            try:
                user = await self._client.fetch_user(int(user_id))
            except discord.HTTPException as e:
                _log(f"[discord] user lookup failed for {user_id}: {e}")
                return None
        return user.name


class DiscordBotAdapter(discord.Client):
    """Thin Discord client that delegates every message to a Dispatcher."""

    def __init__(self, config: BotConfig, **discord_kwargs):
        intents = discord.Intents.default()
        intents.message_content = True
        super().__init__(intents=intents, **discord_kwargs)
        self._config = config
        self.chat = DiscordChatAdapter(self)
        self.dispatcher: Optional[Dispatcher] = None

    @staticmethod
    def _to_incoming(message: discord.Message) -> IncomingMessage:
        """Convert a Discord message to platform-agnostic IncomingMessage."""
        return IncomingMessage(
            sender_id=str(message.author.id),
            channel_id=str(message.channel.id),
            message_id=str(message.id),
            text=message.content,
        )

    async def on_ready(self):
        # on_ready fires again after reconnects; keep the first session
        if self.dispatcher is not None:
            return
        _log(f"[discord] logged in as {self.user}")
        channel_id = str(self._config.discord.channel_id)
        self.dispatcher = Dispatcher.from_config(
            self._config,
            self.chat,
            bot_user_id=str(self.user.id),
            bot_username=self.user.name,
            channel_id=channel_id,
        )
        await self.chat.post(f"_{self.user.name} **connected**_", channel_id)

    async def on_message(self, message: discord.Message):
        if self.dispatcher is None:
            return
        await self.dispatcher.handle(self._to_incoming(message))

    async def close(self):
        if self.dispatcher is not None and not self.is_closed():
            await self.chat.post(
                f"_{self.dispatcher.session.bot_username} **disconnected**_",
                self.dispatcher.session.channel_id,
            )
        await super().close()
