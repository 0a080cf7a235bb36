"""Tests for Discord adapter — IncomingMessage conversion and ChatPort sends."""

import asyncio
from types import SimpleNamespace

import discord
import pytest

from macobot.adapters.discord.adapter import MESSAGE_LIMIT, DiscordBotAdapter, DiscordChatAdapter
from macobot.ports.outbound import ChatPort


def run(coro):
    """Helper to run async functions in sync tests."""
    return asyncio.run(coro)


class FakeChannel:
    def __init__(self, fail=False):
        self.sent = []
        self._fail = fail

    async def send(self, text, reference=None):
        if self._fail:
            raise discord.HTTPException(SimpleNamespace(status=500, reason="boom"), "boom")
        self.sent.append((text, reference))


class FakeClient:
    def __init__(self, channels=None, users=None):
        self._channels = channels or {}
        self._users = users or {}
        self.fetched = []

    def get_channel(self, channel_id):
        return self._channels.get(channel_id)

    def get_user(self, user_id):
        return None

    async def fetch_user(self, user_id):
        self.fetched.append(user_id)
        if user_id not in self._users:
            raise discord.NotFound(SimpleNamespace(status=404, reason="Not Found"), "unknown user")
        return SimpleNamespace(name=self._users[user_id])


class TestIncomingMessage:
    def test_conversion(self):
        message = SimpleNamespace(
            id=555,
            content="=deploy staging",
            author=SimpleNamespace(id=42),
            channel=SimpleNamespace(id=100),
        )
        msg = DiscordBotAdapter._to_incoming(message)
        assert msg.sender_id == "42"
        assert msg.channel_id == "100"
        assert msg.message_id == "555"
        assert msg.text == "=deploy staging"
        assert msg.is_posted is True
        assert msg.thread_id == "555"


class TestDiscordChatAdapter:
    def test_is_chat_port(self):
        assert isinstance(DiscordChatAdapter(FakeClient()), ChatPort)

    def test_post_plain(self):
        channel = FakeChannel()
        adapter = DiscordChatAdapter(FakeClient(channels={100: channel}))
        assert run(adapter.post("OUT>a", "100")) is True
        assert channel.sent == [("OUT>a", None)]

    def test_post_reply(self):
        channel = FakeChannel()
        adapter = DiscordChatAdapter(FakeClient(channels={100: channel}))
        run(adapter.post("---", "100", "555"))
        text, reference = channel.sent[0]
        assert text == "---"
        assert reference.message_id == 555
        assert reference.channel_id == 100

    def test_long_message_split(self):
        channel = FakeChannel()
        adapter = DiscordChatAdapter(FakeClient(channels={100: channel}))
        run(adapter.post("x" * (MESSAGE_LIMIT + 10), "100"))
        assert [len(text) for text, _ in channel.sent] == [MESSAGE_LIMIT, 10]

    def test_unknown_channel(self):
        adapter = DiscordChatAdapter(FakeClient())
        assert run(adapter.post("hi", "999")) is False

    def test_send_failure_logged(self, capsys):
        adapter = DiscordChatAdapter(FakeClient(channels={100: FakeChannel(fail=True)}))
        assert run(adapter.post("hi", "100")) is False
        assert "failed to send" in capsys.readouterr().err

    def test_username_fetched(self):
        client = FakeClient(users={42: "alice"})
        adapter = DiscordChatAdapter(client)
        assert run(adapter.get_username("42")) == "alice"
        assert client.fetched == [42]

    def test_unknown_user(self):
        adapter = DiscordChatAdapter(FakeClient())
        assert run(adapter.get_username("7")) is None
