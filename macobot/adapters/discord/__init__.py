"""Discord backend."""

from macobot.adapters.discord.adapter import DiscordBotAdapter, DiscordChatAdapter

__all__ = ["DiscordBotAdapter", "DiscordChatAdapter"]
