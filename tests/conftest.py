"""Shared fixtures for queue display tests."""

from unittest.mock import MagicMock

import pytest

from queuebot.display.platform import Lookup, PlatformClient

from .fakes import GUILD_ID, make_channel


@pytest.fixture
def guild():
    guild = MagicMock(name="guild")
    guild.id = GUILD_ID
    guild.chunked = True
    guild.get_channel.return_value = None
    guild.get_channel_or_thread.return_value = None
    guild.get_member.return_value = None
    return guild


@pytest.fixture
def platform(guild):
    """PlatformClient double: every display channel and message is found and postable."""
    platform = MagicMock(spec=PlatformClient)
    platform.get_guild.return_value = guild
    platform.get_channel.return_value = None
    platform.emoji_resolver.return_value = lambda name: None
    platform.can_post.return_value = True

    async def fetch_channel(channel_id):
        return Lookup.of(make_channel(channel_id, guild))

    async def fetch_message(channel, message_id):
        message = MagicMock(name=f"message-{message_id}")
        message.id = message_id
        message.channel = channel
        return Lookup.of(message)

    platform.fetch_channel.side_effect = fetch_channel
    platform.fetch_message.side_effect = fetch_message
    platform.send_message.return_value = MagicMock(id=9000)
    return platform
