"""Tests for display binding persistence and message cleanup."""

import discord
import pytest

from queuebot.display.platform import Lookup
from queuebot.display.registry import DisplayTargetRegistry
from shared.models.display import DisplayTarget

from .fakes import QUEUE_ID, FakeDisplayRepository, http_error, make_channel


@pytest.fixture
def displays():
    return FakeDisplayRepository(
        [
            DisplayTarget(1, QUEUE_ID, 11, 101),
            DisplayTarget(2, QUEUE_ID, 12, 102),
            DisplayTarget(3, 300, 11, 103),
        ]
    )


@pytest.fixture
def registry(displays, platform, guild):
    platform.get_channel.side_effect = lambda cid: make_channel(cid, guild)
    return DisplayTargetRegistry(displays, platform)


async def test_targets_for_queue(registry):
    targets = await registry.targets_for(QUEUE_ID)
    assert [t.message_id for t in targets] == [101, 102]


async def test_find_by_message(registry):
    assert (await registry.find_by_message(103)).queue_channel_id == 300
    assert await registry.find_by_message(999) is None


async def test_attach_records_sent_message(registry, platform, displays, guild):
    channel = make_channel(14, guild)
    embed = discord.Embed(title="q")

    target = await registry.attach(QUEUE_ID, channel, embed, None)

    platform.send_message.assert_awaited_once_with(channel, embed, None)
    assert target.message_id == 9000
    assert await registry.find_by_message(9000) == target


async def test_attach_send_failure(registry, platform, displays, guild):
    platform.send_message.side_effect = http_error(discord.Forbidden, 403, "Missing Permissions")

    target = await registry.attach(QUEUE_ID, make_channel(14, guild), discord.Embed(), None)

    assert target is None
    assert len(displays.targets) == 3


async def test_detach_one_channel_deletes_message(registry, platform, displays):
    removed = await registry.detach(QUEUE_ID, 11)

    assert [t.message_id for t in removed] == [101]
    assert [t.message_id for t in displays.targets] == [102, 103]
    assert platform.delete_message.await_args.args[0].id == 101


async def test_detach_all_strips_controls(registry, platform, displays):
    removed = await registry.detach(QUEUE_ID, delete_old=False)

    assert len(removed) == 2
    assert [t.message_id for t in displays.targets] == [103]
    assert [c.args[0].id for c in platform.strip_controls.await_args_list] == [101, 102]
    platform.delete_message.assert_not_awaited()


async def test_detach_skips_missing_messages(registry, platform, displays):
    platform.fetch_message.side_effect = None
    platform.fetch_message.return_value = Lookup.from_error(
        http_error(discord.NotFound, 404, "Unknown Message")
    )

    removed = await registry.detach(QUEUE_ID)

    assert len(removed) == 2
    platform.delete_message.assert_not_awaited()


async def test_detach_survives_cleanup_failure(registry, platform, displays):
    platform.delete_message.side_effect = http_error(discord.Forbidden, 403, "Missing Access")

    removed = await registry.detach(QUEUE_ID)

    assert len(removed) == 2
    assert [t.message_id for t in displays.targets] == [103]


async def test_detach_uncached_channel(registry, platform):
    platform.get_channel.side_effect = None
    platform.get_channel.return_value = None

    removed = await registry.detach(QUEUE_ID, 12)

    assert [t.message_id for t in removed] == [102]
    platform.fetch_message.assert_not_awaited()
