"""Best-effort consistency pass over a guild's queue data.

Runs after display refreshes. Removes display bindings whose channel was
deleted, and rank settings and queue memberships of members who left the
guild. Member checks only run once the guild's member list is fully
loaded, otherwise uncached members would look like departed ones.
"""

from __future__ import annotations

import logging

import discord

from shared.models.queue import QueueSnapshot
from shared.repositories.queue import QueueRepository
from shared.repositories.rank import RankSettingsRepository

from .platform import PlatformClient
from .registry import DisplayTargetRegistry

logger = logging.getLogger(__name__)


class QueueValidator:
    def __init__(
        self,
        platform: PlatformClient,
        queues: QueueRepository,
        registry: DisplayTargetRegistry,
        ranks: RankSettingsRepository,
    ) -> None:
        self.platform = platform
        self.queues = queues
        self.registry = registry
        self.ranks = ranks

    async def validate_guild(self, guild_id: int) -> bool:
        """Returns True if anything was cleaned up."""
        guild = self.platform.get_guild(guild_id)
        if guild is None:
            return False

        changed = False
        for queue in await self.queues.list_for_guild(guild_id):
            changed |= await self._validate_displays(guild, queue)
            if guild.chunked:
                changed |= await self._validate_members(guild, queue)
        if guild.chunked:
            changed |= await self._validate_rank_settings(guild)
        return changed

    async def _validate_displays(self, guild: discord.Guild, queue: QueueSnapshot) -> bool:
        changed = False
        for target in await self.registry.targets_for(queue.channel_id):
            if guild.get_channel_or_thread(target.display_channel_id) is None:
                await self.registry.detach(queue.channel_id, target.display_channel_id)
                logger.info(
                    f"Removed display of queue {queue.channel_id} in deleted channel "
                    f"{target.display_channel_id}"
                )
                changed = True
        return changed

    async def _validate_members(self, guild: discord.Guild, queue: QueueSnapshot) -> bool:
        members = await self.queues.get_ordered_members(queue.channel_id)
        departed = [m.member_id for m in members if guild.get_member(m.member_id) is None]
        if not departed:
            return False
        removed = await self.queues.remove_members(guild.id, queue.channel_id, departed)
        logger.info(f"Removed {removed} departed member(s) from queue {queue.channel_id}")
        return removed > 0

    async def _validate_rank_settings(self, guild: discord.Guild) -> bool:
        changed = False
        for setting in await self.ranks.list_for_guild(guild.id):
            if guild.get_member(setting.member_id) is None:
                await self.ranks.delete(guild.id, setting.member_id)
                changed = True
        return changed
