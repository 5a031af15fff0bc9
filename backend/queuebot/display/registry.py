"""Persisted display bindings and the messages they point at."""

from __future__ import annotations

import logging
from typing import Any

import discord

from shared.models.display import DisplayTarget
from shared.repositories.display import DisplayTargetRepository

from .platform import PlatformClient

logger = logging.getLogger(__name__)


class DisplayTargetRegistry:
    """Single source of truth for which messages mirror which queue."""

    def __init__(self, repo: DisplayTargetRepository, platform: PlatformClient) -> None:
        self.repo = repo
        self.platform = platform

    async def targets_for(self, queue_id: int) -> list[DisplayTarget]:
        return await self.repo.get_for_queue(queue_id)

    async def find_by_message(self, message_id: int) -> DisplayTarget | None:
        return await self.repo.get_by_message(message_id)

    async def attach(
        self,
        queue_id: int,
        channel: Any,
        embed: discord.Embed,
        view: discord.ui.View | None,
    ) -> DisplayTarget | None:
        """Post a new display message and record it. Returns None if sending failed."""
        try:
            message = await self.platform.send_message(channel, embed, view)
        except discord.HTTPException as e:
            logger.warning(f"Cannot send display for queue {queue_id} to {channel.id}: {e}")
            return None
        target = await self.repo.insert(queue_id, channel.id, message.id)
        logger.debug(f"Display {message.id} attached to queue {queue_id} in {channel.id}")
        return target

    async def detach(
        self,
        queue_id: int,
        channel_id: int | None = None,
        *,
        delete_old: bool = True,
    ) -> list[DisplayTarget]:
        """Drop bindings, then delete their messages or just strip the buttons.

        Rows go first so a failing message cleanup never leaves a binding behind.
        """
        removed = await self.repo.delete(queue_id, channel_id)
        for target in removed:
            channel = self.platform.get_channel(target.display_channel_id)
            if channel is None:
                continue
            lookup = await self.platform.fetch_message(channel, target.message_id)
            if not lookup.found:
                continue
            try:
                if delete_old:
                    await self.platform.delete_message(lookup.value)
                else:
                    await self.platform.strip_controls(lookup.value)
            except discord.HTTPException as e:
                logger.debug(f"Old display {target.message_id} cleanup failed: {e}")
        return removed
