"""Discord operations used by the display engine.

Lookups return a ``Lookup`` instead of raising, separating surfaces that are
gone for good (not found, forbidden) from transient failures, since the
first deregisters a display and the second only skips it.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import discord

logger = logging.getLogger(__name__)

T = TypeVar("T")

NO_MENTIONS = discord.AllowedMentions(everyone=False, users=False, roles=False)


class LookupStatus(enum.Enum):
    FOUND = "found"
    GONE = "gone"
    FAILED = "failed"


@dataclass(frozen=True)
class Lookup(Generic[T]):
    status: LookupStatus
    value: T | None = None
    error: Exception | None = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND

    @classmethod
    def of(cls, value: T) -> Lookup[T]:
        return cls(LookupStatus.FOUND, value)

    @classmethod
    def from_error(cls, error: Exception) -> Lookup[T]:
        if isinstance(error, (discord.NotFound, discord.Forbidden)):
            return cls(LookupStatus.GONE, error=error)
        return cls(LookupStatus.FAILED, error=error)


class PlatformClient:
    """Wraps a ``discord.Client`` so the engine can run against a fake."""

    def __init__(self, client: discord.Client) -> None:
        self.client = client

    # ==================== Cache ====================

    def get_guild(self, guild_id: int) -> discord.Guild | None:
        return self.client.get_guild(guild_id)

    def get_channel(self, channel_id: int) -> Any:
        return self.client.get_channel(channel_id)

    def emoji_resolver(self) -> Callable[[str], str | None]:
        """Snapshot the bot's emojis as a name -> inline emoji lookup."""
        emojis = {emoji.name: str(emoji) for emoji in self.client.emojis}
        return emojis.get

    # ==================== Lookups ====================

    async def fetch_channel(self, channel_id: int) -> Lookup[Any]:
        if channel := self.client.get_channel(channel_id):
            return Lookup.of(channel)
        try:
            return Lookup.of(await self.client.fetch_channel(channel_id))
        except discord.HTTPException as e:
            return Lookup.from_error(e)

    async def fetch_message(self, channel: Any, message_id: int) -> Lookup[discord.Message]:
        try:
            return Lookup.of(await channel.fetch_message(message_id))
        except discord.HTTPException as e:
            return Lookup.from_error(e)

    async def fetch_member(self, guild: discord.Guild, member_id: int) -> Lookup[discord.Member]:
        if member := guild.get_member(member_id):
            return Lookup.of(member)
        try:
            return Lookup.of(await guild.fetch_member(member_id))
        except discord.HTTPException as e:
            return Lookup.from_error(e)

    def can_post(self, channel: Any) -> bool:
        """Whether the bot may send and embed in ``channel``."""
        guild = getattr(channel, "guild", None)
        if guild is None:
            return False
        perms = channel.permissions_for(guild.me)
        return perms.send_messages and perms.embed_links

    # ==================== Messages ====================
    # Views go out stopped so the client view store never holds them

    async def send_message(
        self, channel: Any, embed: discord.Embed, view: discord.ui.View | None
    ) -> discord.Message:
        kwargs: dict[str, Any] = {"embed": embed, "allowed_mentions": NO_MENTIONS}
        if view is not None:
            view.stop()
            kwargs["view"] = view
        return await channel.send(**kwargs)

    async def edit_message(
        self, message: discord.Message, embed: discord.Embed, view: discord.ui.View | None
    ) -> None:
        # view=None clears the components when a queue hides its button
        if view is not None:
            view.stop()
        await message.edit(embed=embed, view=view, allowed_mentions=NO_MENTIONS)

    async def delete_message(self, message: discord.Message) -> None:
        await message.delete()

    async def strip_controls(self, message: discord.Message) -> None:
        """Keep the old embed but remove its buttons."""
        await message.edit(embeds=message.embeds, view=None)
